"""Rotation schedule for turntable frames."""

from __future__ import annotations

from typing import List

FULL_TURN = 360


def round_half_up(numerator: int, denominator: int) -> int:
    """Round ``numerator / denominator`` to the nearest integer, ties going up.

    Works in exact integer arithmetic so ties are never lost to float error.
    For the non-negative angles used here this is the same as rounding half
    away from zero.
    """
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return (2 * numerator + denominator) // (2 * denominator)


def target_angle(index: int, frame_count: int) -> int:
    if frame_count <= 0:
        raise ValueError("frame_count must be positive")
    if index < 0 or index >= frame_count:
        raise ValueError(f"frame index {index} out of range for {frame_count} frames")
    return round_half_up((index + 1) * FULL_TURN, frame_count)


def target_angles(frame_count: int) -> List[int]:
    # Frame 0 is the first rotated view; the 0 degree view is the reference itself.
    return [target_angle(idx, frame_count) for idx in range(frame_count)]
