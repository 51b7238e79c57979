"""Error taxonomy for the turnaround pipeline."""

from __future__ import annotations

from typing import Optional


class TurnaroundError(RuntimeError):
    """Base class; ``code`` is a stable identifier for telemetry and retry policy."""

    code = "turnaround"


class ConfigurationError(TurnaroundError):
    code = "configuration"


class ParseError(TurnaroundError, ValueError):
    code = "parse"


class ReadError(TurnaroundError):
    code = "read"


class AnalysisError(TurnaroundError):
    code = "analysis"


class ImageGenerationError(TurnaroundError):
    code = "generation"


class FrameGenerationError(ImageGenerationError):
    code = "frame_generation"

    def __init__(self, index: int, angle: int, reason: str) -> None:
        self.index = index
        self.angle = angle
        self.reason = reason
        super().__init__(
            f"Failed to generate frame {index + 1} at {angle} degrees. Reason: {reason}"
        )


class InterpolationError(TurnaroundError):
    """Recorded for a skipped pair; logged by the interpolation pass, never raised to callers."""

    code = "interpolation"

    def __init__(self, pair_index: int, next_index: int, reason: str) -> None:
        self.pair_index = pair_index
        self.next_index = next_index
        self.reason = reason
        super().__init__(
            f"Interpolation failed for frame between {pair_index} and {next_index}: {reason}"
        )


class ExportError(TurnaroundError):
    code = "export"


class GenerationCancelled(TurnaroundError):
    code = "cancelled"

    def __init__(self, completed: int, message: Optional[str] = None) -> None:
        self.completed = completed
        super().__init__(message or f"Generation cancelled after {completed} frame(s).")
