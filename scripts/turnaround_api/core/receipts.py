"""Receipt writer for turnaround artifacts."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from .config import Settings
from .contracts import SceneSpec


def _serialize(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, str):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, bytes):
        return f"<bytes:{len(value)}>"
    if is_dataclass(value) and not isinstance(value, type):
        return {k: _serialize(v) for k, v in asdict(value).items()}
    if isinstance(value, Mapping):
        return {str(k): _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    return str(value)


def build_receipt(
    *,
    scene: SceneSpec,
    settings: Settings,
    reference_path: Optional[Path],
    frame_paths: Sequence[Path],
    angles: Sequence[Optional[int]],
    interpolated: bool,
    skipped_pairs: Sequence[int] = (),
    gif_path: Optional[Path] = None,
) -> dict[str, Any]:
    return {
        "scene": _serialize(scene),
        "settings": _serialize(settings),
        "reference": _serialize(reference_path),
        "frames": [
            {"path": str(path), "angle": angle}
            for path, angle in zip(frame_paths, angles)
        ],
        "interpolation": {
            "enabled": interpolated,
            "skipped_pairs": list(skipped_pairs),
        },
        "artifacts": {
            "gif_path": _serialize(gif_path),
        },
    }


def write_receipt(path: Path, payload: Mapping[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)
        handle.write("\n")
