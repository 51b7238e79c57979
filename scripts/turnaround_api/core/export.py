"""Write frame sequences to disk as individual images or an animated GIF."""

from __future__ import annotations

import io
from pathlib import Path
from typing import List, Sequence

from PIL import Image

from .contracts import ImagePayload
from .errors import ExportError
from .utils import extension_from_mime


def write_frames(frames: Sequence[ImagePayload], out_dir: Path, prefix: str = "frame") -> List[Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    paths: List[Path] = []
    for idx, frame in enumerate(frames):
        path = out_dir / f"{prefix}_{idx:03d}.{extension_from_mime(frame.mime_type)}"
        path.write_bytes(frame.data)
        paths.append(path)
    return paths


def _decode(index: int, frame: ImagePayload) -> Image.Image:
    try:
        with Image.open(io.BytesIO(frame.data)) as img:
            img.load()
            return img.convert("RGBA")
    except OSError as exc:
        # UnidentifiedImageError is an OSError.
        raise ExportError(f"Frame {index} ({frame.mime_type}) is not a decodable image: {exc}") from exc


def write_gif(frames: Sequence[ImagePayload], path: Path, duration_ms: int = 120) -> Path:
    """Assemble ``frames`` into a looping GIF; every frame is fitted to the first frame's size."""
    if not frames:
        raise ValueError("Cannot build a GIF from an empty frame sequence.")
    if duration_ms <= 0:
        raise ValueError("duration_ms must be positive")
    images = [_decode(idx, frame) for idx, frame in enumerate(frames)]
    size = images[0].size
    images = [img if img.size == size else img.resize(size, Image.Resampling.LANCZOS) for img in images]
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    images[0].save(
        path,
        format="GIF",
        save_all=True,
        append_images=images[1:],
        duration=duration_ms,
        loop=0,
        disposal=2,
    )
    return path
