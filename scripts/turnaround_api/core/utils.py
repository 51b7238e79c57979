"""Utility helpers for turnaround."""

from __future__ import annotations

import io
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Optional, Tuple, Union

ImageSource = Union[str, Path, bytes, BinaryIO]

_SUFFIX_MIME = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def ensure_out_dir(out_dir: Optional[Path]) -> Path:
    if out_dir is None:
        root = Path(os.getenv("TURNAROUND_OUTPUTS", "outputs"))
        out_dir = root / "turnaround" / utc_timestamp()
    out_dir = Path(out_dir).expanduser().resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir


def mime_from_suffix(path_str: Optional[str]) -> Optional[str]:
    if not path_str:
        return None
    return _SUFFIX_MIME.get(Path(path_str).suffix.lower())


def extension_from_mime(mime_type: Optional[str], fallback: str = "png") -> str:
    if mime_type:
        mime = mime_type.lower()
        if mime.endswith("/jpeg") or mime.endswith("/jpg"):
            return "jpg"
        if mime.endswith("/png"):
            return "png"
        if mime.endswith("/webp"):
            return "webp"
        if "/" in mime:
            return mime.split("/", 1)[1]
    if fallback == "jpeg":
        return "jpg"
    return fallback


def read_input_bytes(value: ImageSource) -> Tuple[bytes, Optional[str]]:
    if isinstance(value, bytes):
        return value, None
    if isinstance(value, Path):
        return value.read_bytes(), str(value)
    if isinstance(value, str):
        path = Path(value).expanduser().resolve()
        return path.read_bytes(), str(path)
    if isinstance(value, io.IOBase) or hasattr(value, "read"):
        data = value.read()
        if not isinstance(data, bytes):
            raise TypeError("File inputs must be opened in binary mode.")
        name = getattr(value, "name", None)
        return data, name if isinstance(name, str) else None
    raise TypeError(f"Unsupported input type: {type(value)}")
