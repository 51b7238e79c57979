"""Conversion between data URLs, files and image payloads."""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from .contracts import FrameInput, ImagePayload
from .errors import ParseError, ReadError
from .utils import ImageSource, mime_from_suffix, read_input_bytes


_MIME_RE = re.compile(r":(.*?);")


@dataclass(frozen=True)
class ParsedDataUrl:
    base64_data: str
    mime_type: str


@dataclass(frozen=True)
class ImageFile:
    """Named binary blob, the file-shaped counterpart of a data URL."""

    filename: str
    data: bytes
    mime_type: str

    def open(self) -> io.BytesIO:
        handle = io.BytesIO(self.data)
        handle.name = self.filename
        return handle

    def write(self, directory: Path) -> Path:
        path = Path(directory) / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.data)
        return path


def parse_data_url(data_url: str) -> ParsedDataUrl:
    """Split ``data:<mime>;base64,<payload>`` into payload and MIME type."""
    header, _, base64_data = data_url.partition(",")
    match = _MIME_RE.search(header)
    if not match or not match.group(1) or not base64_data:
        raise ParseError("Unable to parse data URL.")
    return ParsedDataUrl(base64_data=base64_data, mime_type=match.group(1))


def to_data_url(data: bytes, mime_type: str) -> str:
    return ImagePayload(data=data, mime_type=mime_type).to_data_url()


def _b64decode(value: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ParseError(f"Data URL payload is not valid base64: {exc}") from exc


def decode_data_url(data_url: str) -> ImagePayload:
    parsed = parse_data_url(data_url)
    return ImagePayload(data=_b64decode(parsed.base64_data), mime_type=parsed.mime_type)


def to_file(data_url: str, filename: str) -> ImageFile:
    payload = decode_data_url(data_url)
    return ImageFile(filename=filename, data=payload.data, mime_type=payload.mime_type)


def sniff_mime_type(data: bytes) -> Optional[str]:
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError):
        return None
    if not fmt:
        return None
    return Image.MIME.get(fmt.upper())


def _load_payload(source: ImageSource, mime_type: Optional[str]) -> ImagePayload:
    try:
        data, path_str = read_input_bytes(source)
    except OSError as exc:
        raise ReadError(f"Failed to read the file: {exc}") from exc
    if not data:
        raise ReadError("File did not produce a valid data URL payload.")
    resolved = mime_type or mime_from_suffix(path_str) or sniff_mime_type(data)
    if not resolved:
        raise ReadError("Unable to determine the image type of the input file.")
    return ImagePayload(data=data, mime_type=resolved)


async def read_image_payload(
    source: Union[ImagePayload, ImageSource], mime_type: Optional[str] = None
) -> ImagePayload:
    """Read a path, raw bytes or binary file object into an :class:`ImagePayload`."""
    if isinstance(source, ImagePayload):
        return source
    return await asyncio.to_thread(_load_payload, source, mime_type)


def coerce_payload(frame: FrameInput) -> ImagePayload:
    if isinstance(frame, ImagePayload):
        return frame
    if isinstance(frame, str):
        return decode_data_url(frame)
    raise TypeError(f"Unsupported frame type: {type(frame)}")
