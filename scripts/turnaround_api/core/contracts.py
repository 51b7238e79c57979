"""Core data contracts for the turnaround pipeline."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Literal, Sequence, Tuple, Union


Modality = Literal["IMAGE", "TEXT"]

FRAME_COUNT_MIN = 4
FRAME_COUNT_MAX = 12
DEFAULT_FRAME_COUNT = 4
DEFAULT_SUBJECT = "A high-quality image of this object"
MAX_REFERENCE_IMAGES = 2

IMAGE_MODALITIES: Tuple[Modality, ...] = ("IMAGE", "TEXT")
TEXT_MODALITIES: Tuple[Modality, ...] = ("TEXT",)


class StylePreset(str, Enum):
    PHOTOREALISTIC = "Photorealistic"
    CARTOON = "Cartoon"
    CLAY_MODEL = "Clay Model"
    WATERCOLOR = "Watercolor"
    PIXEL_ART = "Pixel Art"
    FANTASY = "Fantasy"
    SCI_FI = "Sci-Fi"


class BackgroundMode(str, Enum):
    ORIGINAL = "Original"
    TRANSPARENT = "Transparent"
    CUSTOM = "Custom"


@dataclass(frozen=True)
class ImagePayload:
    data: bytes
    mime_type: str

    @property
    def base64_data(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"

    def __repr__(self) -> str:
        return f"ImagePayload(mime_type={self.mime_type!r}, bytes={len(self.data)})"


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    reference_images: Tuple[ImagePayload, ...] = ()
    response_modalities: Tuple[Modality, ...] = IMAGE_MODALITIES

    def __post_init__(self) -> None:
        # Accept any sequence from callers but store an immutable tuple.
        object.__setattr__(self, "reference_images", tuple(self.reference_images))
        if len(self.reference_images) > MAX_REFERENCE_IMAGES:
            raise ValueError(
                f"At most {MAX_REFERENCE_IMAGES} reference images are supported, "
                f"got {len(self.reference_images)}."
            )


@dataclass(frozen=True)
class GenerationSuccess:
    image: ImagePayload
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class GenerationFailure:
    reason: str
    ok: bool = field(default=False, init=False)


GenerationResult = Union[GenerationSuccess, GenerationFailure]


@dataclass(frozen=True)
class ProgressEvent:
    current: int
    total: int
    message: str = ""

    def __post_init__(self) -> None:
        if self.total <= 0:
            raise ValueError("ProgressEvent.total must be positive")
        if self.current < 0:
            raise ValueError("ProgressEvent.current must be non-negative")


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass(frozen=True)
class SceneSpec:
    subject_description: str = DEFAULT_SUBJECT
    style: StylePreset = StylePreset.PHOTOREALISTIC
    background_mode: BackgroundMode = BackgroundMode.ORIGINAL
    custom_background: str = ""
    frame_count: int = DEFAULT_FRAME_COUNT

    def __post_init__(self) -> None:
        object.__setattr__(self, "custom_background", self.custom_background or "")
        object.__setattr__(self, "style", StylePreset(self.style))
        object.__setattr__(self, "background_mode", BackgroundMode(self.background_mode))
        if not FRAME_COUNT_MIN <= self.frame_count <= FRAME_COUNT_MAX:
            raise ValueError(
                f"frame_count must be between {FRAME_COUNT_MIN} and {FRAME_COUNT_MAX}, "
                f"got {self.frame_count}."
            )
        if self.background_mode is BackgroundMode.CUSTOM and not self.custom_background.strip():
            raise ValueError("custom_background is required when background_mode is Custom.")

    @property
    def total_steps(self) -> int:
        # One analysis step plus one step per frame.
        return self.frame_count + 1


@dataclass(frozen=True)
class InterpolationResult:
    frames: List[ImagePayload]
    skipped_pairs: Sequence[int] = ()

    @property
    def ignored_failure_count(self) -> int:
        return len(self.skipped_pairs)


FrameInput = Union[ImagePayload, str]
