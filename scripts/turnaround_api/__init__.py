"""turnaround public surface."""

from .api import (
    analyze_and_generate,
    create_master_prompt,
    edit_single_image,
    enhance_drawing,
    generate_single_image,
    interpolate,
    save_turntable,
)
from .core import (
    BackgroundMode,
    ImagePayload,
    InterpolationResult,
    ProgressEvent,
    SceneSpec,
    StylePreset,
    TurnaroundError,
)
from .core.data_url import parse_data_url, read_image_payload, to_data_url, to_file

__all__ = [
    "analyze_and_generate",
    "create_master_prompt",
    "edit_single_image",
    "enhance_drawing",
    "generate_single_image",
    "interpolate",
    "save_turntable",
    "BackgroundMode",
    "ImagePayload",
    "InterpolationResult",
    "ProgressEvent",
    "SceneSpec",
    "StylePreset",
    "TurnaroundError",
    "parse_data_url",
    "read_image_payload",
    "to_data_url",
    "to_file",
]
