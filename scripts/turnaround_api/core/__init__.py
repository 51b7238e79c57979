"""Core contracts and helpers."""

from .contracts import (
    BackgroundMode,
    GenerationFailure,
    GenerationRequest,
    GenerationResult,
    GenerationSuccess,
    ImagePayload,
    InterpolationResult,
    ProgressEvent,
    SceneSpec,
    StylePreset,
)
from .errors import (
    AnalysisError,
    ConfigurationError,
    ExportError,
    FrameGenerationError,
    GenerationCancelled,
    ImageGenerationError,
    InterpolationError,
    ParseError,
    ReadError,
    TurnaroundError,
)

__all__ = [
    "AnalysisError",
    "BackgroundMode",
    "ConfigurationError",
    "ExportError",
    "FrameGenerationError",
    "GenerationCancelled",
    "GenerationFailure",
    "GenerationRequest",
    "GenerationResult",
    "GenerationSuccess",
    "ImageGenerationError",
    "ImagePayload",
    "InterpolationError",
    "InterpolationResult",
    "ParseError",
    "ProgressEvent",
    "ReadError",
    "SceneSpec",
    "StylePreset",
    "TurnaroundError",
]
