"""Public API for turnaround: master-prompt analysis, frame generation and interpolation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from turnaround_api.core.angles import target_angle
from turnaround_api.core.config import Settings
from turnaround_api.core.contracts import (
    TEXT_MODALITIES,
    FrameInput,
    GenerationFailure,
    GenerationRequest,
    ImagePayload,
    InterpolationResult,
    ProgressCallback,
    ProgressEvent,
    SceneSpec,
)
from turnaround_api.core.data_url import coerce_payload, read_image_payload
from turnaround_api.core.errors import (
    AnalysisError,
    FrameGenerationError,
    GenerationCancelled,
    ImageGenerationError,
    InterpolationError,
)
from turnaround_api.core.export import write_frames, write_gif
from turnaround_api.core.prompts import (
    INTERPOLATION_PROMPT,
    build_analysis_prompt,
    build_edit_prompt,
    build_enhance_prompt,
    build_frame_prompt,
    build_single_image_prompt,
)
from turnaround_api.core.receipts import build_receipt, write_receipt
from turnaround_api.core.utils import ImageSource, ensure_out_dir
from turnaround_api.providers import get_adapter
from turnaround_api.providers.base import ProviderAdapter


logger = logging.getLogger(__name__)


def _emit(on_progress: Optional[ProgressCallback], current: int, total: int, message: str) -> None:
    if on_progress is not None:
        on_progress(ProgressEvent(current=current, total=total, message=message))


async def create_master_prompt(
    reference: ImagePayload,
    scene: SceneSpec,
    *,
    adapter: ProviderAdapter,
) -> str:
    """Ask the text model for one subject/style/background description shared by every frame."""
    request = GenerationRequest(
        prompt=build_analysis_prompt(scene),
        reference_images=(reference,),
        response_modalities=TEXT_MODALITIES,
    )
    try:
        text = await adapter.describe(request)
    except Exception as exc:
        raise AnalysisError(f"Image analysis failed: {exc}") from exc
    text = (text or "").strip()
    if not text:
        raise AnalysisError("Image analysis returned an empty master prompt.")
    return text


async def analyze_and_generate(
    reference: ImagePayload | ImageSource,
    scene: SceneSpec,
    on_progress: Optional[ProgressCallback] = None,
    *,
    adapter: Optional[ProviderAdapter] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> List[ImagePayload]:
    """Generate ``scene.frame_count`` rotated views of ``reference``.

    Each frame is conditioned on the previous generated frame (the reference
    itself for the first one) plus the shared master prompt. The first
    failure aborts the run with :class:`FrameGenerationError`; no partial
    sequence is returned.
    """
    adapter = adapter or get_adapter()
    frame_count = scene.frame_count
    total = scene.total_steps

    logger.info(
        "turntable run started frames=%d style=%s background=%s",
        frame_count,
        scene.style.value,
        scene.background_mode.value,
    )
    _emit(on_progress, 0, total, "Analyzing image & requirements...")
    reference_payload = await read_image_payload(reference)
    master_prompt = await create_master_prompt(reference_payload, scene, adapter=adapter)
    logger.debug("master prompt: %s", master_prompt)
    _emit(on_progress, 1, total, "Analysis complete. Generating frames...")

    frames: List[ImagePayload] = []
    previous_image = reference_payload
    previous_angle = 0
    for idx in range(frame_count):
        if cancel_event is not None and cancel_event.is_set():
            raise GenerationCancelled(completed=len(frames))
        angle = target_angle(idx, frame_count)
        request = GenerationRequest(
            prompt=build_frame_prompt(master_prompt, scene, previous_angle, angle),
            reference_images=(previous_image,),
        )
        logger.debug("frame %d/%d: %d -> %d degrees", idx + 1, frame_count, previous_angle, angle)
        try:
            result = await adapter.generate_image(request)
        except Exception as exc:
            raise FrameGenerationError(idx, angle, str(exc) or exc.__class__.__name__) from exc
        if isinstance(result, GenerationFailure):
            raise FrameGenerationError(idx, angle, result.reason)
        frames.append(result.image)
        previous_image, previous_angle = result.image, angle
        _emit(on_progress, idx + 2, total, f"Frame {idx + 1} complete.")

    logger.info("turntable run finished frames=%d", len(frames))
    return frames


async def interpolate(
    frames: Sequence[FrameInput],
    on_progress: Optional[ProgressCallback] = None,
    *,
    adapter: Optional[ProviderAdapter] = None,
) -> InterpolationResult:
    """Insert one in-between frame after each frame, treating the sequence as a loop.

    Failures are logged and skipped, so the result holds between M and 2M frames.
    """
    base = [coerce_payload(frame) for frame in frames]
    if not base:
        raise ValueError("interpolate() needs at least one frame.")
    adapter = adapter or get_adapter()
    total = len(base)
    output: List[ImagePayload] = []
    skipped: List[int] = []

    for idx, frame_a in enumerate(base):
        _emit(on_progress, idx, total, f"Interpolating frame {idx + 1} of {total}...")
        next_idx = (idx + 1) % total
        output.append(frame_a)
        request = GenerationRequest(
            prompt=INTERPOLATION_PROMPT,
            reference_images=(frame_a, base[next_idx]),
        )
        try:
            result = await adapter.generate_image(request)
        except Exception as exc:
            result = GenerationFailure(reason=str(exc) or exc.__class__.__name__)
        if isinstance(result, GenerationFailure):
            logger.warning("%s", InterpolationError(idx, next_idx, result.reason))
            skipped.append(idx)
            continue
        output.append(result.image)

    _emit(on_progress, total, total, "Interpolation complete!")
    return InterpolationResult(frames=output, skipped_pairs=tuple(skipped))


async def _single_image(adapter: Optional[ProviderAdapter], request: GenerationRequest, error_message: str) -> ImagePayload:
    adapter = adapter or get_adapter()
    result = await adapter.generate_image(request)
    if isinstance(result, GenerationFailure):
        raise ImageGenerationError(f"{error_message} Reason: {result.reason}")
    return result.image


async def generate_single_image(prompt: str, *, adapter: Optional[ProviderAdapter] = None) -> ImagePayload:
    request = GenerationRequest(prompt=build_single_image_prompt(prompt))
    return await _single_image(adapter, request, "Image generation failed to produce an image.")


async def edit_single_image(
    image: ImagePayload | ImageSource,
    instruction: str,
    *,
    adapter: Optional[ProviderAdapter] = None,
) -> ImagePayload:
    request = GenerationRequest(
        prompt=build_edit_prompt(instruction),
        reference_images=(await read_image_payload(image),),
    )
    return await _single_image(adapter, request, "Image editing failed to return a new image.")


async def enhance_drawing(
    sketch: ImagePayload | ImageSource,
    prompt: str,
    *,
    adapter: Optional[ProviderAdapter] = None,
) -> ImagePayload:
    """Render a rough sketch as a finished image while keeping its composition."""
    request = GenerationRequest(
        prompt=build_enhance_prompt(prompt),
        reference_images=(await read_image_payload(sketch),),
    )
    return await _single_image(adapter, request, "Image enhancement failed to return an image.")


@dataclass
class TurntableArtifacts:
    frame_paths: List[Path]
    receipt_path: Path
    gif_path: Optional[Path] = None


def frame_angles(frame_count: int, total_frames: int, skipped_pairs: Sequence[int] = ()) -> List[Optional[int]]:
    """Angles for each written frame; interpolated frames get ``None``."""
    base = [target_angle(idx, frame_count) for idx in range(frame_count)]
    if total_frames == frame_count:
        return list(base)
    angles: List[Optional[int]] = []
    skipped = set(skipped_pairs)
    for idx, angle in enumerate(base):
        angles.append(angle)
        if idx not in skipped:
            angles.append(None)
    return angles


def save_turntable(
    frames: Sequence[ImagePayload],
    *,
    scene: SceneSpec,
    settings: Optional[Settings] = None,
    out_dir: Optional[str | Path] = None,
    reference_path: Optional[Path] = None,
    interpolation: Optional[InterpolationResult] = None,
    gif: bool = False,
    gif_duration_ms: int = 120,
) -> TurntableArtifacts:
    out_path = ensure_out_dir(Path(out_dir) if out_dir else None)
    frame_paths = write_frames(frames, out_path)
    skipped = tuple(interpolation.skipped_pairs) if interpolation is not None else ()
    receipt_path = out_path / "receipt.json"
    gif_path: Optional[Path] = None
    try:
        if gif:
            gif_path = write_gif(frames, out_path / "turntable.gif", gif_duration_ms)
    finally:
        # The receipt always describes whatever frames reached disk.
        write_receipt(
            receipt_path,
            build_receipt(
                scene=scene,
                settings=settings or Settings.from_env(),
                reference_path=reference_path,
                frame_paths=frame_paths,
                angles=frame_angles(scene.frame_count, len(frames), skipped),
                interpolated=interpolation is not None,
                skipped_pairs=skipped,
                gif_path=gif_path,
            ),
        )
    return TurntableArtifacts(frame_paths=frame_paths, receipt_path=receipt_path, gif_path=gif_path)
