"""Prompt templates for analysis, per-frame rotation and interpolation."""

from __future__ import annotations

from typing import Optional, Union

from .contracts import BackgroundMode, SceneSpec


_BACKGROUND_TEMPLATES = {
    BackgroundMode.ORIGINAL: (
        "Preserve the exact background from the uploaded image. Do not change it."
    ),
    BackgroundMode.TRANSPARENT: (
        "The background must be perfectly transparent. Only the subject should be visible."
    ),
    BackgroundMode.CUSTOM: (
        'Use a detailed scene described as: "{custom}". This background must remain static '
        "and consistent in perspective, lighting, and all elements across every frame."
    ),
}

# Used when the mode is not a known BackgroundMode value.
FALLBACK_BACKGROUND_INSTRUCTION = "Preserve the exact background from the uploaded image."

ANALYSIS_TEMPLATE = """\
You are an expert prompt engineer for an advanced text-to-image AI model. Your task is to \
synthesize the user's inputs into a single, detailed "master prompt". The master prompt is \
reused unchanged for every frame of a 360-degree rotation, so it must pin down the subject's \
appearance and keep it from drifting between frames.

**PRIORITIES, IN ORDER:**
1. **The user's choices win.** The requested style and background override what the uploaded \
image shows. The image is a reference for the subject's form and identity, not its style or \
environment.
2. **The main subject is the anchor.** The central object or character from the uploaded image \
must stay the focus. Describe its fundamental shape and key features precisely.
3. **Style is a command.** The output MUST be in the "{style}" style, even if the reference \
image has a different look.
4. **Background is conditional.** With the 'Original' mode, describe and keep the background \
from the image. With 'Transparent' or 'Custom', IGNORE the original background and follow the \
background instruction instead.

**USER SPECIFICATIONS:**
- **Subject Description:** "{subject}"
- **Mandatory Artistic Style:** "{style}"
- **Background Mode:** "{background_mode}"
- **Background Instruction:** "{background_instruction}"

**TASK:**
1. Analyze the reference image ONLY for the subject's core characteristics.
2. Write a detailed, narrative description of that subject rendered in the "{style}" style.
3. Integrate the background exactly as instructed; it must match the style as well.
4. Keep the scene static: lighting, subject and background are fixed and only the camera moves.
5. Describe only subject, style and scene. Do not mention camera angles or leave placeholders \
for them.

**OUTPUT FORMAT:**
Produce ONLY the final master prompt text. No explanations, no preamble, no markdown."""

ROTATION_TEMPLATE = (
    "**ROTATION TASK:** The provided image shows the subject at approximately a "
    "{previous}-degree horizontal angle. Generate the next frame, rotating the subject to a "
    "{target}-degree horizontal view. Keep style, lighting, scale, and background perfectly "
    "consistent with the master prompt above. The rotation should be smooth and incremental, "
    "and the subject must remain perfectly centered."
)

SCENE_LOCK_TEMPLATE = '**STYLE LOCK:** "{style}" style. Background mode "{background_mode}": {background_instruction}'

INTERPOLATION_PROMPT = (
    "You are an expert in video frame interpolation. Generate a single intermediate frame that "
    "transitions smoothly between the two provided images. Image 1 is the starting frame and "
    "Image 2 is the ending frame. The new frame must sit at the exact halfway point of the "
    "rotation between them, blending the subject's position, scale, lighting and background to "
    "create fluid motion. Do not introduce any new elements. Output only the image."
)

SINGLE_IMAGE_TEMPLATE = (
    'Generate a high-quality image based on this description: "{prompt}". The subject should be '
    "centered with a clean or transparent background unless specified otherwise."
)

EDIT_TEMPLATE = (
    'Modify the uploaded image by following this instruction: "{instruction}". Maintain the '
    "original style and composition."
)

ENHANCE_TEMPLATE = (
    "You are an AI image generation assistant. Turn the user's rough sketch (the provided image) "
    "into a fully realized, high-quality image.\n"
    "**CRITICAL:** The composition, shapes, and placement of objects MUST strictly follow the "
    'sketch. Use the text prompt "{prompt}" ONLY for artistic style, color, texture and finer '
    "details. Do not add, remove, or reposition major elements. The result must be an enhanced, "
    "detailed version of the drawing."
)


def _coerce_mode(mode: Union[BackgroundMode, str, None]) -> Optional[BackgroundMode]:
    if isinstance(mode, BackgroundMode):
        return mode
    try:
        return BackgroundMode(mode)
    except (TypeError, ValueError):
        return None


def background_instruction(mode: Union[BackgroundMode, str, None], custom_background: str = "") -> str:
    """Return the background wording for ``mode``.

    Total over its input: anything that is not a known mode gets the
    Original wording. Custom text is inserted verbatim.
    """
    resolved = _coerce_mode(mode)
    if resolved is None:
        return FALLBACK_BACKGROUND_INSTRUCTION
    return _BACKGROUND_TEMPLATES[resolved].format(custom=custom_background)


def frame_instruction(previous_angle: int, target_angle: int) -> str:
    return ROTATION_TEMPLATE.format(previous=previous_angle, target=target_angle)


def scene_lock(scene: SceneSpec) -> str:
    return SCENE_LOCK_TEMPLATE.format(
        style=scene.style.value,
        background_mode=scene.background_mode.value,
        background_instruction=background_instruction(scene.background_mode, scene.custom_background),
    )


def build_analysis_prompt(scene: SceneSpec) -> str:
    return ANALYSIS_TEMPLATE.format(
        subject=scene.subject_description,
        style=scene.style.value,
        background_mode=scene.background_mode.value,
        background_instruction=background_instruction(scene.background_mode, scene.custom_background),
    )


def build_frame_prompt(master_prompt: str, scene: SceneSpec, previous_angle: int, target_angle: int) -> str:
    return "\n\n".join(
        [
            master_prompt.strip(),
            frame_instruction(previous_angle, target_angle),
            scene_lock(scene),
        ]
    )


def build_single_image_prompt(prompt: str) -> str:
    return SINGLE_IMAGE_TEMPLATE.format(prompt=prompt)


def build_edit_prompt(instruction: str) -> str:
    return EDIT_TEMPLATE.format(instruction=instruction)


def build_enhance_prompt(prompt: str) -> str:
    return ENHANCE_TEMPLATE.format(prompt=prompt)
