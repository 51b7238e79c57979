"""Gemini adapter over the async google-genai client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types

from turnaround_api.core.config import Settings, resolve_api_key
from turnaround_api.core.contracts import (
    GenerationFailure,
    GenerationRequest,
    GenerationResult,
    GenerationSuccess,
    ImagePayload,
)
from turnaround_api.core.errors import ConfigurationError


logger = logging.getLogger(__name__)

_DEFAULT_IMAGE_MIME = "image/png"
_GENAI_CLIENTS: Dict[str, genai.Client] = {}


def _client(api_key: Optional[str] = None) -> genai.Client:
    key = api_key or resolve_api_key()
    client = _GENAI_CLIENTS.get(key)
    if client is None:
        try:
            client = genai.Client(api_key=key)
        except ValueError as exc:
            raise ConfigurationError(f"Unable to create Gemini client: {exc}") from exc
        _GENAI_CLIENTS[key] = client
    return client


def _build_parts(request: GenerationRequest) -> List[types.Part]:
    parts: List[types.Part] = [
        types.Part(inline_data=types.Blob(data=image.data, mime_type=image.mime_type))
        for image in request.reference_images
    ]
    parts.append(types.Part(text=request.prompt))
    return parts


def _build_config(request: GenerationRequest) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(response_modalities=list(request.response_modalities))


def extract_inline_image(response: Any) -> Optional[ImagePayload]:
    """Return the first inline-data part of the first candidate, if any."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        if not inline_data or not getattr(inline_data, "data", None):
            continue
        data = inline_data.data
        if isinstance(data, str):
            data = data.encode("latin1")
        return ImagePayload(data=data, mime_type=inline_data.mime_type or _DEFAULT_IMAGE_MIME)
    return None


class GeminiAdapter:
    name = "gemini"

    def __init__(self, settings: Optional[Settings] = None, client: Optional[genai.Client] = None) -> None:
        self.settings = settings or Settings.from_env()
        # Resolving the client here surfaces a missing key before any request.
        self._genai = client if client is not None else _client()

    async def _generate_content(self, model: str, request: GenerationRequest) -> types.GenerateContentResponse:
        call = self._genai.aio.models.generate_content(
            model=model,
            contents=_build_parts(request),
            config=_build_config(request),
        )
        timeout = self.settings.request_timeout
        if timeout:
            return await asyncio.wait_for(call, timeout=timeout)
        return await call

    async def generate_image(self, request: GenerationRequest) -> GenerationResult:
        model = self.settings.image_model
        logger.debug(
            "gemini image request model=%s references=%d", model, len(request.reference_images)
        )
        try:
            response = await self._generate_content(model, request)
        except asyncio.TimeoutError:
            return GenerationFailure(
                reason=f"Request timed out after {self.settings.request_timeout} seconds."
            )
        except Exception as exc:
            return GenerationFailure(reason=str(exc) or exc.__class__.__name__)
        image = extract_inline_image(response)
        if image is None:
            return GenerationFailure(reason="No image data returned.")
        return GenerationSuccess(image=image)

    async def describe(self, request: GenerationRequest) -> str:
        model = self.settings.text_model
        logger.debug("gemini text request model=%s", model)
        response = await self._generate_content(model, request)
        return (getattr(response, "text", None) or "").strip()
