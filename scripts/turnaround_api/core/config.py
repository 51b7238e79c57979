"""Runtime settings resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Sequence

from .errors import ConfigurationError


DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_TEXT_MODEL = "gemini-2.5-flash"

API_KEY_VARS: Sequence[str] = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")


def resolve_api_key(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    for name in API_KEY_VARS:
        value = (env.get(name) or "").strip()
        if value:
            return value
    raise ConfigurationError(
        "Missing Gemini API key. Set GEMINI_API_KEY (or GOOGLE_API_KEY) in your environment."
    )


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"TURNAROUND_REQUEST_TIMEOUT must be a number, got {raw!r}.") from exc
    if value < 0:
        raise ConfigurationError("TURNAROUND_REQUEST_TIMEOUT must not be negative.")
    return value or None


@dataclass(frozen=True)
class Settings:
    image_model: str = DEFAULT_IMAGE_MODEL
    text_model: str = DEFAULT_TEXT_MODEL
    request_timeout: Optional[float] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            image_model=env.get("TURNAROUND_IMAGE_MODEL") or DEFAULT_IMAGE_MODEL,
            text_model=env.get("TURNAROUND_TEXT_MODEL") or DEFAULT_TEXT_MODEL,
            request_timeout=_parse_timeout(env.get("TURNAROUND_REQUEST_TIMEOUT")),
        )

    def with_overrides(
        self,
        *,
        image_model: Optional[str] = None,
        text_model: Optional[str] = None,
        request_timeout: Optional[float] = None,
    ) -> "Settings":
        changes = {}
        if image_model:
            changes["image_model"] = image_model
        if text_model:
            changes["text_model"] = text_model
        if request_timeout is not None:
            changes["request_timeout"] = request_timeout or None
        return replace(self, **changes)
