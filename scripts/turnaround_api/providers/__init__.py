"""Provider adapter registry."""

from __future__ import annotations

from typing import Dict, Optional

from turnaround_api.core.config import Settings

from .base import ProviderAdapter


_ADAPTERS: Dict[str, ProviderAdapter] = {}


def _build_adapter(provider: str, settings: Optional[Settings]) -> ProviderAdapter:
    key = provider.strip().lower()
    if key in {"gemini", "google"}:
        from .gemini import GeminiAdapter
        return GeminiAdapter(settings=settings)
    raise ValueError(f"No adapter registered for provider '{provider}'.")


def get_adapter(provider: str = "gemini", settings: Optional[Settings] = None) -> ProviderAdapter:
    """Return a cached adapter; passing ``settings`` always builds a fresh one."""
    key = provider.strip().lower()
    if settings is not None:
        return _build_adapter(key, settings)
    adapter = _ADAPTERS.get(key)
    if adapter is not None:
        return adapter
    adapter = _build_adapter(key, None)
    _ADAPTERS[key] = adapter
    return adapter


__all__ = ["get_adapter", "ProviderAdapter"]
