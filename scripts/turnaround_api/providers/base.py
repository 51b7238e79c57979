"""Provider adapter interfaces."""

from __future__ import annotations

from typing import Protocol

from turnaround_api.core.contracts import GenerationRequest, GenerationResult


class ProviderAdapter(Protocol):
    name: str

    async def generate_image(self, request: GenerationRequest) -> GenerationResult:
        """Run one image request; every failure comes back as a ``GenerationFailure``."""
        ...

    async def describe(self, request: GenerationRequest) -> str:
        """Run one text-only request and return the reply text; errors propagate."""
        ...
