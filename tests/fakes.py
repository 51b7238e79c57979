"""In-memory stand-ins for the Gemini adapter used across the test suite."""

from __future__ import annotations

import io
import pathlib
import sys
from typing import Iterable, List, Optional

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT / "scripts") not in sys.path:
    sys.path.insert(0, str(ROOT / "scripts"))

from PIL import Image  # noqa: E402

from turnaround_api.core.contracts import (  # noqa: E402
    GenerationFailure,
    GenerationRequest,
    GenerationResult,
    GenerationSuccess,
    ImagePayload,
)


def png_bytes(color=(255, 0, 0, 255), size=(8, 8)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def png_payload(color=(255, 0, 0, 255), size=(8, 8)) -> ImagePayload:
    return ImagePayload(data=png_bytes(color, size), mime_type="image/png")


class FakeAdapter:
    """Records every request; image call ``n`` returns ``image-n`` unless listed in ``fail_calls``."""

    name = "fake"

    def __init__(
        self,
        master_prompt: str = "A small tin robot with round eyes.",
        fail_calls: Iterable[int] = (),
        raise_calls: Iterable[int] = (),
        describe_error: Optional[Exception] = None,
        real_images: bool = False,
    ) -> None:
        self.master_prompt = master_prompt
        self.fail_calls = set(fail_calls)
        self.raise_calls = set(raise_calls)
        self.describe_error = describe_error
        self.real_images = real_images
        self.describe_requests: List[GenerationRequest] = []
        self.image_requests: List[GenerationRequest] = []

    @property
    def all_requests(self) -> List[GenerationRequest]:
        return self.describe_requests + self.image_requests

    async def describe(self, request: GenerationRequest) -> str:
        self.describe_requests.append(request)
        if self.describe_error is not None:
            raise self.describe_error
        return self.master_prompt

    async def generate_image(self, request: GenerationRequest) -> GenerationResult:
        call = len(self.image_requests)
        self.image_requests.append(request)
        if call in self.raise_calls:
            raise ConnectionError(f"connection reset on call {call}")
        if call in self.fail_calls:
            return GenerationFailure(reason="No image data returned.")
        if self.real_images:
            shade = (call * 40) % 256
            return GenerationSuccess(image=png_payload((shade, 0, 255 - shade, 255)))
        return GenerationSuccess(image=ImagePayload(data=f"image-{call}".encode(), mime_type="image/png"))
