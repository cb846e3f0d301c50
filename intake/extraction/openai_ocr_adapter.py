import base64

import httpx
import openai
import pymupdf

from intake.capabilities.exceptions import CapabilityError, CapabilityUnavailable
from intake.extraction.ocr_client_base import BaseOcrClient

_OCR_INSTRUCTION = (
    "Extract all text from this medical document image. Return only the extracted "
    "text content, preserving formatting and structure as much as possible."
)


class OpenAIVisionOcrAdapter(BaseOcrClient):
    """OCR through a vision-capable OpenAI chat model."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        max_tokens: int = 4000,
    ) -> None:
        self._client = openai.OpenAI(api_key=api_key, timeout=timeout_seconds)
        self._model = model
        self._max_tokens = max_tokens

    def extract_text(self, image_bytes: bytes, mime_type: str) -> str:
        content: list[dict[str, object]] = [{"type": "text", "text": _OCR_INSTRUCTION}]
        for page_mime, page_bytes in _to_supported_images(image_bytes, mime_type):
            encoded = base64.b64encode(page_bytes).decode("ascii")
            content.append({
                "type": "image_url",
                "image_url": {"url": f"data:{page_mime};base64,{encoded}"},
            })

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=[{"role": "user", "content": content}],  # type: ignore[list-item]
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise CapabilityUnavailable(f"OCR provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise CapabilityUnavailable(f"OCR provider API error: {exc}") from exc

        if not response.choices:
            raise CapabilityError("OCR provider returned no choices")
        text = response.choices[0].message.content
        if not text:
            raise CapabilityError("OCR provider returned empty response")
        return text


def _to_supported_images(image_bytes: bytes, mime_type: str) -> list[tuple[str, bytes]]:
    """Vision models do not accept TIFF; render each TIFF page to PNG."""
    if mime_type != "image/tiff":
        return [(mime_type, image_bytes)]
    try:
        with pymupdf.open(stream=image_bytes, filetype="tiff") as doc:  # type: ignore[no-untyped-call]
            return [("image/png", page.get_pixmap().tobytes("png")) for page in doc]
    except Exception as exc:
        raise CapabilityError(f"Could not render TIFF for OCR: {exc}") from exc
