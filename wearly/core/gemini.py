"""
Google Generative AI wrapper for image generation (product isolation and try-on).
"""

import base64
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from google import genai
from google.genai import types

from wearly.config import settings

logger = logging.getLogger(__name__)


class SafetyBlockedError(Exception):
    """The model refused the request on safety grounds"""


# Finish reasons the image model reports when it refuses to render
SAFETY_FINISH_REASONS = {
    "SAFETY",
    "IMAGE_SAFETY",
    "PROHIBITED_CONTENT",
    "IMAGE_PROHIBITED_CONTENT",
    "BLOCKLIST",
}


@dataclass
class InlineImage:
    data: bytes
    mime_type: str = "image/jpeg"


PromptPart = Union[str, InlineImage]


class GeminiImageClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_image_model
        self.max_output_tokens = max_output_tokens or settings.gemini_max_output_tokens
        self._client = None

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise ValueError("Gemini API key must be configured")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate_image(self, parts: List[PromptPart], temperature: float) -> Optional[str]:
        """
        Send text and inline image parts to the image model.

        Returns:
            The first generated image as a data URL, or None when the
            response carries no image part.

        Raises:
            SafetyBlockedError when the first candidate stopped on SAFETY.
        """
        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_text(text=p) if isinstance(p, str)
                    else types.Part.from_bytes(data=p.data, mime_type=p.mime_type)
                    for p in parts
                ],
            )
        ]
        response = self.client.models.generate_content(
            model=self.model,
            contents=contents,
            config=types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=self.max_output_tokens,
            ),
        )
        return extract_first_image(response)


def _enum_name(value) -> str:
    return str(getattr(value, "value", value))


def extract_first_image(response) -> Optional[str]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        block_reason = getattr(getattr(response, "prompt_feedback", None), "block_reason", None)
        if block_reason:
            raise SafetyBlockedError(f"Prompt blocked: {_enum_name(block_reason)}")
        return None
    candidate = candidates[0]
    finish_reason = getattr(candidate, "finish_reason", None)
    if finish_reason is not None and _enum_name(finish_reason) in SAFETY_FINISH_REASONS:
        raise SafetyBlockedError(f"Content blocked by safety filters: {_enum_name(finish_reason)}")
    content = getattr(candidate, "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is None or not inline.data:
            continue
        mime_type = inline.mime_type or "image/png"
        data = inline.data
        # The SDK hands back raw bytes; tolerate already-encoded payloads
        encoded = data if isinstance(data, str) else base64.b64encode(data).decode("ascii")
        logger.info("Generated image part: %s", mime_type)
        return f"data:{mime_type};base64,{encoded}"
    return None


_default_client: Optional[GeminiImageClient] = None


def get_image_generator() -> GeminiImageClient:
    global _default_client
    if _default_client is None:
        _default_client = GeminiImageClient()
    return _default_client
