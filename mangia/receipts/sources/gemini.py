"""Gemini API vision source (structured path)."""

from __future__ import annotations

import logging

from ..errors import RecognitionFailure
from ..models import ReceiptDocument, ReceiptImage
from . import ExtractionSource
from .llm import build_prompt, parse_response

logger = logging.getLogger(__name__)


class GeminiReceiptSource(ExtractionSource):
    """Read receipts using Google Gemini's vision capability."""

    name = "gemini"

    def __init__(
        self,
        api_key: str = "",
        model: str = "gemini-2.5-flash-lite",
        store_hint: str = "",
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._store_hint = store_hint

    async def extract(self, image: ReceiptImage) -> ReceiptDocument:
        if not self._api_key:
            raise ValueError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
            from google.api_core import exceptions as google_exceptions
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install 'mangia-receipts[gemini]'"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)

        parts = [
            build_prompt(self._store_hint),
            {"mime_type": image.media_type, "data": image.data},
        ]
        try:
            response = await model.generate_content_async(
                parts,
                generation_config={"temperature": 0.1, "max_output_tokens": 4096},
            )
            # .text raises ValueError when the reply was blocked
            text = response.text
        except (google_exceptions.GoogleAPIError, ValueError) as e:
            logger.error("Gemini request failed: %s", e)
            raise RecognitionFailure(f"Gemini request failed: {e}") from e

        if not text:
            raise RecognitionFailure("Gemini returned an empty response")
        return parse_response(text, self.name, store_hint=self._store_hint)
