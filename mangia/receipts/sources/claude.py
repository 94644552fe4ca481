"""Claude API vision source (structured path)."""

from __future__ import annotations

import logging

from ..errors import RecognitionFailure
from ..models import ReceiptDocument, ReceiptImage
from . import ExtractionSource
from .llm import build_prompt, parse_response

logger = logging.getLogger(__name__)


class ClaudeReceiptSource(ExtractionSource):
    """Read receipts using Claude's vision capability."""

    name = "claude"

    def __init__(self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929") -> None:
        self._api_key = api_key
        self._model = model

    async def extract(self, image: ReceiptImage) -> ReceiptDocument:
        if not self._api_key:
            raise ValueError(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install 'mangia-receipts[claude]'"
            ) from None

        content = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.media_type,
                    "data": image.b64(),
                },
            },
            {"type": "text", "text": build_prompt()},
        ]

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=4096,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APIError as e:
            logger.error("Claude request failed: %s", e)
            raise RecognitionFailure(f"Claude request failed: {e}") from e

        if not response.content:
            raise RecognitionFailure("Claude returned an empty response")
        return parse_response(response.content[0].text, self.name)
