"""Extraction source base classes and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..models import UNKNOWN_VENDOR, ReceiptDocument, ReceiptImage
from ..parser import parse_receipt_text

if TYPE_CHECKING:
    from ..config import ReceiptsConfig


def vendor_fields(value, default_name: str = "") -> tuple[str, str]:
    """Return ``(name, address)`` from a vendor field of any shape.

    Accepts a mapping or a bare name string; anything else counts as absent.
    """
    if isinstance(value, str):
        value = {"name": value}
    elif not isinstance(value, dict):
        value = {}
    name = str(value.get("name") or "").strip()
    address = str(value.get("address") or "").strip()
    return name or default_name or UNKNOWN_VENDOR, address


def line_entries(value) -> list[dict]:
    """Return the mapping entries of a line-item list, or nothing."""
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, dict)]


class ExtractionSource(ABC):
    """Turns one receipt image into a ``ReceiptDocument``.

    Implementations raise ``RecognitionFailure`` when the backend gives no
    usable answer and ``AcquisitionFailure`` when it cannot decode the image.
    """

    name: str = ""

    @abstractmethod
    async def extract(self, image: ReceiptImage) -> ReceiptDocument:
        ...


class RawTextSource(ExtractionSource):
    """Source backed by plain OCR text, parsed with the line heuristics."""

    @abstractmethod
    async def recognize_text(self, image: ReceiptImage) -> str:
        """Return the text recognized on the image."""
        ...

    async def extract(self, image: ReceiptImage) -> ReceiptDocument:
        text = await self.recognize_text(image)
        return ReceiptDocument(
            items=tuple(parse_receipt_text(text)),
            raw_text=text,
            source=self.name,
        )


def create_source(config: ReceiptsConfig, name: str | None = None) -> ExtractionSource:
    """Create an extraction source from configuration.

    ``name`` overrides ``config.source.backend``.
    """
    backend_name = name or config.source.backend

    match backend_name:
        case "tesseract":
            from .tesseract import TesseractSource

            return TesseractSource(
                lang=config.source.tesseract.lang,
                whitelist=config.source.tesseract.whitelist,
                tesseract_cmd=config.source.tesseract.tesseract_cmd,
            )
        case "veryfi":
            from .veryfi import VeryfiSource

            cfg = config.source.veryfi
            return VeryfiSource(
                client_id=cfg.client_id,
                username=cfg.username,
                api_key=cfg.api_key,
                url=cfg.url,
                categories=cfg.categories,
                auto_delete=cfg.auto_delete,
                timeout=cfg.timeout,
            )
        case "claude":
            from .claude import ClaudeReceiptSource

            return ClaudeReceiptSource(
                api_key=config.source.claude.api_key,
                model=config.source.claude.model,
            )
        case "gemini":
            from .gemini import GeminiReceiptSource

            return GeminiReceiptSource(
                api_key=config.source.gemini.api_key,
                model=config.source.gemini.model,
                store_hint=config.source.gemini.store_hint,
            )
        case "mock":
            from .mock import MockSource

            return MockSource()
        case _:
            raise ValueError(
                f"Unknown extraction source: {backend_name!r} "
                f"(choose from tesseract / veryfi / claude / gemini / mock)"
            )
