"""Local Tesseract OCR source (raw text path)."""

from __future__ import annotations

import asyncio
import io
import logging

from ..errors import AcquisitionFailure, RecognitionFailure
from ..models import ReceiptImage
from . import RawTextSource

logger = logging.getLogger(__name__)


class TesseractSource(RawTextSource):
    """Recognize receipt text with pytesseract."""

    name = "tesseract"

    def __init__(
        self, lang: str = "eng", whitelist: str = "", tesseract_cmd: str = ""
    ) -> None:
        self._lang = lang
        self._whitelist = whitelist
        self._tesseract_cmd = tesseract_cmd

    def _tesseract_config(self) -> str:
        opts = ["-c preserve_interword_spaces=1"]
        if self._whitelist:
            opts.append(f"-c tessedit_char_whitelist={self._whitelist}")
        return " ".join(opts)

    async def recognize_text(self, image: ReceiptImage) -> str:
        try:
            import pytesseract
            from PIL import Image, UnidentifiedImageError
        except ImportError:
            raise ImportError(
                "pytesseract and Pillow are required: pip install pytesseract Pillow"
            ) from None

        if self._tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd

        try:
            picture = Image.open(io.BytesIO(image.data))
            picture.load()
        except (UnidentifiedImageError, OSError) as e:
            raise AcquisitionFailure(f"Cannot decode image {image.path}: {e}") from e

        try:
            text = await asyncio.to_thread(
                pytesseract.image_to_string,
                picture,
                lang=self._lang,
                config=self._tesseract_config(),
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            logger.error("Tesseract failed on %s: %s", image.path, e)
            raise RecognitionFailure(f"Tesseract failed: {e}") from e

        logger.info("Tesseract recognized %d characters from %s", len(text), image.path)
        return text
