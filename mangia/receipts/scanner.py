"""Scan a receipt image end to end: acquire, extract, reconcile."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from .errors import AcquisitionFailure, ReceiptScanError, RecognitionFailure
from .models import PantryRecord, ReceiptDocument, ReceiptImage
from .reconcile import reconcile_with_pantry

if TYPE_CHECKING:
    from .db import PantryDB
    from .sources import ExtractionSource

logger = logging.getLogger(__name__)


def load_image(image_path: str | Path) -> ReceiptImage:
    """Read a receipt image from disk.

    Raises:
        AcquisitionFailure: If the file is missing, empty or unreadable.
    """
    path = Path(image_path).expanduser()
    try:
        data = path.read_bytes()
    except OSError as e:
        raise AcquisitionFailure(f"Cannot read image {path}: {e}") from e
    if not data:
        raise AcquisitionFailure(f"Image file {path} is empty")

    media_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    return ReceiptImage(path=str(path), data=data, media_type=media_type)


async def extract_receipt_items(
    image: ReceiptImage | str | Path,
    source: ExtractionSource,
    pantry: Sequence[PantryRecord] = (),
) -> ReceiptDocument:
    """Extract line items from a receipt image and reconcile them.

    ``image`` is either an already captured ``ReceiptImage`` or a path to
    read with ``load_image``.

    The returned document's items carry ``inventory_id`` for names found in
    ``pantry``. An empty ``items`` tuple means the receipt had nothing
    recognizable; it is not an error.

    Raises:
        AcquisitionFailure: The image could not be read.
        RecognitionFailure: The backend failed, timed out or returned junk.
    """
    if not isinstance(image, ReceiptImage):
        image = load_image(image)

    try:
        document = await source.extract(image)
    except ReceiptScanError as e:
        logger.error("%s scan of %s failed: %s", source.name, image.path, e)
        raise
    except (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException) as e:
        logger.error("%s timed out on %s", source.name, image.path)
        raise RecognitionFailure(f"{source.name} timed out") from e

    items = reconcile_with_pantry(document.items, pantry)
    matched = sum(1 for item in items if item.inventory_id is not None)
    logger.info(
        "Scanned %s with %s: %d items, %d already in pantry",
        image.path,
        source.name,
        len(items),
        matched,
    )
    return document.with_items(items)


class ReceiptScanner:
    """Runs scans against one extraction source and an optional pantry store."""

    def __init__(self, source: ExtractionSource, pantry_db: PantryDB | None = None) -> None:
        self._source = source
        self._pantry_db = pantry_db

    @property
    def source(self) -> ExtractionSource:
        return self._source

    def pantry_snapshot(self) -> list[PantryRecord]:
        if self._pantry_db is None:
            return []
        return self._pantry_db.list_records()

    async def scan(self, image: ReceiptImage | str | Path) -> ReceiptDocument:
        """Scan one image and reconcile it against the current pantry."""
        return await extract_receipt_items(image, self._source, self.pantry_snapshot())
