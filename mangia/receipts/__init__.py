"""Receipt scanning and pantry reconciliation for Mangia."""

from .config import ReceiptsConfig, load_config
from .errors import AcquisitionFailure, ReceiptScanError, RecognitionFailure
from .models import PantryRecord, ReceiptDocument, ReceiptImage, ReceiptLineItem
from .parser import (
    LineClass,
    classify_line,
    extract_item,
    normalize_lines,
    parse_receipt_text,
)
from .reconcile import reconcile_with_pantry
from .scanner import ReceiptScanner, extract_receipt_items, load_image
from .sources import ExtractionSource, RawTextSource, create_source

__all__ = [
    "ReceiptLineItem",
    "ReceiptDocument",
    "ReceiptImage",
    "PantryRecord",
    "ReceiptScanError",
    "AcquisitionFailure",
    "RecognitionFailure",
    "LineClass",
    "normalize_lines",
    "classify_line",
    "extract_item",
    "parse_receipt_text",
    "reconcile_with_pantry",
    "ExtractionSource",
    "RawTextSource",
    "create_source",
    "ReceiptScanner",
    "extract_receipt_items",
    "load_image",
    "ReceiptsConfig",
    "load_config",
]
