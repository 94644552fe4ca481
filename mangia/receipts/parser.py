"""Heuristic line-item parsing for raw receipt OCR text.

The pipeline runs per line, top to bottom:

1. ``normalize_lines`` splits the OCR dump into trimmed, non-empty lines.
2. ``classify_line`` drops totals and scanner marker lines.
3. ``extract_item`` strips a quantity prefix, takes the price at the end of
   the line and keeps what is left as the item name.

A line that cannot be turned into an item yields ``None`` and is dropped;
nothing in here raises on bad input.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from enum import Enum

from .models import ReceiptLineItem

logger = logging.getLogger(__name__)

# Control characters left behind by OCR noise (tab is kept as whitespace)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")

_SKIP_KEYWORDS: tuple[str, ...] = ("total", "subtotal")

# "x2", " X 3" at the start of a line: scanner marker, not an item
_MARKER_LINE = re.compile(r"\s*[xX]\s*\d")

# "2 x ", "3x", "12 X "
_QUANTITY_PREFIX = re.compile(r"(\d+)\s*[xX]\s*")

# Last amount on the line, so "2.00/lb 3.98" yields 3.98
_TRAILING_PRICE = re.compile(r"(?<!\d)(\d+\.\d{2})\s*$")

_MIN_NAME_LENGTH = 2


class LineClass(Enum):
    SKIP = "skip"
    CANDIDATE = "candidate"


def normalize_lines(text: str | None) -> list[str]:
    """Split raw OCR text into trimmed, non-empty lines in reading order."""
    if not text:
        return []
    lines: list[str] = []
    for raw in text.splitlines():
        line = _CONTROL_CHARS.sub("", raw).strip()
        if line:
            lines.append(line)
    return lines


def classify_line(line: str) -> LineClass:
    """Decide whether a normalized line may hold an item.

    Any line mentioning "total" is skipped, which also drops products such
    as "Total Cereal".
    """
    lowered = line.lower()
    for keyword in _SKIP_KEYWORDS:
        if keyword in lowered:
            return LineClass.SKIP
    if _MARKER_LINE.match(line):
        return LineClass.SKIP
    return LineClass.CANDIDATE


def split_quantity(line: str) -> tuple[int, str]:
    """Strip a leading "<n> x" quantity marker.

    Returns the quantity (1 when absent or zero) and the rest of the line.
    """
    match = _QUANTITY_PREFIX.match(line)
    if not match:
        return 1, line
    quantity = int(match.group(1))
    return (quantity if quantity > 0 else 1), line[match.end():]


def find_price(text: str) -> tuple[Decimal, int] | None:
    """Find the price token at the end of ``text``.

    Returns the amount and the offset where the token starts, or None.
    """
    match = _TRAILING_PRICE.search(text)
    if not match:
        return None
    return Decimal(match.group(1)), match.start(1)


def is_valid_name(name: str) -> bool:
    """Reject names that are too short or start with punctuation."""
    return len(name) >= _MIN_NAME_LENGTH and name[0].isalnum()


def extract_item(line: str) -> ReceiptLineItem | None:
    """Turn one candidate line into a line item, or None if it has no usable name and price."""
    quantity, rest = split_quantity(line)

    found = find_price(rest)
    if found is None:
        logger.debug("No price on line %r", line)
        return None
    price, start = found

    name = rest[:start].strip()
    if not is_valid_name(name):
        logger.debug("Unusable item name %r on line %r", name, line)
        return None

    return ReceiptLineItem(name=name, quantity=quantity, price=price)


def parse_receipt_text(text: str | None) -> list[ReceiptLineItem]:
    """Extract line items from raw OCR text, preserving receipt order.

    An empty list is a valid result: the receipt had no recognizable items.
    """
    items: list[ReceiptLineItem] = []
    candidates = 0
    for line in normalize_lines(text):
        if classify_line(line) is LineClass.SKIP:
            continue
        candidates += 1
        item = extract_item(line)
        if item is not None:
            items.append(item)

    logger.debug("Extracted %d items from %d candidate lines", len(items), candidates)
    return items
