"""Data models for scanned receipts and pantry records."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation

_CENTS = Decimal("0.01")

UNKNOWN_VENDOR = "Unknown"
UNKNOWN_ITEM = "Unknown Item"


@dataclass(frozen=True)
class ReceiptLineItem:
    """A single purchased line recognized on a receipt."""

    name: str
    quantity: int = 1
    price: Decimal | None = None
    total: Decimal | None = None  # structured sources only
    inventory_id: int | str | None = None

    def with_inventory_id(self, inventory_id: int | str | None) -> ReceiptLineItem:
        return replace(self, inventory_id=inventory_id)


@dataclass(frozen=True)
class ReceiptDocument:
    """Everything one scan produced: line items plus document metadata.

    The raw-text path only fills ``items``, ``raw_text`` and ``source``;
    vendor and amounts keep their placeholders.
    """

    items: tuple[ReceiptLineItem, ...] = ()
    vendor_name: str = UNKNOWN_VENDOR
    vendor_address: str = ""
    date: str | None = None
    subtotal: Decimal | None = None
    tax: Decimal | None = None
    total: Decimal | None = None
    raw_text: str = ""
    document_id: str | None = None
    source: str = ""

    def with_items(self, items) -> ReceiptDocument:
        return replace(self, items=tuple(items))


@dataclass(frozen=True)
class PantryRecord:
    """An existing pantry entry, as supplied by the pantry store."""

    id: int | str
    name: str


@dataclass(frozen=True)
class ReceiptImage:
    """A receipt photo loaded into memory for one scan."""

    path: str
    data: bytes = field(repr=False)
    media_type: str = "image/jpeg"

    def b64(self) -> str:
        return base64.standard_b64encode(self.data).decode()


def to_money(value) -> Decimal | None:
    """Coerce a loosely typed amount to a two-decimal ``Decimal``.

    Returns None for missing, empty, boolean or non-numeric values.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip().lstrip("$"))
        if not amount.is_finite():
            return None
        return amount.quantize(_CENTS)
    except (InvalidOperation, ValueError):
        return None


def to_quantity(value) -> int:
    """Coerce a service-reported quantity to a positive integer.

    Whole positive numbers are kept; anything else (missing, zero,
    negative, fractional weights like 1.35 lb) counts as one unit.
    """
    if value is None or isinstance(value, bool):
        return 1
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return 1
    if not number.is_finite() or number < 1 or number != number.to_integral_value():
        return 1
    return int(number)
