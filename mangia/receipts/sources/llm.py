"""Prompt and response parsing shared by the vision-model sources."""

from __future__ import annotations

import json

from ..errors import RecognitionFailure
from ..models import (
    UNKNOWN_ITEM,
    ReceiptDocument,
    ReceiptLineItem,
    to_money,
    to_quantity,
)
from . import line_entries, vendor_fields

RECEIPT_PROMPT = """\
You are analyzing a photo of a grocery store receipt.
Return ONLY valid JSON with no markdown formatting, in this shape:

{
  "vendor": {"name": "store name or null", "address": "store address or null"},
  "date": "YYYY-MM-DD or null",
  "items": [
    {"name": "item name as printed", "quantity": 1, "price": 4.99, "total": 4.99}
  ],
  "subtotal": 0.00,
  "tax": 0.00,
  "total": 0.00
}

Rules:
- List every purchased line in the order it appears on the receipt
- "price" is the unit price, "total" the amount charged for the line
- Set quantity from the receipt (look for "2 x", "x2", "2 @", qty columns)
- Skip subtotal, tax, total, payment and change lines
- Use null for anything you cannot read
"""


def build_prompt(store_hint: str = "") -> str:
    if store_hint:
        return f"{RECEIPT_PROMPT}\nHint: this receipt is from {store_hint}.\n"
    return RECEIPT_PROMPT


def _extract_json(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        # Remove first and last fence lines
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    # Models sometimes wrap the object in a sentence or two
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        cleaned = cleaned[start:end + 1]
    return cleaned


def parse_response(text: str, source: str, store_hint: str = "") -> ReceiptDocument:
    """Parse the JSON receipt document returned by a vision model.

    ``store_hint`` names the vendor when the reply does not.

    Raises:
        RecognitionFailure: If the reply holds no JSON object.
    """
    try:
        data = json.loads(_extract_json(text))
    except json.JSONDecodeError as e:
        raise RecognitionFailure(f"{source} returned invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise RecognitionFailure(f"{source} returned an unexpected payload")

    vendor_name, vendor_address = vendor_fields(data.get("vendor"), store_hint)
    items = tuple(
        ReceiptLineItem(
            name=str(entry.get("name") or "").strip() or UNKNOWN_ITEM,
            quantity=to_quantity(entry.get("quantity")),
            price=to_money(entry.get("price")),
            total=to_money(entry.get("total")),
        )
        for entry in line_entries(data.get("items"))
    )

    date = data.get("date")
    return ReceiptDocument(
        items=items,
        vendor_name=vendor_name,
        vendor_address=vendor_address,
        date=str(date) if date else None,
        subtotal=to_money(data.get("subtotal")),
        tax=to_money(data.get("tax")),
        total=to_money(data.get("total")),
        raw_text=text,
        source=source,
    )
