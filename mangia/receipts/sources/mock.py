"""Offline source returning a fixed grocery receipt."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from ..models import ReceiptDocument, ReceiptImage, ReceiptLineItem
from . import ExtractionSource

_ITEMS: tuple[tuple[str, int, str, str], ...] = (
    ("Organic Apples", 2, "1.50", "3.00"),
    ("Whole Grain Bread", 1, "3.99", "3.99"),
    ("Almond Milk", 1, "3.50", "3.50"),
    ("Free Range Eggs", 1, "4.99", "4.99"),
    ("Bananas", 1, "0.59", "0.59"),
    ("Spinach", 1, "2.99", "2.99"),
    ("Greek Yogurt", 2, "1.49", "2.98"),
)


class MockSource(ExtractionSource):
    """Ignore the image and return the same sample receipt every time."""

    name = "mock"

    async def extract(self, image: ReceiptImage) -> ReceiptDocument:
        items = tuple(
            ReceiptLineItem(
                name=name,
                quantity=quantity,
                price=Decimal(price),
                total=Decimal(total),
            )
            for name, quantity, price, total in _ITEMS
        )
        subtotal = sum((item.total for item in items), Decimal("0.00"))
        tax = Decimal("2.00")
        return ReceiptDocument(
            items=items,
            vendor_name="Mock Grocery Store",
            vendor_address="123 Main St, Anytown, USA",
            date=datetime.now().date().isoformat(),
            subtotal=subtotal,
            tax=tax,
            total=subtotal + tax,
            raw_text="Mock receipt text...",
            document_id=f"mock_{image.path}",
            source=self.name,
        )
