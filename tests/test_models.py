"""Tests for receipt data models and value coercion."""

import base64
import dataclasses
from decimal import Decimal

import pytest

from mangia.receipts.models import (
    ReceiptDocument,
    ReceiptImage,
    ReceiptLineItem,
    to_money,
    to_quantity,
)


class TestReceiptLineItem:
    def test_defaults(self):
        item = ReceiptLineItem(name="Milk")
        assert item.quantity == 1
        assert item.price is None
        assert item.total is None
        assert item.inventory_id is None

    def test_frozen(self):
        item = ReceiptLineItem(name="Milk")
        with pytest.raises(dataclasses.FrozenInstanceError):
            item.name = "Bread"  # type: ignore[misc]

    def test_with_inventory_id_returns_copy(self):
        item = ReceiptLineItem(name="Milk", price=Decimal("4.29"))
        annotated = item.with_inventory_id(7)
        assert annotated.inventory_id == 7
        assert item.inventory_id is None
        assert annotated.price == Decimal("4.29")


class TestReceiptDocument:
    def test_placeholders(self):
        doc = ReceiptDocument()
        assert doc.items == ()
        assert doc.vendor_name == "Unknown"
        assert doc.vendor_address == ""
        assert doc.total is None

    def test_with_items_converts_to_tuple(self):
        doc = ReceiptDocument(vendor_name="Store").with_items([ReceiptLineItem(name="Milk")])
        assert isinstance(doc.items, tuple)
        assert doc.vendor_name == "Store"


def test_receipt_image_b64():
    image = ReceiptImage(path="r.jpg", data=b"\xff\xd8abc")
    assert base64.b64decode(image.b64()) == b"\xff\xd8abc"
    assert "data" not in repr(image)


class TestToMoney:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (4.29, Decimal("4.29")),
            (3, Decimal("3.00")),
            ("1.5", Decimal("1.50")),
            ("$2.99", Decimal("2.99")),
            (0.1 + 0.2, Decimal("0.30")),
        ],
    )
    def test_converts(self, value, expected):
        assert to_money(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", True, "nan", float("inf")])
    def test_missing_or_invalid(self, value):
        assert to_money(value) is None


class TestToQuantity:
    @pytest.mark.parametrize("value, expected", [(2, 2), (3.0, 3), ("4", 4)])
    def test_whole_numbers(self, value, expected):
        assert to_quantity(value) == expected

    @pytest.mark.parametrize("value", [None, 0, -2, 1.35, "abc", False])
    def test_defaults_to_one(self, value):
        assert to_quantity(value) == 1
