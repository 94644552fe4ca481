"""Tests for PantryDB operations."""

from decimal import Decimal

import pytest

from mangia.receipts.db.pantry import PantryDB
from mangia.receipts.models import PantryRecord, ReceiptDocument, ReceiptLineItem
from mangia.receipts.reconcile import reconcile_with_pantry


@pytest.fixture
def db(tmp_path):
    """Create a temporary PantryDB."""
    pantry = PantryDB(db_path=tmp_path / "test.db")
    yield pantry
    pantry.close()


@pytest.fixture
def sample_items():
    return [
        ReceiptLineItem(name="Eggs", quantity=1, price=Decimal("2.99")),
        ReceiptLineItem(name="Tomato Soup", quantity=2, price=Decimal("3.98")),
    ]


def test_add_items(db, sample_items):
    ids = db.add_items(sample_items)
    assert len(ids) == 2
    assert all(isinstance(i, int) for i in ids)


def test_list_records_ordered_by_id(db, sample_items):
    ids = db.add_items(sample_items)
    records = db.list_records()
    assert records == [
        PantryRecord(id=ids[0], name="Eggs"),
        PantryRecord(id=ids[1], name="Tomato Soup"),
    ]


def test_list_records_empty(db):
    assert db.list_records() == []


def test_get_item(db, sample_items):
    ids = db.add_items(sample_items, vendor="Fresh Mart", purchase_date="2024-05-01")
    row = db.get_item(ids[1])
    assert row["name"] == "Tomato Soup"
    assert row["quantity"] == 2
    assert row["price"] == "3.98"
    assert row["vendor"] == "Fresh Mart"
    assert db.get_item(9999) is None


def test_apply_receipt_updates_and_creates(db, sample_items):
    [eggs_id, _] = db.add_items(sample_items)

    scanned = [
        ReceiptLineItem(name="EGGS", quantity=2, price=Decimal("3.19")),
        ReceiptLineItem(name="Bananas", quantity=1, price=Decimal("1.25")),
    ]
    items = reconcile_with_pantry(scanned, db.list_records())
    doc = ReceiptDocument(items=tuple(items), vendor_name="Fresh Mart", date="2024-05-02")

    updated, created = db.apply_receipt(doc)

    assert (updated, created) == (1, 1)
    eggs = db.get_item(eggs_id)
    assert eggs["quantity"] == 3
    assert eggs["price"] == "3.19"
    names = [r.name for r in db.list_records()]
    assert names == ["Eggs", "Tomato Soup", "Bananas"]


def test_apply_receipt_keeps_price_when_missing(db, sample_items):
    [eggs_id, _] = db.add_items(sample_items)
    doc = ReceiptDocument(items=(ReceiptLineItem(name="Eggs", inventory_id=eggs_id),))
    db.apply_receipt(doc)
    assert db.get_item(eggs_id)["price"] == "2.99"


def test_apply_receipt_recreates_deleted_record(db, sample_items):
    [eggs_id, _] = db.add_items(sample_items)
    items = reconcile_with_pantry([ReceiptLineItem(name="Eggs")], db.list_records())
    db.delete_item(eggs_id)

    updated, created = db.apply_receipt(ReceiptDocument(items=tuple(items)))
    assert (updated, created) == (0, 1)


def test_placeholder_vendor_is_not_stored(db):
    doc = ReceiptDocument(items=(ReceiptLineItem(name="Jam"),))
    db.apply_receipt(doc)
    [record] = db.list_records()
    assert db.get_item(record.id)["vendor"] is None


def test_delete_item(db, sample_items):
    ids = db.add_items(sample_items)
    db.delete_item(ids[0])
    assert len(db.list_records()) == 1


def test_apply_receipt_records_scan(db, sample_items):
    db.add_items(sample_items)
    items = reconcile_with_pantry(
        [ReceiptLineItem(name="eggs"), ReceiptLineItem(name="Kale")], db.list_records()
    )
    doc = ReceiptDocument(
        items=tuple(items),
        vendor_name="Fresh Mart",
        date="2024-05-02",
        total=Decimal("5.48"),
        document_id="4242",
        source="veryfi",
    )

    db.apply_receipt(doc)
    db.apply_receipt(ReceiptDocument(items=(ReceiptLineItem(name="Jam"),), source="mock"))

    latest, first = db.list_scans()
    assert latest["source"] == "mock"
    assert latest["vendor"] is None
    assert latest["total"] is None
    assert first["document_id"] == "4242"
    assert first["vendor"] == "Fresh Mart"
    assert first["receipt_date"] == "2024-05-02"
    assert first["total"] == "5.48"
    assert (first["item_count"], first["matched_count"]) == (2, 1)


def test_list_scans_empty(db):
    assert db.list_scans() == []
