"""Tests for pantry reconciliation."""

from decimal import Decimal

import pytest

from mangia.receipts.models import PantryRecord, ReceiptLineItem
from mangia.receipts.reconcile import reconcile_with_pantry


@pytest.fixture
def items():
    return [
        ReceiptLineItem(name="Eggs", quantity=1, price=Decimal("2.99")),
        ReceiptLineItem(name="Tomato Soup", quantity=2, price=Decimal("3.98")),
        ReceiptLineItem(name="Bananas", quantity=1, price=Decimal("1.25")),
    ]


@pytest.fixture
def pantry():
    return [
        PantryRecord(id=10, name="eggs"),
        PantryRecord(id=11, name="TOMATO SOUP"),
        PantryRecord(id=12, name="Rice"),
    ]


def test_case_insensitive_match(items, pantry):
    result = reconcile_with_pantry(items, pantry)
    assert result[0].inventory_id == 10
    assert result[1].inventory_id == 11


def test_unmatched_item_has_no_id(items, pantry):
    result = reconcile_with_pantry(items, pantry)
    assert result[2].inventory_id is None


def test_one_output_per_input_in_order(items, pantry):
    result = reconcile_with_pantry(items, pantry)
    assert [i.name for i in result] == ["Eggs", "Tomato Soup", "Bananas"]


def test_other_fields_are_preserved(items, pantry):
    result = reconcile_with_pantry(items, pantry)
    assert result[1].quantity == 2
    assert result[1].price == Decimal("3.98")


def test_first_record_wins_on_duplicate_names(items):
    pantry = [
        PantryRecord(id="b", name="EGGS"),
        PantryRecord(id="a", name="eggs"),
    ]
    result = reconcile_with_pantry(items, pantry)
    assert result[0].inventory_id == "b"


def test_idempotent(items, pantry):
    once = reconcile_with_pantry(items, pantry)
    twice = reconcile_with_pantry(once, pantry)
    assert [i.inventory_id for i in twice] == [i.inventory_id for i in once]
    assert twice == once


def test_stale_annotation_is_cleared(items, pantry):
    annotated = reconcile_with_pantry(items, pantry)
    result = reconcile_with_pantry(annotated, [PantryRecord(id=12, name="Rice")])
    assert all(i.inventory_id is None for i in result)


def test_inputs_are_not_mutated(items, pantry):
    before_items = list(items)
    before_pantry = list(pantry)
    reconcile_with_pantry(items, pantry)
    assert items == before_items
    assert pantry == before_pantry
    assert all(i.inventory_id is None for i in items)


def test_empty_inputs():
    assert reconcile_with_pantry([], [PantryRecord(id=1, name="Milk")]) == []
    item = ReceiptLineItem(name="Milk", price=Decimal("4.29"))
    assert reconcile_with_pantry([item], []) == [item]


def test_no_partial_matches():
    item = ReceiptLineItem(name="Eggs Large", price=Decimal("3.49"))
    result = reconcile_with_pantry([item], [PantryRecord(id=1, name="Eggs")])
    assert result[0].inventory_id is None
