"""Match scanned receipt items against an existing pantry snapshot."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import PantryRecord, ReceiptLineItem


def _name_key(name: str) -> str:
    return name.casefold()


def reconcile_with_pantry(
    items: Iterable[ReceiptLineItem],
    pantry: Sequence[PantryRecord],
) -> list[ReceiptLineItem]:
    """Annotate each item with the id of the pantry record of the same name.

    Names are compared case-insensitively. When several records share a
    name the first one in ``pantry`` wins, so callers must pass the
    snapshot in a stable order (``PantryDB.list_records`` orders by id).

    Every item yields exactly one copy; unmatched items come back with
    ``inventory_id=None``. Neither argument is modified.
    """
    index: dict[str, int | str] = {}
    for record in pantry:
        index.setdefault(_name_key(record.name), record.id)

    return [item.with_inventory_id(index.get(_name_key(item.name))) for item in items]
