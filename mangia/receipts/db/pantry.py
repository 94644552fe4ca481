"""Pantry inventory store backed by SQLite."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from pathlib import Path

from ..models import UNKNOWN_VENDOR, PantryRecord, ReceiptDocument, ReceiptLineItem
from .schema import ensure_schema


class PantryDB:
    """Manages the pantry_items and receipt_scans tables."""

    def __init__(self, db_path: str | Path = "~/.config/mangia/pantry.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def list_records(self) -> list[PantryRecord]:
        """Return a reconciliation snapshot, ordered by id."""
        conn = self._get_conn()
        rows = conn.execute("SELECT id, name FROM pantry_items ORDER BY id").fetchall()
        return [PantryRecord(id=r["id"], name=r["name"]) for r in rows]

    def get_item(self, item_id: int) -> dict | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT * FROM pantry_items WHERE id = ?", (item_id,)
        ).fetchone()
        return dict(row) if row else None

    def add_items(
        self,
        items: Iterable[ReceiptLineItem],
        vendor: str | None = None,
        purchase_date: str | None = None,
    ) -> list[int]:
        """Insert receipt items as new pantry rows.

        Returns:
            List of inserted row IDs.
        """
        conn = self._get_conn()
        ids: list[int] = []
        for item in items:
            cur = conn.execute(
                """INSERT INTO pantry_items
                   (name, quantity, price, vendor, purchase_date)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    item.name,
                    item.quantity,
                    str(item.price) if item.price is not None else None,
                    vendor,
                    purchase_date,
                ),
            )
            ids.append(cur.lastrowid)
        conn.commit()
        return ids

    def apply_receipt(self, document: ReceiptDocument) -> tuple[int, int]:
        """Store a reconciled receipt.

        Items annotated with ``inventory_id`` add their quantity to that
        record; the rest become new rows.

        Returns:
            (number of records updated, number of records created)
        """
        conn = self._get_conn()
        updated = 0
        new_items: list[ReceiptLineItem] = []
        for item in document.items:
            if item.inventory_id is None:
                new_items.append(item)
                continue
            cur = conn.execute(
                """UPDATE pantry_items
                   SET quantity = quantity + ?,
                       price = COALESCE(?, price),
                       updated_at = datetime('now', 'localtime')
                   WHERE id = ?""",
                (
                    item.quantity,
                    str(item.price) if item.price is not None else None,
                    item.inventory_id,
                ),
            )
            if cur.rowcount:
                updated += 1
            else:
                # Record vanished since the snapshot was taken
                new_items.append(item)
        conn.commit()

        vendor = None if document.vendor_name == UNKNOWN_VENDOR else document.vendor_name
        created = self.add_items(new_items, vendor=vendor, purchase_date=document.date)

        conn.execute(
            """INSERT INTO receipt_scans
               (document_id, source, vendor, receipt_date, total, item_count, matched_count)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                document.document_id,
                document.source,
                vendor,
                document.date,
                str(document.total) if document.total is not None else None,
                len(document.items),
                updated,
            ),
        )
        conn.commit()
        return updated, len(created)

    def list_scans(self, limit: int = 20) -> list[dict]:
        """Return the most recently applied receipts, newest first."""
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT * FROM receipt_scans ORDER BY id DESC LIMIT ?", (limit,)
        ).fetchall()
        return [dict(r) for r in rows]

    def delete_item(self, item_id: int) -> None:
        """Delete a pantry item by ID."""
        conn = self._get_conn()
        conn.execute("DELETE FROM pantry_items WHERE id = ?", (item_id,))
        conn.commit()
