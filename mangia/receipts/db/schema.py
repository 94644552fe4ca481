"""Pantry database schema and its migrations."""

from __future__ import annotations

import sqlite3
from pathlib import Path

# Each entry upgrades the database from the previous version to its key
_MIGRATIONS: dict[int, str] = {
    1: """
CREATE TABLE IF NOT EXISTS pantry_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    quantity INTEGER NOT NULL DEFAULT 1,
    price TEXT,
    vendor TEXT,
    purchase_date TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
);

CREATE INDEX IF NOT EXISTS idx_pantry_name ON pantry_items(name COLLATE NOCASE);
""",
    2: """
CREATE TABLE IF NOT EXISTS receipt_scans (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    document_id TEXT,
    source TEXT NOT NULL DEFAULT '',
    vendor TEXT,
    receipt_date TEXT,
    total TEXT,
    item_count INTEGER NOT NULL,
    matched_count INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
);
""",
}

_SCHEMA_VERSION = max(_MIGRATIONS)


def _current_version(conn: sqlite3.Connection) -> int:
    conn.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
    row = conn.execute("SELECT MAX(version) AS version FROM schema_version").fetchone()
    return row["version"] or 0


def ensure_schema(db_path: str | Path) -> sqlite3.Connection:
    """Open the pantry database and apply any pending migrations.

    ``":memory:"`` opens a private in-memory database.

    Returns:
        An open sqlite3.Connection at ``_SCHEMA_VERSION``.
    """
    if str(db_path) == ":memory:":
        conn = sqlite3.connect(":memory:")
    else:
        db_path = Path(db_path).expanduser()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(db_path))
        conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = sqlite3.Row

    version = _current_version(conn)
    if version > _SCHEMA_VERSION:
        conn.close()
        raise RuntimeError(
            f"{db_path} has schema version {version}, newer than this "
            f"release supports ({_SCHEMA_VERSION})"
        )

    for target in range(version + 1, _SCHEMA_VERSION + 1):
        conn.executescript(_MIGRATIONS[target])
        conn.execute("DELETE FROM schema_version")
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (target,))
        conn.commit()

    return conn
