import sqlite3

from tripbook.db.dal import Database
from tripbook.db.migrate import CURRENT_SCHEMA_VERSION, apply_migrations

LEGACY_DDL = """
CREATE TABLE notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    content TEXT,
    created_at TEXT NOT NULL DEFAULT '2024-01-01T00:00:00Z',
    updated_at TEXT NOT NULL DEFAULT '2024-01-01T00:00:00Z'
);
CREATE TABLE itinerary (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    date TEXT,
    time TEXT,
    location TEXT,
    notes TEXT,
    created_at TEXT NOT NULL DEFAULT '2024-01-01T00:00:00Z',
    updated_at TEXT NOT NULL DEFAULT '2024-01-01T00:00:00Z'
);
CREATE TABLE expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT,
    amount REAL NOT NULL DEFAULT 0,
    currency TEXT NOT NULL DEFAULT 'TWD',
    category TEXT NOT NULL DEFAULT 'other',
    payer TEXT NOT NULL DEFAULT 'me',
    date TEXT,
    created_at TEXT NOT NULL DEFAULT '2024-01-01T00:00:00Z',
    updated_at TEXT NOT NULL DEFAULT '2024-01-01T00:00:00Z'
);
"""


def _columns(path, table):
    conn = sqlite3.connect(path)
    try:
        return {row[1] for row in conn.execute(f"PRAGMA table_info({table})")}
    finally:
        conn.close()


def test_fresh_database_is_current(tmp_path):
    path = tmp_path / "fresh.sqlite3"
    assert apply_migrations(path) == CURRENT_SCHEMA_VERSION
    assert Database(path).get_metadata("schema_version") == str(CURRENT_SCHEMA_VERSION)


def test_legacy_file_gains_columns_and_keeps_rows(tmp_path):
    path = tmp_path / "legacy.sqlite3"
    conn = sqlite3.connect(path)
    conn.executescript(LEGACY_DDL)
    conn.execute("INSERT INTO expenses (title, amount, payer) VALUES ('Taxi', 420, 'Alice')")
    conn.commit()
    conn.close()

    assert apply_migrations(path) == 2
    assert {"split_count"} <= _columns(path, "expenses")
    assert {"city", "linked_note_id"} <= _columns(path, "itinerary")
    assert "url" in _columns(path, "notes")

    rows = Database(path).list_expenses()
    assert len(rows) == 1
    assert rows[0]["payer"] == "Alice"
    assert rows[0]["split_count"] == 1

    # second run is a no-op
    assert apply_migrations(path) == 2
