"""Database schema DDL definitions and initialization utilities.

Tables:
  - itinerary: scheduled (or not yet scheduled) trip items
  - expenses: individual expense records in their original currency
  - notes: tickets, bookings and free-form notes
  - checklists: packing checklists, items stored as a JSON array
  - metadata: key/value store (local settings, itinerary selection, schema version)
"""

from __future__ import annotations
import sqlite3
from typing import Dict, Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

NOTES_DDL = f"""
CREATE TABLE IF NOT EXISTS notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    content TEXT,
    url TEXT,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

ITINERARY_DDL = f"""
CREATE TABLE IF NOT EXISTS itinerary (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    date TEXT, -- ISO date (YYYY-MM-DD); NULL means unscheduled
    time TEXT, -- HH:MM
    location TEXT,
    city TEXT,
    notes TEXT,
    linked_note_id INTEGER,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    FOREIGN KEY (linked_note_id) REFERENCES notes(id) ON DELETE SET NULL
);
"""

EXPENSES_DDL = f"""
CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT,
    amount REAL NOT NULL DEFAULT 0,
    currency TEXT NOT NULL DEFAULT 'TWD',
    category TEXT NOT NULL DEFAULT 'other',
    payer TEXT NOT NULL DEFAULT 'me',
    split_count INTEGER NOT NULL DEFAULT 1,
    date TEXT, -- ISO date (YYYY-MM-DD)
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

CHECKLISTS_DDL = f"""
CREATE TABLE IF NOT EXISTS checklists (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    category TEXT NOT NULL,
    items TEXT NOT NULL DEFAULT '[]', -- JSON [{{"id","name","checked"}}]
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

ITINERARY_DATE_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_itinerary_date_time ON itinerary(date, time);"
)
EXPENSES_DATE_INDEX_DDL = "CREATE INDEX IF NOT EXISTS idx_expenses_date ON expenses(date);"

DDL_ORDER: Sequence[str] = (
    NOTES_DDL,
    ITINERARY_DDL,
    EXPENSES_DDL,
    CHECKLISTS_DDL,
    METADATA_DDL,
)

# Columns added after the first release; older files get them via ALTER TABLE.
ADDED_COLUMNS: Dict[str, Dict[str, str]] = {
    "itinerary": {"city": "TEXT", "linked_note_id": "INTEGER"},
    "expenses": {"split_count": "INTEGER NOT NULL DEFAULT 1"},
    "notes": {"url": "TEXT"},
}


def init_db(path: Path) -> None:
    """Create all tables idempotently.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        _ensure_indexes(cur)
        conn.commit()
    finally:
        conn.close()


def _ensure_indexes(cur: sqlite3.Cursor) -> None:
    for ddl in (ITINERARY_DATE_INDEX_DDL, EXPENSES_DATE_INDEX_DDL):
        try:
            cur.execute(ddl)
        except sqlite3.OperationalError:
            # Legacy tables may lack columns; migration adds them first.
            continue
