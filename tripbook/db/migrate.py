"""Database migration utilities.

Schema evolution is keyed by an integer `schema_version` stored in the
metadata table. Migrations are idempotent and preserve user data.
"""

from __future__ import annotations
from pathlib import Path
import logging
import sqlite3
from typing import Optional, Set

from . import schema as schema_def
from .schema import init_db

CURRENT_SCHEMA_VERSION = 2
SCHEMA_VERSION_KEY = "schema_version"

logger = logging.getLogger("tripbook.db.migrate")


def _get_schema_version(conn: sqlite3.Connection) -> Optional[int]:
    try:
        cur = conn.cursor()
        cur.execute("SELECT value FROM metadata WHERE key=?", (SCHEMA_VERSION_KEY,))
        row = cur.fetchone()
        if row:
            return int(row[0])
    except sqlite3.OperationalError:
        # metadata table may not exist yet (first run before init_db)
        return None
    return None


def apply_migrations(db_path: Path) -> int:
    """Apply required migrations and return resulting schema version."""
    init_db(db_path)
    conn = sqlite3.connect(db_path)
    try:
        version = _get_schema_version(conn) or 1
        if version < 2:
            _migrate_to_v2(conn)
            version = 2
        _set_schema_version(conn, version)
        conn.commit()
        return version
    finally:
        conn.close()


def _set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    cur = conn.cursor()
    cur.execute(
        "INSERT INTO metadata (key, value) VALUES (?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
        f"updated_at=({schema_def.BASIC_UTC_NOW})",
        (SCHEMA_VERSION_KEY, str(version)),
    )


def _existing_columns(cur: sqlite3.Cursor, table: str) -> Set[str]:
    cur.execute(f"PRAGMA table_info({table})")
    return {row[1] for row in cur.fetchall()}


def _migrate_to_v2(conn: sqlite3.Connection) -> None:
    """Add split, city, linked-note and url columns missing from v1 files."""
    cur = conn.cursor()
    try:
        for table, columns in schema_def.ADDED_COLUMNS.items():
            present = _existing_columns(cur, table)
            for name, decl in columns.items():
                if name in present:
                    continue
                logger.info("adding column %s.%s", table, name)
                cur.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")
        schema_def._ensure_indexes(cur)
        conn.commit()
    except Exception:
        conn.rollback()
        raise
