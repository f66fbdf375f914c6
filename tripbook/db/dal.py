"""Data Access Layer for the local trip store.

Responsibilities
----------------
- CRUD helpers for itinerary entries, expenses, notes and checklists.
- Key/value metadata used for local settings and the sticky itinerary
  selection.
- Rows are returned as plain dicts in the order the UI shows them; the ledger
  relies on expense order for payer first-appearance.
"""

from __future__ import annotations

from pathlib import Path
import json
import sqlite3
from typing import Any, Dict, Iterable, List, Mapping, Optional
from datetime import date

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

EXPENSE_COLUMNS = (
    "title",
    "amount",
    "currency",
    "category",
    "payer",
    "split_count",
    "date",
)
ITINERARY_COLUMNS = (
    "title",
    "date",
    "time",
    "location",
    "city",
    "notes",
    "linked_note_id",
)
NOTE_COLUMNS = ("title", "content", "url")


def _to_db_value(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    return value


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def _insert(
        self, table: str, allowed: Iterable[str], values: Mapping[str, Any]
    ) -> int:
        cols = [c for c in allowed if c in values]
        with self._connect() as conn:
            cur = conn.cursor()
            if cols:
                placeholders = ", ".join("?" for _ in cols)
                cur.execute(
                    f"INSERT INTO {table} ({', '.join(cols)}) VALUES ({placeholders})",
                    [_to_db_value(values[c]) for c in cols],
                )
            else:
                cur.execute(f"INSERT INTO {table} DEFAULT VALUES")
            conn.commit()
            return int(cur.lastrowid)

    def _get(self, table: str, row_id: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(f"SELECT * FROM {table} WHERE id = ?", (row_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def _update(
        self,
        table: str,
        allowed: Iterable[str],
        row_id: int,
        changes: Mapping[str, Any],
    ) -> None:
        """Apply a partial update; raises ValueError when the row is missing."""
        cols = [c for c in allowed if c in changes]
        assignments = [f"{c} = ?" for c in cols] + [f"updated_at = ({UTC_NOW_SQL})"]
        params = [_to_db_value(changes[c]) for c in cols] + [row_id]
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"UPDATE {table} SET {', '.join(assignments)} WHERE id = ?", params
            )
            if cur.rowcount == 0:
                raise ValueError(f"{table} row {row_id} not found")
            conn.commit()

    def _delete(self, table: str, row_id: int) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(f"DELETE FROM {table} WHERE id = ?", (row_id,))
            if cur.rowcount == 0:
                raise ValueError(f"{table} row {row_id} not found")
            conn.commit()

    # ------------------------------------------------------------------
    # Expenses
    def insert_expense(self, values: Mapping[str, Any]) -> int:
        return self._insert("expenses", EXPENSE_COLUMNS, values)

    def get_expense(self, expense_id: int) -> Optional[Dict[str, Any]]:
        return self._get("expenses", expense_id)

    def list_expenses(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payer: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Newest first; undated expenses sort after dated ones."""
        clauses: List[str] = []
        params: List[Any] = []
        if start_date:
            clauses.append("date >= ?")
            params.append(start_date.isoformat())
        if end_date:
            clauses.append("date <= ?")
            params.append(end_date.isoformat())
        if payer:
            clauses.append("payer = ?")
            params.append(payer)
        if category:
            clauses.append("category = ?")
            params.append(category)
        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
        sql = f"SELECT * FROM expenses{where} ORDER BY COALESCE(date, '') DESC, id DESC"
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(sql, params)
            return [dict(r) for r in cur.fetchall()]

    def update_expense(self, expense_id: int, changes: Mapping[str, Any]) -> None:
        self._update("expenses", EXPENSE_COLUMNS, expense_id, changes)

    def delete_expense(self, expense_id: int) -> None:
        self._delete("expenses", expense_id)

    # ------------------------------------------------------------------
    # Itinerary
    def insert_itinerary(self, values: Mapping[str, Any]) -> int:
        return self._insert("itinerary", ITINERARY_COLUMNS, values)

    def get_itinerary(self, entry_id: int) -> Optional[Dict[str, Any]]:
        return self._get("itinerary", entry_id)

    def list_itinerary(self) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT * FROM itinerary "
                "ORDER BY COALESCE(date, '') ASC, COALESCE(time, '') ASC, id ASC"
            )
            return [dict(r) for r in cur.fetchall()]

    def update_itinerary(self, entry_id: int, changes: Mapping[str, Any]) -> None:
        self._update("itinerary", ITINERARY_COLUMNS, entry_id, changes)

    def delete_itinerary(self, entry_id: int) -> None:
        self._delete("itinerary", entry_id)

    # ------------------------------------------------------------------
    # Notes
    def insert_note(self, values: Mapping[str, Any]) -> int:
        return self._insert("notes", NOTE_COLUMNS, values)

    def get_note(self, note_id: int) -> Optional[Dict[str, Any]]:
        return self._get("notes", note_id)

    def list_notes(self) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM notes ORDER BY created_at DESC, id DESC")
            return [dict(r) for r in cur.fetchall()]

    def update_note(self, note_id: int, changes: Mapping[str, Any]) -> None:
        self._update("notes", NOTE_COLUMNS, note_id, changes)

    def delete_note(self, note_id: int) -> None:
        self._delete("notes", note_id)

    # ------------------------------------------------------------------
    # Checklists (items kept as JSON text)
    @staticmethod
    def _checklist_row(row: sqlite3.Row) -> Dict[str, Any]:
        data = dict(row)
        try:
            items = json.loads(data.get("items") or "[]")
        except (json.JSONDecodeError, TypeError):
            items = []
        data["items"] = items if isinstance(items, list) else []
        return data

    def insert_checklist(self, category: str) -> int:
        return self._insert("checklists", ("category",), {"category": category})

    def get_checklist(self, checklist_id: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM checklists WHERE id = ?", (checklist_id,))
            row = cur.fetchone()
            return self._checklist_row(row) if row else None

    def list_checklists(self) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM checklists ORDER BY id ASC")
            return [self._checklist_row(r) for r in cur.fetchall()]

    def set_checklist_items(
        self, checklist_id: int, items: List[Dict[str, Any]]
    ) -> None:
        self._update(
            "checklists",
            ("items",),
            checklist_id,
            {"items": json.dumps(items, ensure_ascii=False)},
        )

    def delete_checklist(self, checklist_id: int) -> None:
        self._delete("checklists", checklist_id)

    # ------------------------------------------------------------------
    # Metadata
    def get_metadata(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT value FROM metadata WHERE key = ?", (key,))
            row = cur.fetchone()
            return row[0] if row else None

    def set_metadata(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO metadata (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = ({UTC_NOW_SQL})
                """,
                (key, value),
            )
            conn.commit()

    def delete_metadata(self, *keys: str) -> None:
        if not keys:
            return
        with self._connect() as conn:
            conn.execute(
                f"DELETE FROM metadata WHERE key IN ({', '.join('?' for _ in keys)})",
                keys,
            )
            conn.commit()
