import json
import sqlite3
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from corpsite.domain.entities import SYSTEM_FIELDS, CmsContent, OrderedItem


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def parse_dt(s: str | None) -> datetime | None:
    if not s:
        return None
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


class SQLiteCmsContentRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        return conn

    def get(self, page: str, section: str) -> CmsContent | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM cms_content WHERE page = ? AND section = ?",
                (page, section),
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_by_page(self, page: str) -> list[CmsContent]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM cms_content WHERE page = ? ORDER BY section ASC", (page,)
            ).fetchall()
            return [self._map_row(row) for row in rows]
        finally:
            conn.close()

    def list_all(self) -> list[CmsContent]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM cms_content ORDER BY page ASC, section ASC"
            ).fetchall()
            return [self._map_row(row) for row in rows]
        finally:
            conn.close()

    def upsert(
        self, page: str, section: str, data: dict[str, Any], now: datetime
    ) -> tuple[CmsContent, bool]:
        """Insert or replace the data of one section. Returns (content, created)."""
        conn = self._get_conn()
        try:
            existing = conn.execute(
                "SELECT id FROM cms_content WHERE page = ? AND section = ?",
                (page, section),
            ).fetchone()
            conn.execute(
                """
                INSERT INTO cms_content (page, section, data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(page, section) DO UPDATE SET
                    data=excluded.data,
                    updated_at=excluded.updated_at
            """,
                (page, section, json.dumps(data), now.isoformat(), now.isoformat()),
            )
            conn.commit()
            row = conn.execute(
                "SELECT * FROM cms_content WHERE page = ? AND section = ?",
                (page, section),
            ).fetchone()
            return self._map_row(row), existing is None
        finally:
            conn.close()

    def delete(self, page: str, section: str) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                "DELETE FROM cms_content WHERE page = ? AND section = ?", (page, section)
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> CmsContent:
        return CmsContent(
            id=row["id"],
            page=row["page"],
            section=row["section"],
            data=json.loads(row["data"]) if row["data"] else {},
            created_at=parse_dt(row["created_at"]),
            updated_at=parse_dt(row["updated_at"]),
        )


ItemT = TypeVar("ItemT", bound=OrderedItem)


class SQLiteOrderedRepo(Generic[ItemT]):
    """
    Repository for one ordered-list table.

    Column names are taken from the model fields, so the table must mirror
    the model (see migrations/002_ordered_lists.sql).
    """

    def __init__(self, db_path: str, table: str, model: type[ItemT]):
        self.db_path = db_path
        self.table = table
        self.model = model
        self.columns = [name for name in model.model_fields if name not in SYSTEM_FIELDS]

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        return conn

    def list_ordered(self) -> list[ItemT]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f'SELECT * FROM "{self.table}" ORDER BY "order" ASC, id ASC'
            ).fetchall()
            return [self._map_row(row) for row in rows]
        finally:
            conn.close()

    def get_by_id(self, item_id: int) -> ItemT | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                f'SELECT * FROM "{self.table}" WHERE id = ?', (item_id,)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def create(self, item: ItemT) -> ItemT:
        cols = [*self.columns, "created_at", "updated_at"]
        quoted = ", ".join(f'"{c}"' for c in cols)
        placeholders = ", ".join("?" for _ in cols)
        values = [getattr(item, c) for c in self.columns]
        values += [item.created_at.isoformat(), item.updated_at.isoformat()]

        conn = self._get_conn()
        try:
            cursor = conn.execute(
                f'INSERT INTO "{self.table}" ({quoted}) VALUES ({placeholders})', values
            )
            conn.commit()
            return item.model_copy(update={"id": cursor.lastrowid})
        finally:
            conn.close()

    def update(self, item: ItemT) -> ItemT:
        assignments = ", ".join(f'"{c}" = ?' for c in [*self.columns, "updated_at"])
        values = [getattr(item, c) for c in self.columns]
        values += [item.updated_at.isoformat(), item.id]

        conn = self._get_conn()
        try:
            conn.execute(f'UPDATE "{self.table}" SET {assignments} WHERE id = ?', values)
            conn.commit()
            return item
        finally:
            conn.close()

    def delete(self, item_id: int) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute(f'DELETE FROM "{self.table}" WHERE id = ?', (item_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> ItemT:
        values = {c: row[c] for c in self.columns}
        return self.model(
            id=row["id"],
            created_at=parse_dt(row["created_at"]),
            updated_at=parse_dt(row["updated_at"]),
            **values,
        )
