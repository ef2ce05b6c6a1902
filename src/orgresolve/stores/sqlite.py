from __future__ import annotations

import re
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Iterable, List, Union

from ..core.contracts import LocalOrgRecord

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def like_pattern(term: str) -> str:
    """'%<term>%' with LIKE wildcards in `term` escaped (escape char '\\')."""
    escaped = (
        term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    return f"%{escaped}%"


class SqliteOrgStore:
    """
    Org table in a SQLite file. One connection per call, so a store can be
    shared by searches running on different threads.

    Schema (created if missing):
        id TEXT, name TEXT NOT NULL, abbreviation TEXT, is_other INTEGER
    """

    def __init__(self, path: Union[str, Path], table: str = "orgs") -> None:
        if not _IDENT_RE.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        self.path = Path(path)
        self.table = table
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.path))
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with closing(self._connect()) as conn, conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    id TEXT,
                    name TEXT NOT NULL,
                    abbreviation TEXT,
                    is_other INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{self.table}_name "
                f"ON {self.table}(name)"
            )

    def add_many(self, records: Iterable[LocalOrgRecord]) -> int:
        rows = [
            (r.id, r.name, r.abbreviation or "", 1 if r.is_other else 0)
            for r in records
        ]
        with closing(self._connect()) as conn, conn:
            conn.executemany(
                f"INSERT INTO {self.table} (id, name, abbreviation, is_other) "
                "VALUES (?, ?, ?, ?)",
                rows,
            )
        return len(rows)

    def find_by_substring(
        self, term: str, exclude_other: bool = True
    ) -> List[LocalOrgRecord]:
        query = f"SELECT id, name, abbreviation, is_other FROM {self.table}"
        clauses: List[str] = []
        params: List[str] = []

        if exclude_other:
            clauses.append("is_other = 0")
        if term:
            pat = like_pattern(term.lower())
            clauses.append(
                "(lower(name) LIKE ? ESCAPE '\\' "
                "OR lower(abbreviation) LIKE ? ESCAPE '\\')"
            )
            params.extend([pat, pat])

        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY name"

        with closing(self._connect()) as conn:
            rows = conn.execute(query, params).fetchall()

        return [
            LocalOrgRecord(
                name=row["name"],
                abbreviation=row["abbreviation"] or "",
                is_other=bool(row["is_other"]),
                id=row["id"],
            )
            for row in rows
        ]
