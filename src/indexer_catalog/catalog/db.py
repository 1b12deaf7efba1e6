from __future__ import annotations

import json
import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..domain.models import IndexerRecord
from ..logging import get_logger
from ..paths import find_project_root, var_dir
from .constants import (
    IMPLEMENTATION_DEFAULT,
    INDEXER_TYPE_DEFAULT,
    LANGUAGE_DEFAULT,
    LIST_LIMIT_DEFAULT,
    LIST_LIMIT_MAX,
    LIST_LIMIT_MIN,
    LIST_OFFSET_MAX,
    PRIVACY_CHOICES,
    PRIVACY_DEFAULT,
    PROTOCOL_CHOICES,
    PROTOCOL_DEFAULT,
)


LOG = get_logger("catalog-db")


DEFAULT_DB_FOLDER = "catalog"
DEFAULT_DB_FILENAME = "indexers.sqlite3"

PROTOCOL_ENUM_SQL = ", ".join(f"'{value}'" for value in PROTOCOL_CHOICES)
PRIVACY_ENUM_SQL = ", ".join(f"'{value}'" for value in PRIVACY_CHOICES)


SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS available_indexers (
  indexer_id      INTEGER PRIMARY KEY,
  name            TEXT NOT NULL UNIQUE CHECK(length(trim(name)) > 0),
  protocol        TEXT NOT NULL DEFAULT '{PROTOCOL_DEFAULT}'
                  CHECK(protocol IN ({PROTOCOL_ENUM_SQL})),
  language        TEXT DEFAULT '{LANGUAGE_DEFAULT}',
  description     TEXT,
  privacy         TEXT NOT NULL DEFAULT '{PRIVACY_DEFAULT}'
                  CHECK(privacy IN ({PRIVACY_ENUM_SQL})),
  categories      TEXT NOT NULL DEFAULT '[]',   -- JSON list of labels
  available_base_urls TEXT,                     -- JSON list of URLs or NULL
  indexer_type    TEXT DEFAULT '{INDEXER_TYPE_DEFAULT}',
  implementation  TEXT DEFAULT '{IMPLEMENTATION_DEFAULT}',
  verified        INTEGER NOT NULL DEFAULT 0,
  created_at      TEXT DEFAULT (datetime('now')),
  updated_at      TEXT DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_available_indexers_protocol ON available_indexers(protocol);
"""


class IndexerCatalog:
    """SQLite-backed catalog of available indexers.

    - Places DB under `<repo-root>/var/catalog/indexers.sqlite3` unless an
      explicit `db_path` is given.
    - Ensures schema on first use.
    - Provides a context-managed connection method.
    """

    def __init__(self, root_dir: Optional[str] = None, *, db_path: Optional[str] = None) -> None:
        if db_path:
            self.db_path = os.path.abspath(db_path)
            os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)
        else:
            root = find_project_root(root_dir)
            db_folder = os.path.join(var_dir(root), DEFAULT_DB_FOLDER)
            os.makedirs(db_folder, exist_ok=True)
            self.db_path = os.path.join(db_folder, DEFAULT_DB_FILENAME)
        LOG.info(f"Indexer catalog path: {self.db_path}")
        self._ensure_schema()

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self.connect() as conn:
            cur = conn.cursor()
            try:
                cur.execute("PRAGMA journal_mode=WAL;")
            except sqlite3.OperationalError:
                # Non-fatal; continue with schema creation
                pass
            cur.executescript(SCHEMA_SQL)
            self._migrate_add_base_urls(conn)
            conn.commit()
            LOG.debug("Indexer catalog schema ensured.")

    def _migrate_add_base_urls(self, conn: sqlite3.Connection) -> None:
        """Add the available_base_urls column to catalogs created before it existed."""
        cur = conn.cursor()
        cur.execute("PRAGMA table_info(available_indexers);")
        columns = [row[1] for row in cur.fetchall()]
        if "available_base_urls" in columns:
            return
        LOG.info("Migrating available_indexers table to add available_base_urls column")
        cur.execute("ALTER TABLE available_indexers ADD COLUMN available_base_urls TEXT;")

    @staticmethod
    def _validate(record: IndexerRecord) -> None:
        if not record.name or not record.name.strip():
            raise ValueError("indexer name required")
        if record.protocol not in PROTOCOL_CHOICES:
            raise ValueError(f"{record.name}: protocol must be one of {PROTOCOL_CHOICES}, got {record.protocol!r}")
        if record.privacy not in PRIVACY_CHOICES:
            raise ValueError(f"{record.name}: privacy must be one of {PRIVACY_CHOICES}, got {record.privacy!r}")

    def upsert_indexer(self, record: IndexerRecord, base_urls: Optional[Sequence[str]] = None) -> bool:
        """Create or update an indexer keyed by name. Returns True when created.

        An empty ``base_urls`` stores NULL on create and leaves the stored
        URLs untouched on update.
        """
        self._validate(record)
        categories_json = json.dumps(list(record.categories))
        base_urls_json = json.dumps(list(base_urls)) if base_urls else None
        language = record.language or LANGUAGE_DEFAULT
        with self.connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT indexer_id FROM available_indexers WHERE name = ?;", (record.name,))
            existing = cur.fetchone()
            if existing is None:
                cur.execute(
                    """
                    INSERT INTO available_indexers
                        (name, protocol, language, description, privacy, categories, available_base_urls)
                    VALUES (?, ?, ?, ?, ?, ?, ?);
                    """,
                    (
                        record.name,
                        record.protocol,
                        language,
                        record.description,
                        record.privacy,
                        categories_json,
                        base_urls_json,
                    ),
                )
            else:
                cur.execute(
                    """
                    UPDATE available_indexers SET
                        protocol=?, language=?, description=?, privacy=?, categories=?,
                        available_base_urls=COALESCE(?, available_base_urls),
                        updated_at=datetime('now')
                    WHERE indexer_id=?;
                    """,
                    (
                        record.protocol,
                        language,
                        record.description,
                        record.privacy,
                        categories_json,
                        base_urls_json,
                        existing["indexer_id"],
                    ),
                )
            conn.commit()
        return existing is None

    @staticmethod
    def _row_to_dict(row: Optional[sqlite3.Row]) -> Optional[Dict[str, Any]]:
        if row is None:
            return None
        out = dict(row)
        try:
            out["categories"] = json.loads(out.get("categories") or "[]")
        except ValueError:
            LOG.warning(f"Unreadable categories for indexer {out.get('name')!r}")
            out["categories"] = []
        try:
            out["available_base_urls"] = json.loads(out.get("available_base_urls") or "[]")
        except ValueError:
            LOG.warning(f"Unreadable base URLs for indexer {out.get('name')!r}")
            out["available_base_urls"] = []
        out["verified"] = bool(out.get("verified"))
        return out

    def _rows_to_dicts(self, rows: Sequence[sqlite3.Row]) -> List[Dict[str, Any]]:
        return [d for d in (self._row_to_dict(r) for r in rows) if d is not None]

    def get_indexer(self, name: str) -> Optional[Dict[str, Any]]:
        with self.connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM available_indexers WHERE name = ?;", (name,))
            return self._row_to_dict(cur.fetchone())

    def count(self) -> int:
        with self.connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) AS total FROM available_indexers;")
            return int(cur.fetchone()["total"])

    def list_indexers(
        self,
        *,
        category: Optional[str] = None,
        protocol: Optional[str] = None,
        limit: int = LIST_LIMIT_DEFAULT,
        offset: int = 0,
    ) -> Dict[str, Any]:
        """List indexers ordered by name, optionally filtered.

        ``limit`` is clamped to [LIST_LIMIT_MIN, LIST_LIMIT_MAX] and ``offset``
        to [0, LIST_OFFSET_MAX].
        """
        limit = min(max(int(limit), LIST_LIMIT_MIN), LIST_LIMIT_MAX)
        offset = min(max(int(offset), 0), LIST_OFFSET_MAX)
        clauses: List[str] = []
        params: List[Any] = []
        if category:
            clauses.append(
                "EXISTS (SELECT 1 FROM json_each(available_indexers.categories) AS c WHERE c.value = ?)"
            )
            params.append(category)
        if protocol:
            if protocol not in PROTOCOL_CHOICES:
                raise ValueError(f"Unsupported protocol: {protocol}")
            clauses.append("protocol = ?")
            params.append(protocol)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with self.connect() as conn:
            cur = conn.cursor()
            cur.execute(f"SELECT COUNT(*) AS total FROM available_indexers {where};", params)
            total = int(cur.fetchone()["total"])
            cur.execute(
                f"SELECT * FROM available_indexers {where} ORDER BY name COLLATE NOCASE LIMIT ? OFFSET ?;",
                [*params, limit, offset],
            )
            rows = self._rows_to_dicts(cur.fetchall())

        return {"total": total, "items": rows, "limit": limit, "offset": offset}

    def fetch_summary(self) -> Dict[str, Any]:
        with self.connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) AS total FROM available_indexers;")
            total = int(cur.fetchone()["total"])

            cur.execute("SELECT protocol, COUNT(*) AS n FROM available_indexers GROUP BY protocol ORDER BY protocol;")
            protocols = {row["protocol"]: int(row["n"]) for row in cur.fetchall()}

            cur.execute("SELECT privacy, COUNT(*) AS n FROM available_indexers GROUP BY privacy ORDER BY privacy;")
            privacy = {row["privacy"]: int(row["n"]) for row in cur.fetchall()}

            cur.execute(
                """
                SELECT c.value AS category, COUNT(*) AS n
                FROM available_indexers, json_each(available_indexers.categories) AS c
                GROUP BY c.value
                ORDER BY n DESC, c.value;
                """
            )
            categories = {row["category"]: int(row["n"]) for row in cur.fetchall()}

            cur.execute("SELECT COUNT(*) AS n FROM available_indexers WHERE categories = '[]';")
            uncategorized = int(cur.fetchone()["n"])

        return {
            "total": total,
            "protocols": protocols,
            "privacy": privacy,
            "categories": categories,
            "uncategorized": uncategorized,
        }
