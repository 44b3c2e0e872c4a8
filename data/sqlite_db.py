"""
SQLite implementation of DatabaseInterface.

This module provides a complete SQLite implementation of the database interface,
including automatic migrations and connection management. Documents are stored
as JSON text and filtered with SQLite's json_extract().
"""

import json
import re
import sqlite3
import logging
import uuid
from pathlib import Path
from typing import List, Optional, Dict, Any, Union
from datetime import datetime

from .interface import DatabaseInterface
from . import queries as Q
from domain.exceptions import DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

# Field names allowed in json_extract paths (no quotes, no SQL)
FIELD_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

RESERVED_FIELDS = ("id", "created_at", "updated_at")


def _now() -> str:
    return datetime.now().isoformat(timespec="microseconds")


class SQLiteDatabase(DatabaseInterface):
    """
    SQLite implementation of DatabaseInterface.

    Features:
    - Automatic migrations on initialization
    - One connection per instance with row_factory
    - Every write committed immediately (no multi-document transactions)
    """

    def __init__(self, db_path: Union[Path, str]):
        """
        Initialize SQLite database.

        Args:
            db_path: Path to SQLite database file (created if not exists),
                     or ":memory:" for an in-memory database
        """
        if str(db_path) == ":memory:":
            self.db_path = Path(":memory:")
            target = ":memory:"
        else:
            self.db_path = Path(db_path)
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(self.db_path)

        # Initialize connection
        self.conn = sqlite3.connect(target, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")

        # Run migrations
        self._run_migrations()
        logger.info(f"SQLite database initialized at {self.db_path}")

    def _run_migrations(self):
        """
        Run all SQL migration files in order, tracking which have been applied.

        Uses schema_migrations table to track applied migrations.
        """
        migrations_dir = Path(__file__).parent / "migrations"
        migration_files = sorted(migrations_dir.glob("*.sql"))

        # Step 1: Ensure migration tracking table exists
        tracking_migration = migrations_dir / "000_migration_tracking.sql"
        if tracking_migration.exists():
            self.conn.executescript(tracking_migration.read_text())
            self.conn.commit()

        # Step 2: Get list of already-applied migrations
        cursor = self.conn.cursor()
        cursor.execute("SELECT migration_name FROM schema_migrations")
        applied_migrations = {row[0] for row in cursor.fetchall()}

        # Step 3: Run each migration that hasn't been applied yet
        migrations_run = 0
        for migration_file in migration_files:
            migration_name = migration_file.name

            if migration_name in applied_migrations:
                logger.debug(f"Skipping already-applied migration: {migration_name}")
                continue

            logger.debug(f"Running migration: {migration_name}")
            self.conn.executescript(migration_file.read_text())
            cursor.execute(
                "INSERT OR IGNORE INTO schema_migrations (migration_name) VALUES (?)",
                (migration_name,)
            )
            self.conn.commit()
            migrations_run += 1
            logger.info(f"Applied migration: {migration_name}")

        logger.info(f"Migration summary: {migrations_run} new, {len(applied_migrations)} already applied")

    def _row_to_document(self, row: sqlite3.Row) -> Optional[Dict[str, Any]]:
        """Convert a documents row to a dict with id and timestamps."""
        if row is None:
            return None
        document = json.loads(row["data"])
        document["id"] = row["id"]
        document["created_at"] = row["created_at"]
        document["updated_at"] = row["updated_at"]
        return document

    def _json_field(self, name: str) -> str:
        if not FIELD_NAME_PATTERN.match(name):
            raise DatabaseError(f"Invalid field name: {name!r}", details={"field": name})
        if name in RESERVED_FIELDS:
            return name
        return Q.JSON_FIELD.format(field=name)

    def _encode(self, data: Dict[str, Any]) -> str:
        payload = {k: v for k, v in data.items() if k not in RESERVED_FIELDS}
        # json_extract cannot read NaN/Infinity tokens
        try:
            return json.dumps(payload, ensure_ascii=False, allow_nan=False)
        except ValueError as e:
            raise DatabaseError(f"Document contains a non-finite number: {e}")

    # ==================== Document Operations ====================

    def create_document(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Store a new document and return it with id and timestamps."""
        doc_id = data.get("id") or uuid.uuid4().hex
        timestamp = _now()

        try:
            cursor = self.conn.cursor()
            cursor.execute(
                Q.INSERT_DOCUMENT,
                (collection, doc_id, self._encode(data), timestamp, timestamp),
            )
            self.conn.commit()
        except sqlite3.IntegrityError as e:
            raise DatabaseError(
                f"Document '{doc_id}' already exists in {collection}",
                details={"collection": collection, "id": doc_id, "error": str(e)},
            )
        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to create document: {e}",
                details={"collection": collection},
            )

        logger.debug(f"Created {collection}/{doc_id}")
        return self.get_document(collection, doc_id)

    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Get document by id."""
        cursor = self.conn.cursor()
        cursor.execute(Q.SELECT_DOCUMENT, (collection, doc_id))
        return self._row_to_document(cursor.fetchone())

    def list_documents(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        """List documents, optionally filtered by equality and ordered by a field."""
        where_parts = []
        params: List[Any] = [collection]
        for name, value in (filters or {}).items():
            where_parts.append(f"AND {self._json_field(name)} = ?")
            params.append(value)

        direction = "DESC" if descending else "ASC"
        order_field = self._json_field(order_by) if order_by else "created_at"
        order_clause = f"{order_field} {direction}, created_at {direction}"

        query = Q.SELECT_DOCUMENTS.format(where=" ".join(where_parts), order_by=order_clause)

        try:
            cursor = self.conn.cursor()
            cursor.execute(query, params)
            return [self._row_to_document(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to list documents: {e}",
                details={"collection": collection},
            )

    def update_document(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Merge fields into an existing document."""
        existing = self.get_document(collection, doc_id)
        if existing is None:
            raise NotFoundError(
                f"Document not found in {collection}",
                details={"collection": collection, "id": doc_id},
            )

        merged = {**existing, **fields}

        try:
            cursor = self.conn.cursor()
            cursor.execute(
                Q.UPDATE_DOCUMENT,
                (self._encode(merged), _now(), collection, doc_id),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to update document: {e}",
                details={"collection": collection, "id": doc_id},
            )

        logger.debug(f"Updated {collection}/{doc_id} ({', '.join(fields)})")
        return self.get_document(collection, doc_id)

    def delete_document(self, collection: str, doc_id: str) -> bool:
        """Delete a document."""
        cursor = self.conn.cursor()
        cursor.execute(Q.DELETE_DOCUMENT, (collection, doc_id))
        self.conn.commit()
        return cursor.rowcount > 0

    def count_documents(self, collection: str) -> int:
        """Count documents in a collection."""
        cursor = self.conn.cursor()
        cursor.execute(Q.COUNT_DOCUMENTS, (collection,))
        return cursor.fetchone()[0]

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            logger.info("Database connection closed")
