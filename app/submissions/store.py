"""
Submission Store
================
Append-only document table for quiz submissions, backed by PostgreSQL.

One row per submission attempt that reaches the persist phase. No updates,
no deletes. created_at is assigned by the database.

Environment Variables:
- DATABASE_URL: PostgreSQL connection string
- SUBMISSIONS_COLLECTION: table name (default "submissions")
"""

import os
import re
import logging
from typing import Optional

import psycopg2
from psycopg2 import sql
from psycopg2.extras import Json, RealDictCursor

from .models import SubmissionRecord

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "submissions"
CONNECT_TIMEOUT_SECONDS = 10
STATEMENT_TIMEOUT_MS = 10000

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


class SubmissionStoreError(Exception):
    """Store unavailable or write rejected."""

    def __init__(self, message: str, collection: Optional[str] = None):
        self.message = message
        self.collection = collection
        super().__init__(message)


class PostgresSubmissionStore:
    """
    Writes SubmissionRecords to a JSONB-backed table.

    The table is created on first write if it does not exist.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        collection: Optional[str] = None,
        connect_timeout: int = CONNECT_TIMEOUT_SECONDS,
        statement_timeout_ms: int = STATEMENT_TIMEOUT_MS,
    ):
        self.database_url = database_url or os.getenv("DATABASE_URL", "")
        self.collection = collection or os.getenv("SUBMISSIONS_COLLECTION") or DEFAULT_COLLECTION
        self.connect_timeout = connect_timeout
        self.statement_timeout_ms = statement_timeout_ms
        self._table_ready = False

        if not IDENTIFIER_PATTERN.match(self.collection):
            raise ValueError(f"Invalid submissions collection name: {self.collection!r}")
        if not self.database_url:
            logger.warning("DATABASE_URL not configured")

    @property
    def is_configured(self) -> bool:
        return bool(self.database_url)

    def _connect(self):
        if not self.database_url:
            raise SubmissionStoreError("DATABASE_URL not configured", self.collection)
        try:
            return psycopg2.connect(
                self.database_url,
                cursor_factory=RealDictCursor,
                connect_timeout=self.connect_timeout,
                options=f"-c statement_timeout={self.statement_timeout_ms}",
            )
        except psycopg2.Error as e:
            logger.error(f"Database connection error: {e}")
            raise SubmissionStoreError(f"Database connection failed: {e}", self.collection) from e

    def _ensure_table(self, cur) -> None:
        if self._table_ready:
            return
        cur.execute(sql.SQL("""
            CREATE TABLE IF NOT EXISTS {table} (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                first_name TEXT NOT NULL,
                last_name TEXT NOT NULL,
                email TEXT NOT NULL,
                url TEXT,
                scores JSONB NOT NULL DEFAULT '{{}}'::jsonb,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            );

            CREATE INDEX IF NOT EXISTS {index}
                ON {table}(created_at DESC);
        """).format(
            table=sql.Identifier(self.collection),
            index=sql.Identifier(f"idx_{self.collection}_created_at"),
        ))
        self._table_ready = True

    def add(self, record: SubmissionRecord) -> SubmissionRecord:
        """
        Insert one record.

        Returns:
            The record with id and created_at filled in by the database

        Raises:
            SubmissionStoreError if the connection or the write fails
        """
        conn = self._connect()
        try:
            cur = conn.cursor()
            self._ensure_table(cur)
            cur.execute(
                sql.SQL("""
                    INSERT INTO {table} (first_name, last_name, email, url, scores)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING id, created_at
                """).format(table=sql.Identifier(self.collection)),
                (
                    record.first_name,
                    record.last_name,
                    record.email,
                    record.url,
                    Json(record.scores),
                ),
            )
            row = cur.fetchone()
            conn.commit()
            cur.close()
        except psycopg2.Error as e:
            conn.rollback()
            self._table_ready = False
            logger.error(f"Failed to write submission to {self.collection}: {e}")
            raise SubmissionStoreError(f"Submission write failed: {e}", self.collection) from e
        finally:
            conn.close()

        record.id = str(row["id"])
        record.created_at = row["created_at"]
        return record

    def ping(self) -> bool:
        """Connectivity check for the health endpoint."""
        try:
            conn = self._connect()
        except SubmissionStoreError:
            return False
        try:
            cur = conn.cursor()
            cur.execute("SELECT 1")
            cur.close()
            return True
        except psycopg2.Error as e:
            logger.error(f"Database ping failed: {e}")
            return False
        finally:
            conn.close()
