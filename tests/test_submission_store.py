"""
Submission Store Tests

psycopg2 is patched; checks the write path, error mapping and
collection-name handling.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import psycopg2
import pytest

from app.submissions.models import SubmissionRecord
from app.submissions.store import PostgresSubmissionStore, SubmissionStoreError


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def record():
    return SubmissionRecord(
        first_name="Jane",
        last_name="Doe",
        email="a@b.com",
        url="https://example.com",
        scores={"design": 5},
    )


@pytest.fixture
def mock_conn():
    conn = MagicMock()
    cur = MagicMock()
    conn.cursor.return_value = cur
    cur.fetchone.return_value = {
        "id": "3f2b6c1e-0000-0000-0000-000000000001",
        "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
    }
    return conn


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("SUBMISSIONS_COLLECTION", raising=False)


# ============================================================================
# TESTS
# ============================================================================

class TestAdd:

    def test_insert_fills_server_fields(self, record, mock_conn):
        store = PostgresSubmissionStore(database_url="postgresql://test")
        with patch("app.submissions.store.psycopg2.connect", return_value=mock_conn) as connect:
            saved = store.add(record)

        connect.assert_called_once()
        assert saved.id == "3f2b6c1e-0000-0000-0000-000000000001"
        assert saved.created_at.year == 2026
        mock_conn.commit.assert_called_once()
        mock_conn.close.assert_called_once()

        insert_params = mock_conn.cursor.return_value.execute.call_args_list[-1][0][1]
        assert insert_params[:4] == ("Jane", "Doe", "a@b.com", "https://example.com")
        assert insert_params[4].adapted == {"design": 5}

    def test_connection_sets_timeouts(self, record, mock_conn):
        store = PostgresSubmissionStore(database_url="postgresql://test")
        with patch("app.submissions.store.psycopg2.connect", return_value=mock_conn) as connect:
            store.add(record)
        kwargs = connect.call_args.kwargs
        assert kwargs["connect_timeout"] == 10
        assert kwargs["options"] == "-c statement_timeout=10000"

    def test_table_created_once(self, record, mock_conn):
        store = PostgresSubmissionStore(database_url="postgresql://test")
        with patch("app.submissions.store.psycopg2.connect", return_value=mock_conn):
            store.add(record)
            store.add(record)
        # CREATE once + two INSERTs
        assert mock_conn.cursor.return_value.execute.call_count == 3

    def test_connection_failure(self, record):
        store = PostgresSubmissionStore(database_url="postgresql://test")
        with patch("app.submissions.store.psycopg2.connect",
                   side_effect=psycopg2.OperationalError("no route")):
            with pytest.raises(SubmissionStoreError):
                store.add(record)

    def test_write_failure_rolls_back(self, record, mock_conn):
        mock_conn.cursor.return_value.execute.side_effect = psycopg2.ProgrammingError("permission denied")
        store = PostgresSubmissionStore(database_url="postgresql://test")
        with patch("app.submissions.store.psycopg2.connect", return_value=mock_conn):
            with pytest.raises(SubmissionStoreError):
                store.add(record)
        mock_conn.rollback.assert_called_once()
        mock_conn.close.assert_called_once()

    def test_not_configured(self, record):
        store = PostgresSubmissionStore()
        assert store.is_configured is False
        with pytest.raises(SubmissionStoreError, match="DATABASE_URL"):
            store.add(record)


class TestCollection:

    def test_default_collection(self):
        assert PostgresSubmissionStore(database_url="x").collection == "submissions"

    def test_collection_env_override(self, monkeypatch):
        monkeypatch.setenv("SUBMISSIONS_COLLECTION", "quiz_submissions")
        assert PostgresSubmissionStore(database_url="x").collection == "quiz_submissions"

    def test_empty_collection_falls_back_to_default(self):
        assert PostgresSubmissionStore(database_url="x", collection="").collection == "submissions"

    @pytest.mark.parametrize("name", ["drop table;", "1abc", "a-b"])
    def test_invalid_collection_rejected(self, name):
        with pytest.raises(ValueError):
            PostgresSubmissionStore(database_url="x", collection=name)


class TestPing:

    def test_ping_ok(self, mock_conn):
        store = PostgresSubmissionStore(database_url="postgresql://test")
        with patch("app.submissions.store.psycopg2.connect", return_value=mock_conn):
            assert store.ping() is True

    def test_ping_without_database(self):
        assert PostgresSubmissionStore().ping() is False
