"""
Shared test doubles for the submission pipeline.
"""

import pytest

from app.submissions.contacts import ContactRegistrationError
from app.submissions.models import SubmissionRecord


class FakeStore:
    """In-memory store recording every add() call."""

    def __init__(self, fail_with=None):
        self.records = []
        self.fail_with = fail_with
        self.calls = 0
        self.collection = "submissions"
        self.is_configured = True

    def add(self, record: SubmissionRecord) -> SubmissionRecord:
        self.calls += 1
        if self.fail_with:
            raise self.fail_with
        record.id = f"rec-{len(self.records) + 1}"
        self.records.append(record)
        return record

    def ping(self) -> bool:
        return True


class FakeContacts:
    """Contacts API double answering with a fixed status code."""

    def __init__(self, status_code=201, configured=True, list_ids=None, fail_with=None):
        self.status_code = status_code
        self.is_configured = configured
        self.list_ids = list_ids or [5]
        self.fail_with = fail_with
        self.calls = []

    async def register(self, email, first_name, last_name):
        self.calls.append({
            "email": email,
            "attributes": {"PRENOM": first_name, "NOM": last_name},
            "listIds": list(self.list_ids),
            "updateEnabled": True,
        })
        if self.fail_with:
            raise self.fail_with
        if not 200 <= self.status_code < 300:
            raise ContactRegistrationError(
                f"Contacts API returned HTTP {self.status_code}",
                status_code=self.status_code,
            )
        return self.status_code


@pytest.fixture
def make_store():
    return FakeStore


@pytest.fixture
def make_contacts():
    return FakeContacts


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def contacts():
    return FakeContacts()
