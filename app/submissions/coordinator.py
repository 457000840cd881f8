"""
Submission Coordinator
======================
Turns a completed quiz plus contact details into one stored record and one
contact registration.

Flow:
1. Validate contact fields (no external call on failure)
2. Persist the SubmissionRecord (store)
3. Register the contact on the fixed lists (contacts API)

Phase 3 only runs for persisted records. A registration failure leaves the
record in place; it is logged so it can be reconciled later. Each collaborator
is called at most once per submit, with no retry.
"""

import logging
from typing import Any, Dict, Optional

from starlette.concurrency import run_in_threadpool

from .contacts import ContactRegistrationError
from .models import ContactFields, FailureStage, SubmissionOutcome, SubmissionRecord
from .store import SubmissionStoreError
from .validation import validate_contact_fields

logger = logging.getLogger(__name__)


def _email_domain(email: str) -> str:
    return email.rsplit("@", 1)[-1]


class SubmissionCoordinator:
    """
    Args:
        store: object with a blocking add(SubmissionRecord) -> SubmissionRecord
        contacts: object with async register(email, first_name, last_name);
            an is_configured attribute is honoured when present
    """

    def __init__(self, store, contacts):
        self.store = store
        self.contacts = contacts

    async def submit(self, contact: ContactFields, scores: Optional[Dict[str, Any]] = None) -> SubmissionOutcome:
        contact = contact.normalized()
        scores = scores or {}

        error = validate_contact_fields(contact)
        if error:
            return SubmissionOutcome.invalid(error.message, field=error.field)

        if not getattr(self.contacts, "is_configured", True):
            logger.error("Contacts API key missing, submission refused before persisting")
            return SubmissionOutcome.failed(FailureStage.CONFIGURATION)

        # Phase 1: persist
        record = SubmissionRecord.from_contact(contact, scores)
        try:
            record = await run_in_threadpool(self.store.add, record)
        except SubmissionStoreError as e:
            logger.error(f"Submission not persisted: {e.message}")
            return SubmissionOutcome.failed(FailureStage.PERSIST)
        except Exception as e:
            logger.exception(f"Unexpected error persisting submission: {type(e).__name__}: {e}")
            return SubmissionOutcome.failed(FailureStage.PERSIST)

        # Phase 2: register
        try:
            await self.contacts.register(contact.email, contact.first_name, contact.last_name)
        except ContactRegistrationError as e:
            logger.error(
                f"Submission {record.id} persisted but contact not registered "
                f"(status={e.status_code}): {e.message}"
            )
            return SubmissionOutcome.failed(FailureStage.REGISTER, record_id=record.id)
        except Exception as e:
            logger.exception(
                f"Submission {record.id} persisted but contact registration raised "
                f"{type(e).__name__}: {e}"
            )
            return SubmissionOutcome.failed(FailureStage.REGISTER, record_id=record.id)

        logger.info(f"Submission {record.id} stored and registered (@{_email_domain(contact.email)})")
        return SubmissionOutcome.success(record_id=record.id)
