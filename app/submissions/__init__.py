"""
Refonte Quiz Submissions
========================
Validation, storage and contact registration for completed quizzes.

Components:
- models.py: ContactFields, SubmissionRecord, SubmissionOutcome
- validation.py: Contact field checks
- store.py: PostgreSQL append-only submission table
- contacts.py: Brevo contacts API client
- coordinator.py: Persist-then-register pipeline
- router.py: POST /api/v1/submissions
"""

from .models import (
    ContactFields,
    FailureStage,
    OutcomeStatus,
    SubmissionOutcome,
    SubmissionRecord,
)
from .validation import FieldError, validate_contact_fields
from .store import PostgresSubmissionStore, SubmissionStoreError
from .contacts import BrevoContactClient, ContactRegistrationError
from .coordinator import SubmissionCoordinator

__all__ = [
    "ContactFields",
    "FailureStage",
    "OutcomeStatus",
    "SubmissionOutcome",
    "SubmissionRecord",
    "FieldError",
    "validate_contact_fields",
    "PostgresSubmissionStore",
    "SubmissionStoreError",
    "BrevoContactClient",
    "ContactRegistrationError",
    "SubmissionCoordinator",
]
