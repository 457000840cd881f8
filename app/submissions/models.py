"""
Refonte Quiz Submissions - Models

- ContactFields: contact details entered after the quiz
- SubmissionRecord: the append-only document written to the store
- SubmissionOutcome: Success / Invalid(reason) / Failed(stage)
- SubmissionRequest / SubmissionResponse: inbound HTTP body and reply
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    INVALID = "invalid"
    FAILED = "failed"


class FailureStage(str, Enum):
    """Where a submission stopped."""
    CONFIGURATION = "configuration"  # contact API credential missing
    PERSIST = "persist"
    REGISTER = "register"


@dataclass
class ContactFields:
    email: str
    first_name: str
    last_name: str
    url: str = ""

    def normalized(self) -> "ContactFields":
        """Copy with every field trimmed."""
        return ContactFields(
            email=(self.email or "").strip(),
            first_name=(self.first_name or "").strip(),
            last_name=(self.last_name or "").strip(),
            url=(self.url or "").strip(),
        )


@dataclass
class SubmissionRecord:
    """Stored submission. created_at and id are assigned by the store."""
    first_name: str
    last_name: str
    email: str
    url: str
    scores: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    id: Optional[str] = None

    @classmethod
    def from_contact(cls, contact: ContactFields, scores: Dict[str, Any]) -> "SubmissionRecord":
        return cls(
            first_name=contact.first_name,
            last_name=contact.last_name,
            email=contact.email,
            url=contact.url,
            scores=dict(scores),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "url": self.url,
            "scores": self.scores,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class SubmissionOutcome:
    status: OutcomeStatus
    reason: Optional[str] = None
    field: Optional[str] = None
    stage: Optional[FailureStage] = None
    record_id: Optional[str] = None

    @classmethod
    def success(cls, record_id: Optional[str] = None) -> "SubmissionOutcome":
        return cls(status=OutcomeStatus.SUCCESS, record_id=record_id)

    @classmethod
    def invalid(cls, reason: str, field: Optional[str] = None) -> "SubmissionOutcome":
        return cls(status=OutcomeStatus.INVALID, reason=reason, field=field)

    @classmethod
    def failed(cls, stage: FailureStage, record_id: Optional[str] = None) -> "SubmissionOutcome":
        return cls(status=OutcomeStatus.FAILED, stage=stage, record_id=record_id)

    @property
    def is_success(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS


class SubmissionRequest(BaseModel):
    """
    Inbound submission body.

    Unknown keys (listIds included) are dropped: list membership is
    server-controlled.
    """
    model_config = ConfigDict(extra="ignore")

    email: str = ""
    firstName: str = ""
    lastName: str = ""
    url: Optional[str] = None
    scores: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("scores", mode="before")
    @classmethod
    def null_scores_to_empty(cls, v):
        return {} if v is None else v

    def to_contact(self) -> ContactFields:
        return ContactFields(
            email=self.email,
            first_name=self.firstName,
            last_name=self.lastName,
            url=self.url or "",
        )


class SubmissionResponse(BaseModel):
    success: bool
    message: str
