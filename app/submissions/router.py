"""
Submission Router
=================
Inbound endpoint for completed quizzes.

Endpoints:
- POST /api/v1/submissions - Store the result and register the contact

Body: JSON, urlencoded or multipart. In form bodies `scores` is a JSON string.

Status tiers:
- 200 {"success": true}   stored and registered
- 400 {"success": false}  invalid input, nothing sent downstream
- 405                     any other method
- 500 {"success": false}  downstream failure (store or contacts API)
"""

import json
import logging
from functools import lru_cache
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from .contacts import BrevoContactClient
from .coordinator import SubmissionCoordinator
from .models import OutcomeStatus, SubmissionRequest, SubmissionResponse
from .store import PostgresSubmissionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/submissions", tags=["Submissions"])

MSG_SUCCESS = "Évaluation envoyée avec succès."
MSG_FAILURE = "Erreur lors de la soumission de l'évaluation."
MSG_INVALID_BODY = "Requête invalide."
MSG_INVALID_TYPES = "Type de champ invalide."
MSG_METHOD_NOT_ALLOWED = "Méthode non autorisée."

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class InvalidBody(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


@lru_cache(maxsize=1)
def get_submission_coordinator() -> SubmissionCoordinator:
    """Built once from the environment. Overridden in tests."""
    return SubmissionCoordinator(
        store=PostgresSubmissionStore(),
        contacts=BrevoContactClient(),
    )


def _reply(status_code: int, success: bool, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=SubmissionResponse(success=success, message=message).model_dump(),
    )


async def _read_body(request: Request) -> Dict[str, Any]:
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type in FORM_CONTENT_TYPES:
        try:
            form = await request.form()
        except (StarletteHTTPException, MultiPartException):
            raise InvalidBody(MSG_INVALID_BODY)
        data: Dict[str, Any] = {k: v for k, v in form.items() if isinstance(v, str)}
        raw_scores = data.get("scores")
        if raw_scores:
            try:
                data["scores"] = json.loads(raw_scores)
            except json.JSONDecodeError:
                raise InvalidBody(MSG_INVALID_BODY)
        else:
            data.pop("scores", None)
        return data

    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidBody(MSG_INVALID_BODY)
    if not isinstance(data, dict):
        raise InvalidBody(MSG_INVALID_BODY)
    return data


@router.post("", response_model=SubmissionResponse)
async def submit_quiz(
    request: Request,
    coordinator: SubmissionCoordinator = Depends(get_submission_coordinator),
):
    """
    Receive contact details and category scores for a completed quiz.

    Store and contacts API failures are reported with the same generic
    message; logs tell them apart.
    """
    try:
        data = await _read_body(request)
        body = SubmissionRequest.model_validate(data)
    except InvalidBody as e:
        return _reply(400, False, e.message)
    except ValidationError as e:
        logger.info(f"Rejected submission body: {e.error_count()} type error(s)")
        return _reply(400, False, MSG_INVALID_TYPES)

    try:
        outcome = await coordinator.submit(body.to_contact(), body.scores)
    except Exception as e:
        logger.exception(f"Unhandled submission error: {type(e).__name__}: {e}")
        return _reply(500, False, MSG_FAILURE)

    if outcome.status == OutcomeStatus.SUCCESS:
        return _reply(200, True, MSG_SUCCESS)
    if outcome.status == OutcomeStatus.INVALID:
        return _reply(400, False, outcome.reason or MSG_INVALID_BODY)
    return _reply(500, False, MSG_FAILURE)


@router.api_route("", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def submission_method_not_allowed():
    return JSONResponse(
        status_code=405,
        headers={"Allow": "POST"},
        content=SubmissionResponse(success=False, message=MSG_METHOD_NOT_ALLOWED).model_dump(),
    )
