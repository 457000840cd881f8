"""
Refonte Quiz Router
===================
Stateless quiz endpoints for the rendering layer.

Endpoints:
- GET  /api/v1/quiz/catalog                 - Categories and questions
- POST /api/v1/quiz/categories/{slug}/check - Field errors, can_advance, score
- POST /api/v1/quiz/scores                  - Scores for a complete answer set

The quiz run itself (current index, stored scores) stays with the client;
these endpoints only evaluate the answers they are given.
"""

from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from .catalog import get_catalog
from .stepper import IncompleteAnswersError, StepperController, score_all

router = APIRouter(prefix="/api/v1/quiz", tags=["Quiz"])


class CategoryCheckRequest(BaseModel):
    answers: Dict[str, Any] = Field(default_factory=dict)
    validation_errors: Dict[str, Any] = Field(
        default_factory=dict,
        description="Client-side field errors, keyed by field name"
    )


class CategoryCheckResponse(BaseModel):
    category: str
    errors: Dict[str, str]
    can_advance: bool
    score: int


class ScoresRequest(BaseModel):
    answers: Dict[str, Any] = Field(default_factory=dict)


@router.get("/catalog")
def quiz_catalog():
    """Question catalog in the site's question-file shape."""
    catalog = get_catalog()
    return {
        "count": len(catalog.categories),
        "categories": catalog.to_dict(),
    }


@router.post("/categories/{slug}/check", response_model=CategoryCheckResponse)
def check_category(slug: str, body: CategoryCheckRequest):
    """Evaluate one category on every change to drive the advance control."""
    catalog = get_catalog()
    if catalog.get_category(slug) is None:
        raise HTTPException(status_code=404, detail=f"Unknown category: {slug}")

    stepper = StepperController(catalog)
    return CategoryCheckResponse(
        category=slug,
        errors=stepper.validate(slug, body.answers),
        can_advance=stepper.can_advance(slug, body.answers, body.validation_errors),
        score=stepper.compute_category_score(slug, body.answers),
    )


@router.post("/scores")
def compute_scores(body: ScoresRequest):
    """Walk every category with the given answers and return the scores."""
    try:
        scores = score_all(get_catalog(), body.answers)
    except IncompleteAnswersError as e:
        raise HTTPException(
            status_code=400,
            detail={"message": "Unanswered questions", "errors": e.errors}
        )
    return {"scores": scores}
