"""
Refonte Quiz - Stepper

Drives a visitor through the catalog categories in fixed order and folds
answers into per-category scores.

States:
    Answering(i) for every category index, terminal Completed.

Transitions:
    Answering(i)    --advance-->  Answering(i+1)   (i < last)
    Answering(last) --submit-->   Completed        (advance at last == submit)
    Answering(i)    --retreat-->  Answering(i-1)   (no-op at 0)

Scores are written only when leaving a category, never partially.
Revisiting a category and changing answers takes effect on the next
advance/submit through it.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .models import Category, QuizCatalog

REQUIRED_ANSWER_MESSAGE = "Veuillez répondre à cette question"


class QuizPhase(str, Enum):
    ANSWERING = "answering"
    COMPLETED = "completed"


class QuizStateError(Exception):
    """Invalid transition requested by the caller."""

    def __init__(self, message: str, phase: Optional[QuizPhase] = None, category_index: Optional[int] = None):
        self.message = message
        self.phase = phase
        self.category_index = category_index
        super().__init__(message)


class IncompleteAnswersError(Exception):
    """Raised by score_all when some categories cannot be left."""

    def __init__(self, errors: Dict[str, Dict[str, str]]):
        self.errors = errors
        super().__init__(f"Unanswered questions in: {', '.join(errors)}")


# ============================================
# QUIZ STATE
# ============================================

@dataclass
class QuizState:
    """Per-run quiz state, owned by whoever runs the quiz."""
    categories: List[Category]
    current_category_index: int = 0
    scores_by_category: Dict[str, int] = field(default_factory=dict)
    phase: QuizPhase = QuizPhase.ANSWERING

    @classmethod
    def from_catalog(cls, catalog: QuizCatalog) -> "QuizState":
        return cls(categories=list(catalog.categories))

    @property
    def current_category(self) -> Category:
        return self.categories[self.current_category_index]

    @property
    def last_index(self) -> int:
        return len(self.categories) - 1

    @property
    def is_last_category(self) -> bool:
        return self.current_category_index == self.last_index

    @property
    def is_completed(self) -> bool:
        return self.phase == QuizPhase.COMPLETED

    def reset(self) -> None:
        """Back to Answering(0) with no scores (restart or abandon)."""
        self.current_category_index = 0
        self.scores_by_category = {}
        self.phase = QuizPhase.ANSWERING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categories": [{"name": c.name, "slug": c.slug} for c in self.categories],
            "current_category_index": self.current_category_index,
            "scores_by_category": dict(self.scores_by_category),
            "phase": self.phase.value,
        }


# ============================================
# ANSWER HELPERS
# ============================================

def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ""


def parse_answer_score(value: Any) -> int:
    """Integer score of a submitted answer. Fractions truncate; malformed or missing -> 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


# ============================================
# STEPPER CONTROLLER
# ============================================

class StepperController:
    """
    Category-by-category navigation over a QuizState.

    answers maps question id -> selected option value (the score, as the
    form submits it). A missing or blank value means "unanswered".
    """

    def __init__(self, catalog: QuizCatalog, state: Optional[QuizState] = None):
        self.catalog = catalog
        self.state = state if state is not None else QuizState.from_catalog(catalog)

    def _category(self, category_slug: str) -> Category:
        category = self.catalog.get_category(category_slug)
        if category is None:
            raise KeyError(f"Unknown category: {category_slug}")
        return category

    def compute_category_score(self, category_slug: str, answers: Mapping[str, Any]) -> int:
        """Sum of in-scope answer scores for the category."""
        category = self._category(category_slug)
        return sum(parse_answer_score(answers.get(q.id)) for q in category.scored_questions)

    def validate(self, category_slug: str, answers: Mapping[str, Any]) -> Dict[str, str]:
        """Field errors for every unanswered in-scope question of the category."""
        category = self._category(category_slug)
        return {
            q.id: REQUIRED_ANSWER_MESSAGE
            for q in category.scored_questions
            if _is_blank(answers.get(q.id))
        }

    def can_advance(
        self,
        category_slug: str,
        answers: Mapping[str, Any],
        validation_errors: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        if self.validate(category_slug, answers):
            return False
        if validation_errors:
            category = self._category(category_slug)
            if any(category.owns_field(name) for name in validation_errors):
                return False
        return True

    def _fold_current(self, answers: Mapping[str, Any]) -> None:
        category = self.state.current_category
        if not self.can_advance(category.slug, answers):
            raise QuizStateError(
                f"Category '{category.slug}' has unanswered questions",
                phase=self.state.phase,
                category_index=self.state.current_category_index,
            )
        self.state.scores_by_category[category.slug] = self.compute_category_score(category.slug, answers)

    def _ensure_answering(self, action: str) -> None:
        if self.state.is_completed:
            raise QuizStateError(
                f"Cannot {action}: quiz already completed",
                phase=self.state.phase,
                category_index=self.state.current_category_index,
            )

    def advance(self, answers: Mapping[str, Any]) -> QuizState:
        """Store the active category's score and move on (submit at the last one)."""
        self._ensure_answering("advance")
        if self.state.is_last_category:
            self.submit(answers)
            return self.state

        self._fold_current(answers)
        self.state.current_category_index += 1
        return self.state

    def retreat(self) -> QuizState:
        """Go back one category. Stored scores are left untouched."""
        self._ensure_answering("retreat")
        if self.state.current_category_index > 0:
            self.state.current_category_index -= 1
        return self.state

    def submit(self, answers: Mapping[str, Any]) -> Dict[str, int]:
        """Fold the final category and complete the quiz."""
        self._ensure_answering("submit")
        if not self.state.is_last_category:
            raise QuizStateError(
                "Submit is only allowed on the last category",
                phase=self.state.phase,
                category_index=self.state.current_category_index,
            )

        self._fold_current(answers)
        self.state.phase = QuizPhase.COMPLETED
        return dict(self.state.scores_by_category)


def score_all(catalog: QuizCatalog, answers: Mapping[str, Any]) -> Dict[str, int]:
    """
    Run a fresh quiz through every category with one answer set.

    Raises:
        IncompleteAnswersError listing field errors per category
    """
    stepper = StepperController(catalog)

    errors = {}
    for category in catalog.categories:
        category_errors = stepper.validate(category.slug, answers)
        if category_errors:
            errors[category.slug] = category_errors
    if errors:
        raise IncompleteAnswersError(errors)

    while not stepper.state.is_completed:
        stepper.advance(answers)
    return dict(stepper.state.scores_by_category)
