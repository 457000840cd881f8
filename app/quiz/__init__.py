"""
Refonte Quiz Module
===================
Question catalog, per-run quiz state and the category stepper.

Components:
- models.py: Catalog models (Category, Question, QuestionOption)
- catalog.py: Eager catalog loading and validation
- stepper.py: QuizState and StepperController
- router.py: Stateless quiz endpoints
"""

from .models import (
    Category,
    Question,
    QuestionOption,
    QuizCatalog,
    SUPPLEMENTARY_MARKER,
    is_supplementary,
)
from .catalog import CatalogError, get_catalog, load_catalog, parse_catalog
from .stepper import (
    IncompleteAnswersError,
    QuizPhase,
    QuizState,
    QuizStateError,
    StepperController,
    score_all,
)

__all__ = [
    "Category",
    "Question",
    "QuestionOption",
    "QuizCatalog",
    "SUPPLEMENTARY_MARKER",
    "is_supplementary",
    "CatalogError",
    "get_catalog",
    "load_catalog",
    "parse_catalog",
    "IncompleteAnswersError",
    "QuizPhase",
    "QuizState",
    "QuizStateError",
    "StepperController",
    "score_all",
]
