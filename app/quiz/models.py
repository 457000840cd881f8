"""
Refonte Quiz - Catalog Models

Pydantic models for the static question catalog:
- QuestionOption: a selectable answer and its score
- Question: a scored question (or a supplementary free-text field)
- Category: a named, ordered group of questions contributing one sub-score
- QuizCatalog: the ordered set of categories

The JSON keys follow the site's question file (category/question/text),
exposed here under their domain names (name/prompt/label).
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Question ids carrying this marker are informational only and never scored.
SUPPLEMENTARY_MARKER = "ignore"


def is_supplementary(question_id: str) -> bool:
    """True for free-text follow-up fields excluded from scoring."""
    return SUPPLEMENTARY_MARKER in question_id


class QuestionOption(BaseModel):
    """A selectable answer."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    label: str = Field(..., alias="text")
    score: int = Field(..., strict=True)


class Question(BaseModel):
    """A single quiz question."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1)
    prompt: str = Field(..., alias="question")
    description: Optional[str] = None
    options: List[QuestionOption] = Field(default_factory=list, validate_default=True)

    @field_validator("options")
    @classmethod
    def options_not_empty(cls, v: List[QuestionOption], info: ValidationInfo) -> List[QuestionOption]:
        # free-text follow-ups carry no options
        if not v and not is_supplementary(info.data.get("id", "")):
            raise ValueError("question must offer at least one option")
        return v

    @property
    def in_scope(self) -> bool:
        return not is_supplementary(self.id)


class Category(BaseModel):
    """Named group of questions. Immutable once loaded."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., alias="category")
    slug: str = Field(..., min_length=1)
    questions: List[Question] = Field(default_factory=list)

    @property
    def scored_questions(self) -> List[Question]:
        return [q for q in self.questions if q.in_scope]

    def owns_field(self, field_name: str) -> bool:
        """True if a form field (question id or its follow-up) belongs here."""
        return any(
            field_name == q.id or field_name.startswith(f"{q.id}-")
            for q in self.questions
        )


class QuizCatalog(BaseModel):
    """Ordered, read-only set of categories."""
    model_config = ConfigDict(frozen=True)

    categories: List[Category]

    def get_category(self, slug: str) -> Optional[Category]:
        for category in self.categories:
            if category.slug == slug:
                return category
        return None

    def get_question(self, question_id: str) -> Optional[Question]:
        for category in self.categories:
            for question in category.questions:
                if question.id == question_id:
                    return question
        return None

    @property
    def slugs(self) -> List[str]:
        return [c.slug for c in self.categories]

    def to_dict(self) -> List[Dict]:
        """Serialize back to the site's question-file shape."""
        return [c.model_dump(by_alias=True, exclude_none=True) for c in self.categories]
