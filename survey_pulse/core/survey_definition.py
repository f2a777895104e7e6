"""Survey Definition — frozen schema of an assessment instrument.

Invariants:
    - Questions are a closed tagged variant: RatingQuestion | ChoiceQuestion | TextQuestion
    - Each variant owns its value check; check_value returns an error message or None
    - Definitions are immutable here — mutation belongs to the admin workflow

Design Decisions:
    - Per-variant check_value over a type switch in the validator: adding a variant
      means adding one class, not editing a dispatch table
    - question_from_dict is the only place raw JSON (DB column, API body) becomes a variant
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

from survey_pulse.core.domain_types import (
    SurveyId, QuestionType, RATING_MIN, RATING_MAX,
)


@dataclass(frozen=True)
class RatingQuestion:
    text: str
    required: bool = False
    id: str | None = None
    type: QuestionType = field(default=QuestionType.RATING, init=False)

    def check_value(self, value: str) -> str | None:
        digits = value.strip()
        if not digits.isdecimal():
            return f"rating must be an integer, got {value!r}"
        significant = digits.lstrip("0") or "0"
        if len(significant) > len(str(RATING_MAX)):
            return f"rating not in {RATING_MIN}..{RATING_MAX}"
        rating = int(significant)
        if not RATING_MIN <= rating <= RATING_MAX:
            return f"rating {rating} not in {RATING_MIN}..{RATING_MAX}"
        return None

    def canonical(self, value: str) -> str:
        return str(int(value.strip().lstrip("0") or "0"))


@dataclass(frozen=True)
class ChoiceQuestion:
    text: str
    options: tuple[str, ...] = ()
    required: bool = False
    id: str | None = None
    type: QuestionType = field(default=QuestionType.CHOICE, init=False)

    def check_value(self, value: str) -> str | None:
        if value not in self.options:
            return f"{value!r} is not one of {list(self.options)}"
        return None

    def canonical(self, value: str) -> str:
        return value


@dataclass(frozen=True)
class TextQuestion:
    text: str
    required: bool = False
    id: str | None = None
    type: QuestionType = field(default=QuestionType.TEXT, init=False)

    def check_value(self, value: str) -> str | None:
        if self.required and not value.strip():
            return "required text answer is empty"
        return None

    def canonical(self, value: str) -> str:
        return value


Question = Union[RatingQuestion, ChoiceQuestion, TextQuestion]


@dataclass(frozen=True)
class SurveyDefinition:
    """Ordered questions plus lifecycle flags. Question index = list position."""
    id: SurveyId
    title: str
    description: str
    questions: tuple[Question, ...]
    active: bool
    created_at: datetime
    due_date: datetime | None = None

    @property
    def required_indices(self) -> frozenset[int]:
        return frozenset(i for i, q in enumerate(self.questions) if q.required)

    def question_text(self, index: int) -> str | None:
        if 0 <= index < len(self.questions):
            return self.questions[index].text
        return None


def question_from_dict(data: dict) -> Question:
    """Build a Question variant from its JSON shape. Raises ValueError on unknown type."""
    qtype = QuestionType(data.get("type", ""))
    common = {
        "text": data.get("text", ""),
        "required": bool(data.get("required", False)),
        "id": data.get("id"),
    }
    if qtype is QuestionType.RATING:
        return RatingQuestion(**common)
    if qtype is QuestionType.CHOICE:
        return ChoiceQuestion(options=tuple(data.get("options") or ()), **common)
    return TextQuestion(**common)


def question_to_dict(question: Question) -> dict:
    data = {
        "id": question.id,
        "text": question.text,
        "type": question.type.value,
        "required": question.required,
    }
    if isinstance(question, ChoiceQuestion):
        data["options"] = list(question.options)
    return data
