"""Response Record — one user's validated, immutable answer set for one survey.

Invariants:
    - Answer.value is always the canonical string form (validator output)
    - Records are append-only: created once, never mutated
    - ValidatedAnswers is the only input accepted by new_record()
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

from survey_pulse.core.domain_types import SurveyId, UserId, ResponseId


@dataclass(frozen=True)
class Answer:
    question_index: int
    value: str


@dataclass(frozen=True)
class ValidatedAnswers:
    """Validator output: deduplicated, canonical, ready for persistence."""
    survey_id: SurveyId
    user_id: UserId
    answers: tuple[Answer, ...]


@dataclass(frozen=True)
class ResponseRecord:
    id: ResponseId
    user_id: UserId
    survey_id: SurveyId
    answers: tuple[Answer, ...]
    submitted_at: datetime


def new_record(
    validated: ValidatedAnswers, submitted_at: datetime | None = None,
) -> ResponseRecord:
    """Stamp validated answers with a fresh id and submission time."""
    return ResponseRecord(
        id=ResponseId(uuid4()),
        user_id=validated.user_id,
        survey_id=validated.survey_id,
        answers=validated.answers,
        submitted_at=submitted_at or datetime.now(timezone.utc),
    )
