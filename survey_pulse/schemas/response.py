"""Response Schemas — Pydantic models for the submission API boundary.

Invariants:
    - AnswerIn.value accepts string (at most MAX_ANSWER_LENGTH chars) or number;
      canonicalisation is the validator's job
    - questionIndex is only type-checked here; range is checked against the survey
    - Output uses the camelCase field names of the public API
"""

from typing import Annotated

from pydantic import BaseModel, Field, StrictInt, StrictFloat, StringConstraints

from survey_pulse.core.domain_types import MAX_ANSWER_LENGTH

AnswerText = Annotated[str, StringConstraints(strict=True, max_length=MAX_ANSWER_LENGTH)]


class AnswerIn(BaseModel):
    """One answer as submitted by the client."""
    questionIndex: StrictInt
    value: AnswerText | StrictInt | StrictFloat


class ResponseCreate(BaseModel):
    """Submission body. The user comes from the authenticated caller, not the body."""
    surveyId: str = Field(min_length=1, max_length=64)
    answers: list[AnswerIn] = Field(default_factory=list, max_length=500)


class AnswerOut(BaseModel):
    questionIndex: int
    value: str


class ResponseOut(BaseModel):
    id: str
    userId: str
    surveyId: str
    surveyTitle: str | None = None
    answers: list[AnswerOut]
    submittedAt: str


class ResponsePage(BaseModel):
    records: list[ResponseOut]
    total: int
    page: int
    totalPages: int
