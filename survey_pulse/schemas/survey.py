"""Survey Schemas — admin authoring payloads for survey definitions.

Invariants:
    - choice questions need at least one option, other types must not carry options
    - title non-empty after strip
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class QuestionIn(BaseModel):
    text: str = Field(min_length=1, max_length=1000)
    type: Literal["rating", "choice", "text"]
    options: list[str] | None = None
    required: bool = False

    @model_validator(mode="after")
    def validate_options(self):
        if self.type == "choice" and not self.options:
            raise ValueError("choice question requires options")
        if self.type != "choice" and self.options:
            raise ValueError(f"{self.type} question cannot have options")
        return self


class SurveyCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    questions: list[QuestionIn] = Field(default_factory=list)
    isActive: bool = True
    dueDate: datetime | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class SurveyUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    questions: list[QuestionIn] | None = None
    dueDate: datetime | None = None


class SurveyStatusUpdate(BaseModel):
    isActive: bool
