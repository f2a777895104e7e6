"""SurveyResponse ORM — append-only record of one user's answers to one survey.

Invariants:
    - Rows are inserted once and never updated
    - (user_id, survey_id) is unique: a second submission is a conflict
    - answers is an ordered JSON array of {"questionIndex": int, "value": str}

Design Decisions:
    - survey_id indexed but not a foreign key (see models/survey.py)
    - user_id not a foreign key either: identities come from the auth collaborator
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from survey_pulse.db.base import Base


class SurveyResponse(Base):
    """Validated response entity."""
    __tablename__ = "survey_responses"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "survey_id", name="uq_survey_responses_user_survey",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    survey_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    answers: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
