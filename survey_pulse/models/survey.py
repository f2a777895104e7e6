"""Survey ORM — persists survey definitions authored by the admin workflow.

Invariants:
    - questions is an ordered JSON array; array position IS the question index
    - is_active gates new submissions (not reads)

Design Decisions:
    - JSON column for questions: the question shape is a closed variant mapped by
      core/survey_definition.question_from_dict, no join table needed
    - No FK from survey_responses: deleting a survey leaves orphaned responses that
      aggregation reports as integrity anomalies instead of failing
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from survey_pulse.db.base import Base


class Survey(Base):
    """Survey definition entity."""
    __tablename__ = "surveys"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    questions: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
