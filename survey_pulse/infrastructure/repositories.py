"""SQL Repositories — SQLAlchemy implementations of the core boundary protocols.

Invariants:
    - Every SQLAlchemyError is rolled back and re-raised as UpstreamUnavailableError
    - IntegrityError on response insert becomes DuplicateSubmissionError (unique pair)
    - Datetimes leave this module timezone-aware (UTC), whatever the driver returns
    - Rows are mapped to frozen core types before leaving; ORM objects never escape

Design Decisions:
    - One AsyncSession per repository instance, shared by the three repositories of
      a request (per-request unit of work from get_db)
    - _guard over per-method try/except: one place owns the error translation
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from survey_pulse.core.domain_types import (
    SurveyId, UserId, ResponseId, UserRole,
)
from survey_pulse.core.errors import (
    DuplicateSubmissionError, ResourceConflictError, UpstreamUnavailableError,
)
from survey_pulse.core.response_record import Answer, ResponseRecord
from survey_pulse.core.survey_definition import (
    SurveyDefinition, question_from_dict, question_to_dict, Question,
)
from survey_pulse.core.user_profile import UserProfile
from survey_pulse.models.survey import Survey
from survey_pulse.models.survey_response import SurveyResponse
from survey_pulse.models.user import User

logger = logging.getLogger(__name__)


def _as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@asynccontextmanager
async def _guard(db: AsyncSession, operation: str) -> AsyncGenerator[None, None]:
    try:
        yield
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            f"Repository {operation} failed: {e}",
            extra={"operation": operation},
        )
        raise UpstreamUnavailableError("Repository operation failed", operation)


# ─── Row mapping ─────────────────────────────────────────────────

def survey_from_row(row: Survey) -> SurveyDefinition:
    return SurveyDefinition(
        id=SurveyId(row.id),
        title=row.title,
        description=row.description,
        questions=tuple(question_from_dict(q) for q in row.questions or []),
        active=row.is_active,
        created_at=_as_utc(row.created_at),
        due_date=_as_utc(row.due_date),
    )


def record_from_row(row: SurveyResponse) -> ResponseRecord:
    return ResponseRecord(
        id=ResponseId(row.id),
        user_id=UserId(row.user_id),
        survey_id=SurveyId(row.survey_id),
        answers=tuple(
            Answer(a["questionIndex"], a["value"]) for a in row.answers or []
        ),
        submitted_at=_as_utc(row.submitted_at),
    )


def profile_from_row(row: User) -> UserProfile:
    return UserProfile(
        id=UserId(row.id), name=row.name, email=row.email,
        role=UserRole(row.role),
    )


# ─── Survey definitions ──────────────────────────────────────────

class SqlSurveyDefinitionStore:
    """SurveyDefinitionStore plus the admin write operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _row(self, survey_id: SurveyId) -> Survey | None:
        result = await self.db.execute(
            select(Survey).where(Survey.id == survey_id),
        )
        return result.scalar_one_or_none()

    async def get(self, survey_id: SurveyId) -> SurveyDefinition | None:
        async with _guard(self.db, "survey.get"):
            row = await self._row(survey_id)
        return survey_from_row(row) if row else None

    async def list_all(self) -> list[SurveyDefinition]:
        async with _guard(self.db, "survey.list_all"):
            result = await self.db.execute(
                select(Survey).order_by(Survey.created_at.desc()),
            )
            rows = result.scalars().all()
        return [survey_from_row(r) for r in rows]

    async def count_all(self) -> int:
        async with _guard(self.db, "survey.count_all"):
            result = await self.db.execute(select(func.count(Survey.id)))
            return result.scalar_one()

    async def count_created_since(self, since: datetime) -> int:
        async with _guard(self.db, "survey.count_created_since"):
            result = await self.db.execute(
                select(func.count(Survey.id)).where(Survey.created_at >= since),
            )
            return result.scalar_one()

    async def create(
        self,
        title: str,
        description: str,
        questions: list[Question],
        is_active: bool = True,
        due_date: datetime | None = None,
    ) -> SurveyDefinition:
        async with _guard(self.db, "survey.create"):
            row = Survey(
                title=title,
                description=description,
                questions=[question_to_dict(q) for q in questions],
                is_active=is_active,
                due_date=due_date,
            )
            self.db.add(row)
            await self.db.commit()
            await self.db.refresh(row)
        return survey_from_row(row)

    async def update(
        self, survey_id: SurveyId, **fields: object,
    ) -> SurveyDefinition | None:
        """Apply admin edits. `questions` must be Question variants."""
        async with _guard(self.db, "survey.update"):
            row = await self._row(survey_id)
            if not row:
                return None
            if "questions" in fields:
                fields["questions"] = [
                    question_to_dict(q) for q in fields["questions"]
                ]
            for name, value in fields.items():
                setattr(row, name, value)
            await self.db.commit()
            await self.db.refresh(row)
        return survey_from_row(row)

    async def set_active(
        self, survey_id: SurveyId, active: bool,
    ) -> SurveyDefinition | None:
        return await self.update(survey_id, is_active=active)

    async def delete(self, survey_id: SurveyId) -> bool:
        """Delete a definition. Its responses stay behind as orphans."""
        async with _guard(self.db, "survey.delete"):
            row = await self._row(survey_id)
            if not row:
                return False
            await self.db.delete(row)
            await self.db.commit()
        return True


# ─── Responses ───────────────────────────────────────────────────

class SqlResponseRepository:
    """Append-only ResponseRepository over the survey_responses table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _records(self, query) -> list[ResponseRecord]:
        result = await self.db.execute(query)
        return [record_from_row(r) for r in result.scalars().all()]

    async def insert(self, record: ResponseRecord) -> ResponseId:
        async with _guard(self.db, "response.insert"):
            row = SurveyResponse(
                id=record.id,
                user_id=record.user_id,
                survey_id=record.survey_id,
                answers=[
                    {"questionIndex": a.question_index, "value": a.value}
                    for a in record.answers
                ],
                submitted_at=record.submitted_at,
            )
            self.db.add(row)
            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                raise DuplicateSubmissionError(
                    str(record.user_id), str(record.survey_id),
                )
        return record.id

    async def find_by_id(self, response_id: ResponseId) -> ResponseRecord | None:
        async with _guard(self.db, "response.find_by_id"):
            records = await self._records(
                select(SurveyResponse).where(SurveyResponse.id == response_id),
            )
        return records[0] if records else None

    async def find_by_user_and_survey(
        self, user_id: UserId, survey_id: SurveyId,
    ) -> ResponseRecord | None:
        async with _guard(self.db, "response.find_by_user_and_survey"):
            records = await self._records(
                select(SurveyResponse)
                .where(SurveyResponse.user_id == user_id)
                .where(SurveyResponse.survey_id == survey_id)
                .order_by(SurveyResponse.submitted_at.desc())
                .limit(1)
            )
        return records[0] if records else None

    async def find_by_survey(self, survey_id: SurveyId) -> list[ResponseRecord]:
        async with _guard(self.db, "response.find_by_survey"):
            return await self._records(
                select(SurveyResponse)
                .where(SurveyResponse.survey_id == survey_id)
                .order_by(SurveyResponse.submitted_at)
            )

    async def find_by_user(self, user_id: UserId) -> list[ResponseRecord]:
        async with _guard(self.db, "response.find_by_user"):
            return await self._records(
                select(SurveyResponse)
                .where(SurveyResponse.user_id == user_id)
                .order_by(SurveyResponse.submitted_at)
            )

    async def find_page(self, offset: int, limit: int) -> list[ResponseRecord]:
        async with _guard(self.db, "response.find_page"):
            return await self._records(
                select(SurveyResponse)
                .order_by(SurveyResponse.submitted_at.desc())
                .offset(offset)
                .limit(limit)
            )

    async def find_all(self) -> list[ResponseRecord]:
        async with _guard(self.db, "response.find_all"):
            return await self._records(
                select(SurveyResponse).order_by(SurveyResponse.submitted_at),
            )

    async def count_all(self) -> int:
        async with _guard(self.db, "response.count_all"):
            result = await self.db.execute(select(func.count(SurveyResponse.id)))
            return result.scalar_one()

    async def count_by_survey(self, survey_id: SurveyId) -> int:
        async with _guard(self.db, "response.count_by_survey"):
            result = await self.db.execute(
                select(func.count(SurveyResponse.id))
                .where(SurveyResponse.survey_id == survey_id),
            )
            return result.scalar_one()

    async def distinct_survey_ids_with_responses(self) -> set[SurveyId]:
        async with _guard(self.db, "response.distinct_survey_ids"):
            result = await self.db.execute(
                select(SurveyResponse.survey_id).distinct(),
            )
            return {SurveyId(v) for v in result.scalars().all()}

    async def distinct_user_ids_in_window(
        self, start: datetime, end: datetime,
    ) -> set[UserId]:
        async with _guard(self.db, "response.distinct_user_ids_in_window"):
            result = await self.db.execute(
                select(SurveyResponse.user_id).distinct()
                .where(SurveyResponse.submitted_at >= start)
                .where(SurveyResponse.submitted_at < end),
            )
            return {UserId(v) for v in result.scalars().all()}

    async def count_in_window(self, start: datetime, end: datetime) -> int:
        async with _guard(self.db, "response.count_in_window"):
            result = await self.db.execute(
                select(func.count(SurveyResponse.id))
                .where(SurveyResponse.submitted_at >= start)
                .where(SurveyResponse.submitted_at < end),
            )
            return result.scalar_one()


# ─── User directory ──────────────────────────────────────────────

class SqlUserDirectory:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_active(self) -> int:
        async with _guard(self.db, "user.count_active"):
            result = await self.db.execute(
                select(func.count(User.id))
                .where(User.role == UserRole.EMPLOYEE.value),
            )
            return result.scalar_one()

    async def get_many(self, user_ids: set[UserId]) -> dict[UserId, UserProfile]:
        if not user_ids:
            return {}
        async with _guard(self.db, "user.get_many"):
            result = await self.db.execute(
                select(User).where(User.id.in_(list(user_ids))),
            )
            rows = result.scalars().all()
        return {UserId(r.id): profile_from_row(r) for r in rows}

    async def list_all(self) -> list[UserProfile]:
        async with _guard(self.db, "user.list_all"):
            result = await self.db.execute(select(User).order_by(User.name))
            rows = result.scalars().all()
        return [profile_from_row(r) for r in rows]

    async def create(self, name: str, email: str, role: UserRole) -> UserProfile:
        async with _guard(self.db, "user.create"):
            row = User(name=name, email=email, role=role.value)
            self.db.add(row)
            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                raise ResourceConflictError(f"Email '{email}' is already registered")
            await self.db.refresh(row)
        return profile_from_row(row)
