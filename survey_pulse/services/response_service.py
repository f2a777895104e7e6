"""Response Service — submission, lookup, paging and export of survey responses.

Invariants:
    - A submission is: fetch definition → validate (pure) → duplicate check → single insert
    - Validation failures propagate unchanged; nothing is ever converted into success
    - A second submission for the same (user, survey) raises DuplicateSubmissionError,
      whether caught by the pre-check or by the unique constraint on insert

Design Decisions:
    - Service composes protocol objects only: any store/repository satisfying
      core/repository_protocols.py works (SQL in production, fakes in tests)
    - Check-then-insert kept even with the unique constraint: the pre-check gives the
      common case a clean error without a failed write
"""

import logging
import math

from survey_pulse.core.csv_export import build_export_rows, render_csv
from survey_pulse.core.domain_types import (
    SurveyId, UserId, ResponseId, parse_id,
)
from survey_pulse.core.errors import (
    DuplicateSubmissionError, InvalidInputError, ResourceNotFoundError,
)
from survey_pulse.core.repository_protocols import (
    SurveyDefinitionStore, ResponseRepository, UserDirectory,
)
from survey_pulse.core.response_record import (
    ResponseRecord, ValidatedAnswers, new_record,
)
from survey_pulse.core.validate_response import validate_answers

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE: int = 100


def record_to_dict(record: ResponseRecord, survey_title: str | None = None) -> dict:
    return {
        "id": str(record.id),
        "userId": str(record.user_id),
        "surveyId": str(record.survey_id),
        "surveyTitle": survey_title,
        "answers": [
            {"questionIndex": a.question_index, "value": a.value}
            for a in record.answers
        ],
        "submittedAt": record.submitted_at.isoformat(),
    }


class ResponseService:
    """Submission and retrieval of response records."""

    def __init__(
        self,
        surveys: SurveyDefinitionStore,
        responses: ResponseRepository,
        users: UserDirectory,
        accept_inactive_submissions: bool = False,
    ):
        self.surveys = surveys
        self.responses = responses
        self.users = users
        self.accept_inactive_submissions = accept_inactive_submissions

    async def validate(
        self, survey_id: str, user_id: UserId, answers: list[tuple[int, object]],
    ) -> ValidatedAnswers:
        """Single definition fetch, then the pure validator."""
        sid = SurveyId(parse_id(survey_id, "surveyId"))
        survey = await self.surveys.get(sid)
        return validate_answers(
            survey, str(survey_id), user_id, answers,
            allow_inactive=self.accept_inactive_submissions,
        )

    async def create(
        self, survey_id: str, user_id: UserId, answers: list[tuple[int, object]],
    ) -> ResponseRecord:
        validated = await self.validate(survey_id, user_id, answers)

        existing = await self.responses.find_by_user_and_survey(
            validated.user_id, validated.survey_id,
        )
        if existing:
            raise DuplicateSubmissionError(
                str(validated.user_id), str(validated.survey_id),
            )

        record = new_record(validated)
        await self.responses.insert(record)
        logger.info(
            "Survey response submitted",
            extra={
                "survey_id": str(record.survey_id),
                "user_id": str(record.user_id),
                "response_id": str(record.id),
            },
        )
        return record

    async def get(self, response_id: str) -> dict:
        rid = ResponseId(parse_id(response_id, "responseId"))
        record = await self.responses.find_by_id(rid)
        if not record:
            raise ResourceNotFoundError("Response", str(response_id))
        survey = await self.surveys.get(record.survey_id)
        return record_to_dict(record, survey.title if survey else None)

    async def list_page(self, page: int = 1, limit: int = 10) -> dict:
        """Admin listing, newest first: {records, total, page, totalPages}."""
        if page < 1:
            raise InvalidInputError(f"page must be >= 1, got {page}", "page")
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise InvalidInputError(
                f"limit must be between 1 and {MAX_PAGE_SIZE}, got {limit}", "limit",
            )
        total = await self.responses.count_all()
        records = await self.responses.find_page((page - 1) * limit, limit)
        titles = await self._titles()
        return {
            "records": [
                record_to_dict(r, titles.get(r.survey_id)) for r in records
            ],
            "total": total,
            "page": page,
            "totalPages": math.ceil(total / limit),
        }

    async def find_by_survey(self, survey_id: str) -> list[dict]:
        sid = SurveyId(parse_id(survey_id, "surveyId"))
        survey = await self.surveys.get(sid)
        if not survey:
            raise ResourceNotFoundError("Survey", str(survey_id))
        records = await self.responses.find_by_survey(sid)
        return [record_to_dict(r, survey.title) for r in records]

    async def find_for_user(self, user_id: UserId) -> list[dict]:
        records = await self.responses.find_by_user(user_id)
        titles = await self._titles()
        return [record_to_dict(r, titles.get(r.survey_id)) for r in records]

    async def export_csv(self) -> str:
        records = await self.responses.find_all()
        surveys = {s.id: s for s in await self.surveys.list_all()}
        users = await self.users.get_many({r.user_id for r in records})
        logger.info(f"Exporting {len(records)} response(s) to CSV")
        return render_csv(build_export_rows(records, surveys, users))

    async def _titles(self) -> dict[SurveyId, str]:
        return {s.id: s.title for s in await self.surveys.list_all()}
