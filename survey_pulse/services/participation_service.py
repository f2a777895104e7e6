"""Participation Aggregator — per-user and per-survey participation state on demand.

Invariants:
    - Nothing derived is persisted; every call re-reads the repository
    - Orphaned responses (survey deleted) are excluded, logged as INTEGRITY_ANOMALY,
      and never fail the aggregation
"""

import logging

from survey_pulse.core.domain_types import SurveyId, UserId, parse_id
from survey_pulse.core.errors import IntegrityAnomaly, ResourceNotFoundError
from survey_pulse.core.participation import (
    project_user_status, project_survey_status, project_available_surveys,
    surveys_with_responses,
)
from survey_pulse.core.repository_protocols import (
    SurveyDefinitionStore, ResponseRepository,
)

logger = logging.getLogger(__name__)


def report_anomalies(anomalies: list[IntegrityAnomaly]) -> None:
    for anomaly in anomalies:
        logger.warning(
            "Response references a survey that no longer exists",
            extra=anomaly.to_log_extra(),
        )


class ParticipationAggregator:
    def __init__(self, surveys: SurveyDefinitionStore, responses: ResponseRepository):
        self.surveys = surveys
        self.responses = responses

    async def status_for_user(self, user_id: UserId) -> list[dict]:
        """[{surveyId, submitted, submittedAt}] for every known survey."""
        surveys = await self.surveys.list_all()
        records = await self.responses.find_by_user(user_id)
        statuses, anomalies = project_user_status(user_id, surveys, records)
        report_anomalies(anomalies)
        return [
            {
                "surveyId": str(s.survey_id),
                "submitted": s.submitted,
                "submittedAt": s.submitted_at.isoformat() if s.submitted_at else None,
            }
            for s in statuses
        ]

    async def status_for_survey(self, survey_id: str) -> dict:
        sid = SurveyId(parse_id(survey_id, "surveyId"))
        if not await self.surveys.get(sid):
            raise ResourceNotFoundError("Survey", str(survey_id))
        participation = project_survey_status(
            sid, await self.responses.find_by_survey(sid),
        )
        return {
            "surveyId": str(participation.survey_id),
            "submittedCount": participation.submitted_count,
            "respondentUserIds": [str(u) for u in participation.respondent_user_ids],
        }

    async def surveys_with_responses(self) -> set[SurveyId]:
        """Known surveys with at least one response. Orphan ids are logged, not counted."""
        responded = await self.responses.distinct_survey_ids_with_responses()
        known, orphaned = surveys_with_responses(
            responded, await self.surveys.list_all(),
        )
        for survey_id in orphaned:
            logger.warning(
                "Responses exist for a survey that no longer exists",
                extra={"error_code": "INTEGRITY_ANOMALY", "survey_id": str(survey_id)},
            )
        return known

    async def available_surveys(self, user_id: UserId) -> list[dict]:
        surveys = await self.surveys.list_all()
        records = await self.responses.find_by_user(user_id)
        statuses, anomalies = project_user_status(user_id, surveys, records)
        report_anomalies(anomalies)
        return project_available_surveys(surveys, statuses)

    async def surveys_with_stats(self) -> list[dict]:
        """Admin listing: every survey with its response count."""
        result = []
        for survey in await self.surveys.list_all():
            result.append({
                "id": str(survey.id),
                "title": survey.title,
                "description": survey.description,
                "createdAt": survey.created_at.isoformat(),
                "dueDate": survey.due_date.isoformat() if survey.due_date else None,
                "isActive": survey.active,
                "questionCount": len(survey.questions),
                "responseCount": await self.responses.count_by_survey(survey.id),
            })
        return result
