"""Participation Projection — derives PENDING/SUBMITTED state from existing records.

Invariants:
    - All functions are pure projections over (surveys, records): no IO, no caching
    - Every known survey appears in a user's status list exactly once
    - Records whose survey does not resolve are excluded and reported as IntegrityAnomaly
    - Duplicate (user, survey) records (legacy data): latest submitted_at wins

Design Decisions:
    - Anomalies returned alongside results, not logged here: core stays free of
      logging side effects; the service decides how to report them
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from survey_pulse.core.domain_types import SurveyId, UserId, ParticipationState
from survey_pulse.core.errors import IntegrityAnomaly
from survey_pulse.core.response_record import ResponseRecord
from survey_pulse.core.survey_definition import SurveyDefinition


@dataclass(frozen=True)
class ParticipationStatus:
    user_id: UserId
    survey_id: SurveyId
    state: ParticipationState
    submitted_at: datetime | None = None

    @property
    def submitted(self) -> bool:
        return self.state is ParticipationState.SUBMITTED


@dataclass(frozen=True)
class SurveyParticipation:
    survey_id: SurveyId
    submitted_count: int
    respondent_user_ids: tuple[UserId, ...]


def split_orphans(
    records: Iterable[ResponseRecord], known_ids: set[SurveyId],
) -> tuple[list[ResponseRecord], list[IntegrityAnomaly]]:
    """Separate records with a resolvable survey from orphaned ones."""
    kept: list[ResponseRecord] = []
    anomalies: list[IntegrityAnomaly] = []
    for record in records:
        if record.survey_id in known_ids:
            kept.append(record)
        else:
            anomalies.append(IntegrityAnomaly(
                response_id=str(record.id),
                survey_id=str(record.survey_id),
                user_id=str(record.user_id),
            ))
    return kept, anomalies


def latest_submission_by_survey(
    records: Iterable[ResponseRecord],
) -> dict[SurveyId, datetime]:
    latest: dict[SurveyId, datetime] = {}
    for record in records:
        current = latest.get(record.survey_id)
        if current is None or record.submitted_at > current:
            latest[record.survey_id] = record.submitted_at
    return latest


def project_user_status(
    user_id: UserId,
    surveys: list[SurveyDefinition],
    user_records: list[ResponseRecord],
) -> tuple[list[ParticipationStatus], list[IntegrityAnomaly]]:
    """Status of every known survey for one user, in survey order."""
    known = {s.id for s in surveys}
    kept, anomalies = split_orphans(user_records, known)
    submitted = latest_submission_by_survey(kept)

    statuses = [
        ParticipationStatus(
            user_id=user_id,
            survey_id=s.id,
            state=(
                ParticipationState.SUBMITTED if s.id in submitted
                else ParticipationState.PENDING
            ),
            submitted_at=submitted.get(s.id),
        )
        for s in surveys
    ]
    return statuses, anomalies


def project_survey_status(
    survey_id: SurveyId, survey_records: list[ResponseRecord],
) -> SurveyParticipation:
    """Submitted count and distinct respondents, in first-submission order."""
    respondents: dict[UserId, None] = {}
    for record in sorted(survey_records, key=lambda r: r.submitted_at):
        respondents.setdefault(record.user_id, None)
    return SurveyParticipation(
        survey_id=survey_id,
        submitted_count=len(survey_records),
        respondent_user_ids=tuple(respondents),
    )


def surveys_with_responses(
    responded_ids: set[SurveyId], surveys: list[SurveyDefinition],
) -> tuple[set[SurveyId], set[SurveyId]]:
    """(responded ∩ known, responded − known). The second set is orphaned ids."""
    known = {s.id for s in surveys}
    return responded_ids & known, responded_ids - known


def project_available_surveys(
    surveys: list[SurveyDefinition], statuses: list[ParticipationStatus],
) -> list[dict]:
    """Active surveys with the user's participation state attached."""
    by_survey = {s.survey_id: s for s in statuses}
    available = []
    for survey in surveys:
        if not survey.active:
            continue
        status = by_survey.get(survey.id)
        submitted = status is not None and status.submitted
        available.append({
            "id": str(survey.id),
            "title": survey.title,
            "description": survey.description,
            "createdAt": survey.created_at.isoformat(),
            "dueDate": survey.due_date.isoformat() if survey.due_date else None,
            "isActive": survey.active,
            "questionCount": len(survey.questions),
            "status": (
                ParticipationState.SUBMITTED.value if submitted
                else ParticipationState.PENDING.value
            ),
            "submittedAt": (
                status.submitted_at.isoformat()
                if submitted and status.submitted_at else None
            ),
        })
    return available
