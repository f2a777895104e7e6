"""Survey Routes — available surveys for a user, plus the admin authoring workflow.

Invariants:
    - /available and /admin/list registered before /{survey_id}
    - Deleting a survey never touches its responses (they become integrity anomalies)
    - Every store call bounded by repository_timeout_seconds
    - PUT leaves omitted fields unchanged; an explicit "dueDate": null clears the due date
"""

import logging

from fastapi import APIRouter, Depends, status

from survey_pulse.api.dependencies import (
    get_current_user_id, get_participation, get_survey_store,
)
from survey_pulse.config import Settings, get_settings
from survey_pulse.core.domain_types import SurveyId, UserId, parse_id
from survey_pulse.core.errors import ResourceNotFoundError
from survey_pulse.core.survey_definition import (
    SurveyDefinition, question_from_dict, question_to_dict,
)
from survey_pulse.infrastructure.repositories import SqlSurveyDefinitionStore
from survey_pulse.schemas.survey import SurveyCreate, SurveyStatusUpdate, SurveyUpdate
from survey_pulse.services.participation_service import ParticipationAggregator
from survey_pulse.services.timeouts import run_with_timeout

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/surveys", tags=["surveys"])


def _survey_out(survey: SurveyDefinition) -> dict:
    return {
        "id": str(survey.id),
        "title": survey.title,
        "description": survey.description,
        "questions": [question_to_dict(q) for q in survey.questions],
        "isActive": survey.active,
        "createdAt": survey.created_at.isoformat(),
        "dueDate": survey.due_date.isoformat() if survey.due_date else None,
        "questionCount": len(survey.questions),
    }


async def _get_or_404(store: SqlSurveyDefinitionStore, survey_id: str) -> SurveyDefinition:
    survey = await store.get(SurveyId(parse_id(survey_id, "surveyId")))
    if not survey:
        raise ResourceNotFoundError("Survey", survey_id)
    return survey


@router.get("/available")
async def available_surveys(
    user_id: UserId = Depends(get_current_user_id),
    participation: ParticipationAggregator = Depends(get_participation),
    settings: Settings = Depends(get_settings),
):
    """Active surveys annotated with the caller's Pending/Submitted status."""
    return await run_with_timeout(
        participation.available_surveys(user_id),
        settings.repository_timeout_seconds, "available_surveys",
    )


@router.get("/admin/list")
async def surveys_with_stats(
    participation: ParticipationAggregator = Depends(get_participation),
    settings: Settings = Depends(get_settings),
):
    return await run_with_timeout(
        participation.surveys_with_stats(),
        settings.repository_timeout_seconds, "surveys_with_stats",
    )


@router.get("")
async def list_surveys(
    store: SqlSurveyDefinitionStore = Depends(get_survey_store),
    settings: Settings = Depends(get_settings),
):
    surveys = await run_with_timeout(
        store.list_all(), settings.repository_timeout_seconds, "list_surveys",
    )
    return [_survey_out(s) for s in surveys]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_survey(
    body: SurveyCreate,
    store: SqlSurveyDefinitionStore = Depends(get_survey_store),
    settings: Settings = Depends(get_settings),
):
    survey = await run_with_timeout(
        store.create(
            title=body.title,
            description=body.description,
            questions=[question_from_dict(q.model_dump()) for q in body.questions],
            is_active=body.isActive,
            due_date=body.dueDate,
        ),
        settings.repository_timeout_seconds, "create_survey",
    )
    logger.info("Survey created", extra={"survey_id": str(survey.id)})
    return _survey_out(survey)


@router.get("/{survey_id}")
async def get_survey(
    survey_id: str,
    store: SqlSurveyDefinitionStore = Depends(get_survey_store),
    settings: Settings = Depends(get_settings),
):
    survey = await run_with_timeout(
        _get_or_404(store, survey_id),
        settings.repository_timeout_seconds, "get_survey",
    )
    return _survey_out(survey)


def _update_fields(body: SurveyUpdate) -> dict:
    """Only fields present in the body change; an explicit null clears dueDate."""
    fields: dict = {}
    if body.title is not None:
        fields["title"] = body.title
    if body.description is not None:
        fields["description"] = body.description
    if body.questions is not None:
        fields["questions"] = [question_from_dict(q.model_dump()) for q in body.questions]
    if "dueDate" in body.model_fields_set:
        fields["due_date"] = body.dueDate
    return fields


@router.put("/{survey_id}")
async def update_survey(
    survey_id: str,
    body: SurveyUpdate,
    store: SqlSurveyDefinitionStore = Depends(get_survey_store),
    settings: Settings = Depends(get_settings),
):
    async def _update() -> SurveyDefinition:
        existing = await _get_or_404(store, survey_id)
        return await store.update(existing.id, **_update_fields(body))

    survey = await run_with_timeout(
        _update(), settings.repository_timeout_seconds, "update_survey",
    )
    return _survey_out(survey)


@router.patch("/{survey_id}/status")
async def update_survey_status(
    survey_id: str,
    body: SurveyStatusUpdate,
    store: SqlSurveyDefinitionStore = Depends(get_survey_store),
    settings: Settings = Depends(get_settings),
):
    async def _set_status() -> SurveyDefinition:
        existing = await _get_or_404(store, survey_id)
        return await store.set_active(existing.id, body.isActive)

    survey = await run_with_timeout(
        _set_status(), settings.repository_timeout_seconds, "update_survey_status",
    )
    return _survey_out(survey)


@router.delete("/{survey_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_survey(
    survey_id: str,
    store: SqlSurveyDefinitionStore = Depends(get_survey_store),
    settings: Settings = Depends(get_settings),
):
    async def _delete() -> SurveyDefinition:
        existing = await _get_or_404(store, survey_id)
        await store.delete(existing.id)
        return existing

    deleted = await run_with_timeout(
        _delete(), settings.repository_timeout_seconds, "delete_survey",
    )
    logger.info("Survey deleted", extra={"survey_id": str(deleted.id)})


@router.get("/{survey_id}/participation")
async def survey_participation(
    survey_id: str,
    participation: ParticipationAggregator = Depends(get_participation),
    settings: Settings = Depends(get_settings),
):
    return await run_with_timeout(
        participation.status_for_survey(survey_id),
        settings.repository_timeout_seconds, "status_for_survey",
    )
