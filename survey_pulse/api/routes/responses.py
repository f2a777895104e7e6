"""Response Routes — submit, status, history, admin listing, lookup and CSV export.

Invariants:
    - Static paths (/status, /my, /export) registered before /{response_id}
    - Every service call bounded by repository_timeout_seconds
    - Domain errors are raised, not caught: the global handler shapes them
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from survey_pulse.api.dependencies import (
    get_current_user_id, get_participation, get_response_service,
)
from survey_pulse.config import Settings, get_settings
from survey_pulse.core.domain_types import UserId
from survey_pulse.schemas.response import ResponseCreate, ResponseOut, ResponsePage
from survey_pulse.services.participation_service import ParticipationAggregator
from survey_pulse.services.response_service import ResponseService, record_to_dict
from survey_pulse.services.timeouts import run_with_timeout

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/responses", tags=["responses"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_response(
    body: ResponseCreate,
    user_id: UserId = Depends(get_current_user_id),
    service: ResponseService = Depends(get_response_service),
    settings: Settings = Depends(get_settings),
):
    """Validate and store the caller's answers for one survey."""
    record = await run_with_timeout(
        service.create(
            body.surveyId, user_id,
            [(a.questionIndex, a.value) for a in body.answers],
        ),
        settings.repository_timeout_seconds, "submit_response",
    )
    return {
        "message": "Survey response submitted successfully",
        "response": record_to_dict(record),
    }


@router.get("/status")
async def my_survey_status(
    user_id: UserId = Depends(get_current_user_id),
    participation: ParticipationAggregator = Depends(get_participation),
    settings: Settings = Depends(get_settings),
):
    return await run_with_timeout(
        participation.status_for_user(user_id),
        settings.repository_timeout_seconds, "status_for_user",
    )


@router.get("/my", response_model=list[ResponseOut])
async def my_responses(
    user_id: UserId = Depends(get_current_user_id),
    service: ResponseService = Depends(get_response_service),
    settings: Settings = Depends(get_settings),
):
    return await run_with_timeout(
        service.find_for_user(user_id),
        settings.repository_timeout_seconds, "find_my_responses",
    )


@router.get("/export")
async def export_responses(
    service: ResponseService = Depends(get_response_service),
    settings: Settings = Depends(get_settings),
):
    """All responses as a CSV attachment."""
    csv_text = await run_with_timeout(
        service.export_csv(), settings.repository_timeout_seconds, "export_csv",
    )
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=responses.csv"},
    )


@router.get("")
async def list_responses(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    survey_id: str | None = Query(None, alias="surveyId"),
    service: ResponseService = Depends(get_response_service),
    settings: Settings = Depends(get_settings),
):
    """Paged listing, or every response of one survey when surveyId is given."""
    if survey_id:
        return await run_with_timeout(
            service.find_by_survey(survey_id),
            settings.repository_timeout_seconds, "find_by_survey",
        )
    result = await run_with_timeout(
        service.list_page(page, limit),
        settings.repository_timeout_seconds, "list_responses",
    )
    return ResponsePage(**result)


@router.get("/{response_id}", response_model=ResponseOut)
async def get_response(
    response_id: str,
    service: ResponseService = Depends(get_response_service),
    settings: Settings = Depends(get_settings),
):
    return await run_with_timeout(
        service.get(response_id),
        settings.repository_timeout_seconds, "get_response",
    )
