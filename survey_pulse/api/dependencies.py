"""Route Dependencies — wire per-request repositories into services.

Invariants:
    - One AsyncSession per request, shared by all repositories built for it
    - The caller's identity arrives in X-User-Id, already authenticated upstream
"""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from survey_pulse.config import Settings, get_settings
from survey_pulse.core.domain_types import UserId, parse_id
from survey_pulse.infrastructure.database import get_db
from survey_pulse.infrastructure.repositories import (
    SqlSurveyDefinitionStore, SqlResponseRepository, SqlUserDirectory,
)
from survey_pulse.services.analytics_service import AnalyticsProjector
from survey_pulse.services.participation_service import ParticipationAggregator
from survey_pulse.services.response_service import ResponseService


def get_current_user_id(x_user_id: str = Header(...)) -> UserId:
    """Identity set by the authentication gateway in front of this service."""
    return UserId(parse_id(x_user_id, "X-User-Id"))


def get_survey_store(db: AsyncSession = Depends(get_db)) -> SqlSurveyDefinitionStore:
    return SqlSurveyDefinitionStore(db)


def get_user_directory(db: AsyncSession = Depends(get_db)) -> SqlUserDirectory:
    return SqlUserDirectory(db)


def get_response_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ResponseService:
    return ResponseService(
        SqlSurveyDefinitionStore(db),
        SqlResponseRepository(db),
        SqlUserDirectory(db),
        accept_inactive_submissions=settings.accept_inactive_submissions,
    )


def get_participation(db: AsyncSession = Depends(get_db)) -> ParticipationAggregator:
    return ParticipationAggregator(
        SqlSurveyDefinitionStore(db), SqlResponseRepository(db),
    )


def get_analytics(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AnalyticsProjector:
    return AnalyticsProjector(
        SqlSurveyDefinitionStore(db),
        SqlResponseRepository(db),
        SqlUserDirectory(db),
        recent_activity_days=settings.recent_activity_days,
    )
