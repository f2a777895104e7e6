"""User Directory Routes — register and list profiles used by metrics and export."""

from fastapi import APIRouter, Depends, status

from survey_pulse.api.dependencies import get_user_directory
from survey_pulse.config import Settings, get_settings
from survey_pulse.core.domain_types import UserRole
from survey_pulse.core.user_profile import UserProfile
from survey_pulse.infrastructure.repositories import SqlUserDirectory
from survey_pulse.schemas.user import UserCreate
from survey_pulse.services.timeouts import run_with_timeout

router = APIRouter(prefix="/api/v1/users", tags=["users"])


def _user_out(profile: UserProfile) -> dict:
    return {
        "id": str(profile.id), "name": profile.name,
        "email": profile.email, "role": profile.role.value,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    directory: SqlUserDirectory = Depends(get_user_directory),
    settings: Settings = Depends(get_settings),
):
    profile = await run_with_timeout(
        directory.create(body.name, body.email, UserRole(body.role)),
        settings.repository_timeout_seconds, "create_user",
    )
    return _user_out(profile)


@router.get("")
async def list_users(
    directory: SqlUserDirectory = Depends(get_user_directory),
    settings: Settings = Depends(get_settings),
):
    profiles = await run_with_timeout(
        directory.list_all(), settings.repository_timeout_seconds, "list_users",
    )
    return [_user_out(p) for p in profiles]
