"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - Every implementation failure surfaces as UpstreamUnavailableError
    - Time windows are half-open: [start, end)

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE their results are never async themselves —
      the services orchestrate the async calls around the pure logic
"""

from datetime import datetime
from typing import Protocol

from survey_pulse.core.domain_types import SurveyId, UserId, ResponseId
from survey_pulse.core.response_record import ResponseRecord
from survey_pulse.core.survey_definition import SurveyDefinition
from survey_pulse.core.user_profile import UserProfile


class SurveyDefinitionStore(Protocol):
    """Read access to survey schemas — owned by the admin workflow."""
    async def get(self, survey_id: SurveyId) -> SurveyDefinition | None: ...
    async def list_all(self) -> list[SurveyDefinition]: ...
    async def count_all(self) -> int: ...
    async def count_created_since(self, since: datetime) -> int: ...


class ResponseRepository(Protocol):
    """Append-only storage of validated response records."""
    async def insert(self, record: ResponseRecord) -> ResponseId: ...
    async def find_by_id(self, response_id: ResponseId) -> ResponseRecord | None: ...
    async def find_by_user_and_survey(
        self, user_id: UserId, survey_id: SurveyId,
    ) -> ResponseRecord | None: ...
    async def find_by_survey(self, survey_id: SurveyId) -> list[ResponseRecord]: ...
    async def find_by_user(self, user_id: UserId) -> list[ResponseRecord]: ...
    async def find_page(self, offset: int, limit: int) -> list[ResponseRecord]: ...
    async def find_all(self) -> list[ResponseRecord]: ...
    async def count_all(self) -> int: ...
    async def count_by_survey(self, survey_id: SurveyId) -> int: ...
    async def distinct_survey_ids_with_responses(self) -> set[SurveyId]: ...
    async def distinct_user_ids_in_window(
        self, start: datetime, end: datetime,
    ) -> set[UserId]: ...
    async def count_in_window(self, start: datetime, end: datetime) -> int: ...


class UserDirectory(Protocol):
    """Read access to user profiles — credentials live elsewhere."""
    async def count_active(self) -> int: ...
    async def get_many(self, user_ids: set[UserId]) -> dict[UserId, UserProfile]: ...
