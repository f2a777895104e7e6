"""Analytics Projector — dashboard metrics, monthly participation trend, answer distribution.

Invariants:
    - Foundational totals (surveys, responses, active users) failing = whole call fails
      with UpstreamUnavailableError; no placeholder numbers
    - One failing trend month degrades to 0/0, is logged, and is listed in `degraded`;
      the remaining months are still computed
    - Cancellation (caller timeout) is never caught here: partial results are dropped

Design Decisions:
    - Clock injected (now callable): the trend windows are deterministic under test
    - Months counted sequentially on the request session: AsyncSession does not
      support concurrent use, so no gather over buckets
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from survey_pulse.core.analytics import (
    MonthWindow, TrendBucket, build_dashboard_metrics, build_trend,
    month_windows, rating_distribution, recent_window_start,
)
from survey_pulse.core.errors import UpstreamUnavailableError
from survey_pulse.core.participation import split_orphans, surveys_with_responses
from survey_pulse.core.repository_protocols import (
    SurveyDefinitionStore, ResponseRepository, UserDirectory,
)
from survey_pulse.services.participation_service import report_anomalies

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AnalyticsProjector:
    def __init__(
        self,
        surveys: SurveyDefinitionStore,
        responses: ResponseRepository,
        users: UserDirectory,
        now: Callable[[], datetime] = utc_now,
        recent_activity_days: int = 7,
    ):
        self.surveys = surveys
        self.responses = responses
        self.users = users
        self.now = now
        self.recent_activity_days = recent_activity_days

    async def dashboard_metrics(self) -> dict:
        now = self.now()
        total_surveys = await self.surveys.count_all()
        total_responses = await self.responses.count_all()
        active_users = await self.users.count_active()

        responded = await self.responses.distinct_survey_ids_with_responses()
        known, orphaned = surveys_with_responses(
            responded, await self.surveys.list_all(),
        )
        if orphaned:
            logger.warning(
                f"{len(orphaned)} surveys with responses no longer exist",
                extra={"error_code": "INTEGRITY_ANOMALY"},
            )

        since = recent_window_start(now, self.recent_activity_days)
        new_surveys = await self.surveys.count_created_since(since)
        new_responses = await self.responses.count_in_window(since, now)

        logger.info(
            f"Dashboard metrics: {total_surveys} surveys, {total_responses} responses, "
            f"{active_users} active users",
        )
        return build_dashboard_metrics(
            total_surveys=total_surveys,
            total_responses=total_responses,
            active_users=active_users,
            surveys_with_response=len(known),
            new_surveys=new_surveys,
            new_responses=new_responses,
        )

    async def _bucket(self, window: MonthWindow) -> TrendBucket:
        try:
            responses = await self.responses.count_in_window(window.start, window.end)
            participants = await self.responses.distinct_user_ids_in_window(
                window.start, window.end,
            )
        except UpstreamUnavailableError as e:
            logger.error(
                f"Trend bucket degraded: {e.message}",
                extra={"month": window.label, "error_code": e.code},
            )
            return TrendBucket(window, 0, 0, degraded=True)
        return TrendBucket(window, responses, len(participants))

    async def participation_trend(self, months: int = 6) -> dict:
        """Oldest-first monthly buckets of responses and unique participants."""
        windows = month_windows(self.now(), months)
        buckets = [await self._bucket(w) for w in windows]
        return build_trend(buckets)

    async def response_distribution(self) -> list[dict]:
        surveys = await self.surveys.list_all()
        records = []
        for survey in surveys:
            records.extend(await self.responses.find_by_survey(survey.id))
        kept, anomalies = split_orphans(records, {s.id for s in surveys})
        report_anomalies(anomalies)
        return rating_distribution(surveys, kept)

    async def participation_graph(self, months: int = 6) -> dict:
        return {
            "participationTrend": await self.participation_trend(months),
            "responseDistribution": await self.response_distribution(),
        }
