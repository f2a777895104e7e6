"""Admin Dashboard Routes — metrics and participation graph.

Invariants:
    - Failures of foundational totals surface as 503 UPSTREAM_UNAVAILABLE (no mock data)
    - Degraded trend months are reported in participationTrend.degraded
"""

import logging

from fastapi import APIRouter, Depends, Query

from survey_pulse.api.dependencies import get_analytics
from survey_pulse.config import Settings, get_settings
from survey_pulse.core.analytics import MAX_TREND_MONTHS
from survey_pulse.services.analytics_service import AnalyticsProjector
from survey_pulse.services.timeouts import run_with_timeout

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/dashboard-metrics")
async def dashboard_metrics(
    analytics: AnalyticsProjector = Depends(get_analytics),
    settings: Settings = Depends(get_settings),
):
    logger.info("Processing request for dashboard metrics")
    return await run_with_timeout(
        analytics.dashboard_metrics(),
        settings.repository_timeout_seconds, "dashboard_metrics",
    )


@router.get("/survey-participation-graph")
async def survey_participation_graph(
    months: int | None = Query(None, ge=1, le=MAX_TREND_MONTHS),
    analytics: AnalyticsProjector = Depends(get_analytics),
    settings: Settings = Depends(get_settings),
):
    logger.info("Processing request for survey participation graph")
    return await run_with_timeout(
        analytics.participation_graph(months or settings.trend_default_months),
        settings.repository_timeout_seconds, "participation_graph",
    )
