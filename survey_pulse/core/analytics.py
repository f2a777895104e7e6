"""Dashboard Analytics — pure computations behind the admin dashboard.

Invariants:
    - participation_rate is 0 when there are no surveys (never an error)
    - Rates rounded half-up to one decimal: floor(x * 10 + 0.5) / 10
    - month_windows returns exactly `months` calendar months, oldest first, ending
      at the month containing `now`; windows are half-open [start, end) in UTC
    - A degraded trend bucket is always zero AND listed in `degraded` — never a
      plausible-looking number
    - pending_responses is an estimate (surveys × users − responses), labelled as such

Design Decisions:
    - Windows computed here, counted by the repository: the clock and the
      calendar arithmetic stay testable without a database
    - Distribution counts real RATING answers; there is no static fallback
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from survey_pulse.core.domain_types import RATING_MIN, RATING_MAX
from survey_pulse.core.errors import InvalidInputError
from survey_pulse.core.response_record import ResponseRecord
from survey_pulse.core.survey_definition import SurveyDefinition, RatingQuestion


MAX_TREND_MONTHS: int = 24
TOTAL_RESPONSES_LABEL = "Total Responses"
UNIQUE_PARTICIPANTS_LABEL = "Unique Participants"

RATING_LABELS: dict[int, str] = {
    5: "Strongly Agree",
    4: "Agree",
    3: "Neutral",
    2: "Disagree",
    1: "Strongly Disagree",
}


@dataclass(frozen=True)
class MonthWindow:
    label: str
    start: datetime
    end: datetime


@dataclass(frozen=True)
class TrendBucket:
    window: MonthWindow
    responses: int
    participants: int
    degraded: bool = False


def participation_rate(total_surveys: int, surveys_with_response: int) -> float:
    if total_surveys <= 0:
        return 0.0
    raw = surveys_with_response / total_surveys * 100
    return math.floor(raw * 10 + 0.5) / 10


def estimate_pending_responses(
    total_surveys: int, active_users: int, total_responses: int,
) -> int:
    """Capacity estimate: assumes every active user owes every survey one response."""
    return max(0, total_surveys * active_users - total_responses)


def _month_start(year: int, month: int) -> datetime:
    return datetime(year, month, 1, tzinfo=timezone.utc)


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_windows(now: datetime, months: int) -> list[MonthWindow]:
    """Consecutive calendar months ending with the month of `now`, oldest first."""
    if not 1 <= months <= MAX_TREND_MONTHS:
        raise InvalidInputError(
            f"months must be between 1 and {MAX_TREND_MONTHS}, got {months}",
            "months",
        )
    now = now.astimezone(timezone.utc)
    windows = []
    for back in range(months - 1, -1, -1):
        year, month = _shift_month(now.year, now.month, -back)
        next_year, next_month = _shift_month(year, month, 1)
        start = _month_start(year, month)
        windows.append(MonthWindow(
            label=start.strftime("%b %Y"),
            start=start,
            end=_month_start(next_year, next_month),
        ))
    return windows


def recent_window_start(now: datetime, days: int = 7) -> datetime:
    return now - timedelta(days=days)


def build_trend(buckets: list[TrendBucket]) -> dict:
    """Chart-ready payload. JSON-serializable: strings and ints only."""
    return {
        "labels": [b.window.label for b in buckets],
        "datasets": [
            {
                "label": TOTAL_RESPONSES_LABEL,
                "data": [b.responses for b in buckets],
            },
            {
                "label": UNIQUE_PARTICIPANTS_LABEL,
                "data": [b.participants for b in buckets],
            },
        ],
        "degraded": [b.window.label for b in buckets if b.degraded],
    }


def rating_distribution(
    surveys: list[SurveyDefinition], records: list[ResponseRecord],
) -> list[dict]:
    """Count RATING answers per Likert label, Strongly Agree first."""
    rating_indices = {
        s.id: {
            i for i, q in enumerate(s.questions) if isinstance(q, RatingQuestion)
        }
        for s in surveys
    }
    counts = {r: 0 for r in range(RATING_MIN, RATING_MAX + 1)}
    for record in records:
        indices = rating_indices.get(record.survey_id)
        if not indices:
            continue
        for answer in record.answers:
            if answer.question_index in indices and answer.value.isdecimal():
                value = int(answer.value)
                if value in counts:
                    counts[value] += 1
    return [
        {"label": RATING_LABELS[r], "value": counts[r]}
        for r in range(RATING_MAX, RATING_MIN - 1, -1)
    ]


def build_dashboard_metrics(
    total_surveys: int,
    total_responses: int,
    active_users: int,
    surveys_with_response: int,
    new_surveys: int,
    new_responses: int,
) -> dict:
    return {
        "totalSurveys": total_surveys,
        "totalResponses": total_responses,
        "activeUsers": active_users,
        "participationRate": participation_rate(total_surveys, surveys_with_response),
        "recentActivity": {
            "newSurveys": new_surveys,
            "newResponses": new_responses,
            "pendingResponses": estimate_pending_responses(
                total_surveys, active_users, total_responses,
            ),
            "pendingResponsesIsEstimate": True,
        },
    }
