"""Participation Projection — PENDING/SUBMITTED derived from records.

Tests:
    - Every known survey appears exactly once per user, in survey order
    - Submitted iff a record exists; latest submitted_at wins on legacy duplicates
    - Orphaned records are excluded and surfaced as IntegrityAnomaly
    - Survey-side projection counts records and distinct respondents
    - Available surveys are active-only with the user's state attached
"""

from datetime import datetime, timezone
from uuid import uuid4

from survey_pulse.core.domain_types import ParticipationState, UserId
from survey_pulse.core.participation import (
    project_user_status, project_survey_status,
    surveys_with_responses, project_available_surveys, split_orphans,
)
from tests.fakes import make_survey, make_record

USER = UserId(uuid4())


def _at(day: int) -> datetime:
    return datetime(2026, 10, day, tzinfo=timezone.utc)


# ─── User status ─────────────────────────────────────────────────

def test_user_status_covers_every_survey_once():
    a, b = make_survey(title="A"), make_survey(title="B")
    records = [make_record(a.id, USER)]
    statuses, anomalies = project_user_status(USER, [a, b], records)

    assert [s.survey_id for s in statuses] == [a.id, b.id]
    assert statuses[0].state is ParticipationState.SUBMITTED
    assert statuses[0].submitted
    assert statuses[1].state is ParticipationState.PENDING
    assert statuses[1].submitted_at is None
    assert anomalies == []


def test_user_with_no_records_is_pending_everywhere():
    surveys = [make_survey(), make_survey()]
    statuses, _ = project_user_status(USER, surveys, [])
    assert all(not s.submitted for s in statuses)


def test_orphaned_record_excluded_and_reported():
    survey = make_survey()
    orphan = make_record(uuid4(), USER)
    statuses, anomalies = project_user_status(
        USER, [survey], [make_record(survey.id, USER), orphan],
    )
    assert len(statuses) == 1
    assert len(anomalies) == 1
    assert anomalies[0].response_id == str(orphan.id)
    assert anomalies[0].code == "INTEGRITY_ANOMALY"


def test_legacy_duplicates_report_latest_submission():
    survey = make_survey()
    records = [
        make_record(survey.id, USER, submitted_at=_at(3)),
        make_record(survey.id, USER, submitted_at=_at(9)),
        make_record(survey.id, USER, submitted_at=_at(5)),
    ]
    statuses, _ = project_user_status(USER, [survey], records)
    assert statuses[0].submitted_at == _at(9)


def test_split_orphans_partitions_by_known_ids():
    survey = make_survey()
    kept, anomalies = split_orphans(
        [make_record(survey.id), make_record(uuid4())], {survey.id},
    )
    assert len(kept) == 1 and len(anomalies) == 1


# ─── Survey status ───────────────────────────────────────────────

def test_survey_status_counts_and_orders_respondents():
    survey = make_survey()
    u1, u2 = UserId(uuid4()), UserId(uuid4())
    records = [
        make_record(survey.id, u2, submitted_at=_at(7)),
        make_record(survey.id, u1, submitted_at=_at(2)),
    ]
    result = project_survey_status(survey.id, records)
    assert result.submitted_count == 2
    assert result.respondent_user_ids == (u1, u2)


def test_survey_status_empty():
    result = project_survey_status(make_survey().id, [])
    assert result.submitted_count == 0
    assert result.respondent_user_ids == ()


def test_surveys_with_responses_splits_known_and_orphaned():
    survey = make_survey()
    ghost = uuid4()
    known, orphaned = surveys_with_responses({survey.id, ghost}, [survey])
    assert known == {survey.id}
    assert orphaned == {ghost}


# ─── Available surveys ───────────────────────────────────────────

def test_available_surveys_skip_inactive_and_attach_status():
    active = make_survey(title="Open")
    closed = make_survey(title="Closed", active=False)
    statuses, _ = project_user_status(
        USER, [active, closed], [make_record(active.id, USER, submitted_at=_at(4))],
    )
    available = project_available_surveys([active, closed], statuses)

    assert [s["title"] for s in available] == ["Open"]
    assert available[0]["status"] == "Submitted"
    assert available[0]["submittedAt"] == _at(4).isoformat()
    assert available[0]["questionCount"] == 3


def test_available_survey_without_status_is_pending():
    survey = make_survey()
    available = project_available_surveys([survey], [])
    assert available[0]["status"] == "Pending"
    assert available[0]["submittedAt"] is None
    assert available[0]["dueDate"] is None
