"""In-memory doubles for the core boundary protocols.

Invariants:
    - Satisfy core/repository_protocols.py structurally (no inheritance)
    - `fail` maps method name → exception to raise, for degradation tests
    - `fail_when` maps method name → predicate over call args (e.g. one month only)
"""

from datetime import datetime, timezone
from uuid import uuid4

from survey_pulse.core.domain_types import SurveyId, UserId, ResponseId, UserRole
from survey_pulse.core.errors import DuplicateSubmissionError
from survey_pulse.core.response_record import Answer, ResponseRecord
from survey_pulse.core.survey_definition import (
    SurveyDefinition, RatingQuestion, ChoiceQuestion, TextQuestion,
)
from survey_pulse.core.user_profile import UserProfile


class _Failing:
    def __init__(self):
        self.fail: dict[str, Exception] = {}
        self.fail_when: dict[str, tuple] = {}

    def _maybe_fail(self, name: str, *args):
        if name in self.fail:
            raise self.fail[name]
        if name in self.fail_when:
            predicate, exc = self.fail_when[name]
            if predicate(*args):
                raise exc


class FakeSurveyStore(_Failing):
    def __init__(self, surveys: list[SurveyDefinition] | None = None):
        super().__init__()
        self.surveys = {s.id: s for s in surveys or []}
        self.get_calls = 0

    async def get(self, survey_id):
        self._maybe_fail("get")
        self.get_calls += 1
        return self.surveys.get(survey_id)

    async def list_all(self):
        self._maybe_fail("list_all")
        return sorted(self.surveys.values(), key=lambda s: s.created_at, reverse=True)

    async def count_all(self):
        self._maybe_fail("count_all")
        return len(self.surveys)

    async def count_created_since(self, since):
        self._maybe_fail("count_created_since")
        return sum(1 for s in self.surveys.values() if s.created_at >= since)


class FakeResponseRepository(_Failing):
    def __init__(self, records: list[ResponseRecord] | None = None):
        super().__init__()
        self.records: list[ResponseRecord] = list(records or [])
        self.enforce_unique = True

    async def insert(self, record):
        self._maybe_fail("insert")
        if self.enforce_unique and any(
            r.user_id == record.user_id and r.survey_id == record.survey_id
            for r in self.records
        ):
            raise DuplicateSubmissionError(str(record.user_id), str(record.survey_id))
        self.records.append(record)
        return record.id

    async def find_by_id(self, response_id):
        return next((r for r in self.records if r.id == response_id), None)

    async def find_by_user_and_survey(self, user_id, survey_id):
        self._maybe_fail("find_by_user_and_survey")
        return next(
            (r for r in self.records
             if r.user_id == user_id and r.survey_id == survey_id),
            None,
        )

    async def find_by_survey(self, survey_id):
        self._maybe_fail("find_by_survey")
        return [r for r in self.records if r.survey_id == survey_id]

    async def find_by_user(self, user_id):
        self._maybe_fail("find_by_user")
        return [r for r in self.records if r.user_id == user_id]

    async def find_page(self, offset, limit):
        ordered = sorted(self.records, key=lambda r: r.submitted_at, reverse=True)
        return ordered[offset:offset + limit]

    async def find_all(self):
        return sorted(self.records, key=lambda r: r.submitted_at)

    async def count_all(self):
        self._maybe_fail("count_all")
        return len(self.records)

    async def count_by_survey(self, survey_id):
        return sum(1 for r in self.records if r.survey_id == survey_id)

    async def distinct_survey_ids_with_responses(self):
        self._maybe_fail("distinct_survey_ids_with_responses")
        return {r.survey_id for r in self.records}

    async def distinct_user_ids_in_window(self, start, end):
        self._maybe_fail("distinct_user_ids_in_window", start, end)
        return {r.user_id for r in self.records if start <= r.submitted_at < end}

    async def count_in_window(self, start, end):
        self._maybe_fail("count_in_window", start, end)
        return sum(1 for r in self.records if start <= r.submitted_at < end)


class FakeUserDirectory(_Failing):
    def __init__(self, users: list[UserProfile] | None = None):
        super().__init__()
        self.users = {u.id: u for u in users or []}

    async def count_active(self):
        self._maybe_fail("count_active")
        return sum(1 for u in self.users.values() if u.role is UserRole.EMPLOYEE)

    async def get_many(self, user_ids):
        return {uid: self.users[uid] for uid in user_ids if uid in self.users}


# ─── Builders ────────────────────────────────────────────────────

def make_survey(
    questions=None,
    title: str = "Employee Pulse Survey",
    active: bool = True,
    created_at: datetime | None = None,
) -> SurveyDefinition:
    return SurveyDefinition(
        id=SurveyId(uuid4()),
        title=title,
        description="Monthly employee satisfaction survey",
        questions=tuple(questions if questions is not None else scenario_questions()),
        active=active,
        created_at=created_at or datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


def scenario_questions():
    """idx0 required RATING, idx1 required TEXT, idx2 optional CHOICE [A, B]."""
    return [
        RatingQuestion("How satisfied are you with your role?", required=True),
        TextQuestion("What should we improve?", required=True),
        ChoiceQuestion("Preferred team event", options=("A", "B")),
    ]


def make_record(
    survey_id,
    user_id=None,
    submitted_at: datetime | None = None,
    answers=((0, "4"), (1, "ok")),
) -> ResponseRecord:
    return ResponseRecord(
        id=ResponseId(uuid4()),
        user_id=UserId(user_id or uuid4()),
        survey_id=SurveyId(survey_id),
        answers=tuple(Answer(i, v) for i, v in answers),
        submitted_at=submitted_at or datetime(2026, 10, 1, tzinfo=timezone.utc),
    )


def make_user(name: str = "Ada Lovelace", email: str | None = None, role=UserRole.EMPLOYEE):
    uid = UserId(uuid4())
    return UserProfile(
        id=uid, name=name, email=email or f"{uid.hex[:8]}@example.com", role=role,
    )
