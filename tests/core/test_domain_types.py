"""Domain Types — verifies rich type definitions and enum values.

Tests:
    - NewType wrappers exist and are callable
    - Enums have expected members and serialize to string
    - parse_id turns malformed ids into InvalidInputError
"""

from uuid import uuid4

import pytest

from survey_pulse.core.domain_types import (
    SurveyId, UserId, ResponseId,
    QuestionType, ParticipationState, UserRole,
    RATING_MIN, RATING_MAX, parse_id,
)
from survey_pulse.core.errors import InvalidInputError


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert SurveyId(uid) == uid
    assert UserId(uid) == uid
    assert ResponseId(uid) == uid


def test_rating_bounds():
    assert (RATING_MIN, RATING_MAX) == (1, 5)


def test_question_type_has_three_variants():
    assert {t.value for t in QuestionType} == {"rating", "choice", "text"}


def test_participation_state_wire_values():
    assert ParticipationState.PENDING.value == "Pending"
    assert ParticipationState.SUBMITTED.value == "Submitted"


def test_enums_are_str_subclasses():
    assert isinstance(QuestionType.RATING, str)
    assert isinstance(UserRole.EMPLOYEE, str)
    assert UserRole("admin") is UserRole.ADMIN


def test_parse_id_accepts_uuid_and_string():
    uid = uuid4()
    assert parse_id(uid, "surveyId") == uid
    assert parse_id(str(uid), "surveyId") == uid


@pytest.mark.parametrize("raw", ["", "not-a-uuid", "1234"])
def test_parse_id_rejects_malformed(raw):
    with pytest.raises(InvalidInputError) as exc:
        parse_id(raw, "surveyId")
    assert exc.value.field == "surveyId"
    assert exc.value.http_status == 400
