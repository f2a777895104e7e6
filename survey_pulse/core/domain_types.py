"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - SurveyId, UserId, ResponseId wrap UUIDs — never use bare UUID in domain logic
    - All valid states encoded as Enums — no raw string matching
    - parse_id is the single place a wire string becomes an id

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID

from survey_pulse.core.errors import InvalidInputError


# ─── Identity Types ──────────────────────────────────────────────

SurveyId = NewType("SurveyId", UUID)
UserId = NewType("UserId", UUID)
ResponseId = NewType("ResponseId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

RATING_MIN: int = 1
RATING_MAX: int = 5
MAX_ANSWER_LENGTH: int = 5000


# ─── Enums ───────────────────────────────────────────────────────

class QuestionType(str, Enum):
    """Closed set of question kinds. Each maps to one Question variant."""
    RATING = "rating"
    CHOICE = "choice"
    TEXT = "text"


class ParticipationState(str, Enum):
    """Derived (user, survey) state. Never stored."""
    PENDING = "Pending"
    SUBMITTED = "Submitted"


class UserRole(str, Enum):
    """Directory roles. Only employees count towards active users."""
    EMPLOYEE = "employee"
    ADMIN = "admin"


def parse_id(raw: str | UUID, field: str) -> UUID:
    """Parse a wire id. Malformed ids are InvalidInput, not NotFound."""
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw))
    except ValueError:
        raise InvalidInputError(f"Malformed id for {field}: {raw!r}", field)
