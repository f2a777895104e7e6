"""User Profile — read-only directory entry used for export and active-user counts."""

from dataclasses import dataclass

from survey_pulse.core.domain_types import UserId, UserRole


@dataclass(frozen=True)
class UserProfile:
    id: UserId
    name: str
    email: str
    role: UserRole = UserRole.EMPLOYEE
