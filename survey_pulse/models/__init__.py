"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Responses reference surveys and users by id only (no relationships)

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from survey_pulse.models.survey import Survey  # noqa: F401
from survey_pulse.models.survey_response import SurveyResponse  # noqa: F401
from survey_pulse.models.user import User  # noqa: F401
