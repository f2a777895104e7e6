"""Response Validation — pure check of an answer set against one survey definition.

Invariants:
    - validate_answers is PURE: no IO, no clock, no mutation of its inputs
    - Check order: availability → index range → per-value check → completeness
    - Duplicate question indices: last write wins, position of first occurrence kept
    - Output values are canonical strings; numeric parsing happens only here

Design Decisions:
    - Raises typed errors instead of returning error dicts: validation failures must
      reach the caller unchanged and the HTTP shell maps them by http_status
    - Availability (inactive survey) checked here, not in the store: the store is a
      plain read collaborator and knows nothing about submission policy
"""

from survey_pulse.core.domain_types import UserId
from survey_pulse.core.errors import (
    ErrorContext, InvalidInputError, MissingRequiredError, ResourceNotFoundError,
)
from survey_pulse.core.response_record import Answer, ValidatedAnswers
from survey_pulse.core.survey_definition import SurveyDefinition


def canonical_wire_value(raw: object, index: int) -> str:
    """Normalize a wire value (string or number) to a string."""
    # bool is an int subclass; reject before the int branch
    if isinstance(raw, bool) or raw is None:
        raise InvalidInputError(
            f"Answer value for question {index} must be a string or number",
            "value", ErrorContext(question_index=index),
        )
    if isinstance(raw, int):
        try:
            return str(raw)
        except ValueError:
            raise InvalidInputError(
                f"Answer value for question {index} is too large",
                "value", ErrorContext(question_index=index),
            )
    if isinstance(raw, float):
        return str(int(raw)) if raw.is_integer() else repr(raw)
    if isinstance(raw, str):
        return raw
    raise InvalidInputError(
        f"Answer value for question {index} has unsupported type {type(raw).__name__}",
        "value", ErrorContext(question_index=index),
    )


def deduplicate_answers(answers: list[tuple[int, object]]) -> list[tuple[int, object]]:
    """Collapse repeated indices. Later values win; first position is kept."""
    merged: dict[int, object] = {}
    for index, value in answers:
        merged[index] = value
    return list(merged.items())


def validate_answers(
    survey: SurveyDefinition | None,
    survey_ref: str,
    user_id: UserId,
    answers: list[tuple[int, object]],
    allow_inactive: bool = False,
) -> ValidatedAnswers:
    """Validate raw (question_index, value) pairs against a survey. Pure."""
    if survey is None or (not survey.active and not allow_inactive):
        raise ResourceNotFoundError("Survey", survey_ref)

    count = len(survey.questions)
    ctx = ErrorContext(survey_id=str(survey.id), user_id=str(user_id))
    deduped = deduplicate_answers(answers)

    for index, _ in deduped:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < count:
            raise InvalidInputError(
                f"Question index {index} out of range [0, {count})",
                "questionIndex",
                ErrorContext(
                    survey_id=ctx.survey_id, user_id=ctx.user_id,
                    question_index=index if isinstance(index, int) else None,
                ),
            )

    canonical: list[Answer] = []
    for index, raw in deduped:
        question = survey.questions[index]
        value = canonical_wire_value(raw, index)
        problem = question.check_value(value)
        if problem:
            raise InvalidInputError(
                f"Invalid answer for question {index}: {problem}",
                "value",
                ErrorContext(
                    survey_id=ctx.survey_id, user_id=ctx.user_id,
                    question_index=index,
                ),
            )
        canonical.append(Answer(index, question.canonical(value)))

    answered = {a.question_index for a in canonical}
    missing = sorted(survey.required_indices - answered)
    if missing:
        raise MissingRequiredError(missing, ctx)

    return ValidatedAnswers(
        survey_id=survey.id, user_id=user_id, answers=tuple(canonical),
    )
