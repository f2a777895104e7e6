"""CSV Export — formats response records as one CSV row per response.

Invariants:
    - Header is exactly: User,Email,Survey,Submission Date,Answers
    - Exactly one row per record, orphaned records included as "Unknown Survey"
    - Answers column: "; "-joined "<question text>: <value>" pairs
    - Fields with comma, quote or newline are quoted, inner quotes doubled (RFC 4180)

Design Decisions:
    - stdlib csv writer with QUOTE_MINIMAL over hand-rolled escaping
    - Lookups passed in as dicts: formatting stays pure, the service does the IO
"""

import csv
import io

from survey_pulse.core.domain_types import SurveyId, UserId
from survey_pulse.core.response_record import ResponseRecord
from survey_pulse.core.survey_definition import SurveyDefinition
from survey_pulse.core.user_profile import UserProfile


CSV_HEADER = ["User", "Email", "Survey", "Submission Date", "Answers"]


def format_answers(record: ResponseRecord, survey: SurveyDefinition | None) -> str:
    parts = []
    for answer in record.answers:
        text = survey.question_text(answer.question_index) if survey else None
        parts.append(
            f"{text or 'Unknown Question'}: {answer.value or 'No Answer'}",
        )
    return "; ".join(parts)


def build_export_rows(
    records: list[ResponseRecord],
    surveys: dict[SurveyId, SurveyDefinition],
    users: dict[UserId, UserProfile],
) -> list[list[str]]:
    rows = []
    for record in records:
        survey = surveys.get(record.survey_id)
        user = users.get(record.user_id)
        rows.append([
            user.name if user else "Unknown User",
            user.email if user else "Unknown Email",
            survey.title if survey else "Unknown Survey",
            record.submitted_at.isoformat(),
            format_answers(record, survey),
        ])
    return rows


def render_csv(rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(rows)
    return buffer.getvalue()
