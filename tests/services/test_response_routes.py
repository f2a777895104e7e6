"""Response Routes — HTTP contract of submission, status, lookup and export.

Invariants:
    - 201 on success, 400 invalid/missing, 404 unknown or inactive survey, 409 duplicate
    - Errors use the uniform {"error": {code, message, ...}} envelope
    - Export returns text/csv with one row per stored response
"""

from uuid import uuid4

import pytest

SCENARIO = [
    {"text": "How satisfied are you with your role?", "type": "rating", "required": True},
    {"text": "What should we improve?", "type": "text", "required": True},
    {"text": "Preferred team event", "type": "choice", "options": ["A", "B"]},
]


@pytest.fixture
def user_id():
    return str(uuid4())


@pytest.fixture
def headers(user_id):
    return {"X-User-Id": user_id}


@pytest.fixture
async def survey(client):
    res = await client.post("/api/v1/surveys", json={
        "title": "Employee Pulse", "description": "Monthly", "questions": SCENARIO,
    })
    assert res.status_code == 201
    return res.json()


async def _submit(client, headers, survey_id, answers):
    return await client.post(
        "/api/v1/responses",
        json={"surveyId": survey_id, "answers": answers},
        headers=headers,
    )


# ─── Submission ──────────────────────────────────────────────────

async def test_submit_valid_response_returns_201(client, headers, survey, user_id):
    res = await _submit(client, headers, survey["id"], [
        {"questionIndex": 0, "value": 4}, {"questionIndex": 1, "value": "ok"},
    ])
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Survey response submitted successfully"
    assert body["response"]["userId"] == user_id
    assert body["response"]["answers"][0] == {"questionIndex": 0, "value": "4"}


async def test_missing_required_returns_400(client, headers, survey):
    res = await _submit(client, headers, survey["id"], [
        {"questionIndex": 1, "value": "ok"},
    ])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MISSING_REQUIRED"


async def test_out_of_range_index_returns_400(client, headers, survey):
    res = await _submit(client, headers, survey["id"], [
        {"questionIndex": 0, "value": "4"},
        {"questionIndex": 1, "value": "ok"},
        {"questionIndex": 5, "value": "x"},
    ])
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "INVALID_INPUT"
    assert error["context"]["question_index"] == 5


async def test_bad_rating_returns_400(client, headers, survey):
    res = await _submit(client, headers, survey["id"], [
        {"questionIndex": 0, "value": "9"}, {"questionIndex": 1, "value": "ok"},
    ])
    assert res.status_code == 400


async def test_malformed_body_returns_400(client, headers, survey):
    res = await _submit(client, headers, survey["id"], [
        {"questionIndex": 0, "value": True},
    ])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_unknown_survey_returns_404(client, headers):
    res = await _submit(client, headers, str(uuid4()), [
        {"questionIndex": 0, "value": "4"},
    ])
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_inactive_survey_returns_404(client, headers, survey):
    await client.patch(
        f"/api/v1/surveys/{survey['id']}/status", json={"isActive": False},
    )
    res = await _submit(client, headers, survey["id"], [
        {"questionIndex": 0, "value": "4"}, {"questionIndex": 1, "value": "ok"},
    ])
    assert res.status_code == 404


async def test_second_submission_returns_409(client, headers, survey):
    answers = [{"questionIndex": 0, "value": "4"}, {"questionIndex": 1, "value": "ok"}]
    assert (await _submit(client, headers, survey["id"], answers)).status_code == 201
    res = await _submit(client, headers, survey["id"], answers)
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_SUBMISSION"


async def test_missing_user_header_rejected(client, survey):
    res = await client.post("/api/v1/responses", json={
        "surveyId": survey["id"], "answers": [],
    })
    assert res.status_code == 400


async def test_malformed_user_header_rejected(client, survey):
    res = await _submit(client, {"X-User-Id": "nobody"}, survey["id"], [])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_INPUT"


# ─── Status / lookup ─────────────────────────────────────────────

async def test_status_flips_to_submitted(client, headers, survey):
    before = (await client.get("/api/v1/responses/status", headers=headers)).json()
    assert before == [{"surveyId": survey["id"], "submitted": False, "submittedAt": None}]

    await _submit(client, headers, survey["id"], [
        {"questionIndex": 0, "value": "4"}, {"questionIndex": 1, "value": "ok"},
    ])
    after = (await client.get("/api/v1/responses/status", headers=headers)).json()
    assert after[0]["submitted"] is True
    assert after[0]["submittedAt"] is not None


async def test_available_surveys_carry_status(client, headers, survey):
    res = await client.get("/api/v1/surveys/available", headers=headers)
    assert res.status_code == 200
    assert res.json()[0]["status"] == "Pending"


async def test_get_response_by_id(client, headers, survey):
    created = (await _submit(client, headers, survey["id"], [
        {"questionIndex": 0, "value": "2"}, {"questionIndex": 1, "value": "ok"},
    ])).json()["response"]
    res = await client.get(f"/api/v1/responses/{created['id']}")
    assert res.status_code == 200
    assert res.json()["surveyTitle"] == "Employee Pulse"


async def test_get_unknown_response_returns_404(client):
    res = await client.get(f"/api/v1/responses/{uuid4()}")
    assert res.status_code == 404


async def test_my_responses_lists_only_callers(client, headers, survey):
    await _submit(client, headers, survey["id"], [
        {"questionIndex": 0, "value": "2"}, {"questionIndex": 1, "value": "ok"},
    ])
    await _submit(client, {"X-User-Id": str(uuid4())}, survey["id"], [
        {"questionIndex": 0, "value": "3"}, {"questionIndex": 1, "value": "ok"},
    ])
    mine = (await client.get("/api/v1/responses/my", headers=headers)).json()
    assert len(mine) == 1


async def test_paged_listing(client, survey):
    for _ in range(3):
        await _submit(client, {"X-User-Id": str(uuid4())}, survey["id"], [
            {"questionIndex": 0, "value": "5"}, {"questionIndex": 1, "value": "ok"},
        ])
    page = (await client.get("/api/v1/responses", params={"page": 1, "limit": 2})).json()
    assert page["total"] == 3
    assert page["totalPages"] == 2
    assert len(page["records"]) == 2


async def test_survey_participation(client, headers, survey, user_id):
    await _submit(client, headers, survey["id"], [
        {"questionIndex": 0, "value": "5"}, {"questionIndex": 1, "value": "ok"},
    ])
    res = await client.get(f"/api/v1/surveys/{survey['id']}/participation")
    assert res.json() == {
        "surveyId": survey["id"], "submittedCount": 1, "respondentUserIds": [user_id],
    }


# ─── Export ──────────────────────────────────────────────────────

async def test_export_csv(client, headers, survey, user_id):
    await _submit(client, headers, survey["id"], [
        {"questionIndex": 0, "value": "4"}, {"questionIndex": 1, "value": "more, please"},
    ])
    res = await client.get("/api/v1/responses/export")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert "responses.csv" in res.headers["content-disposition"]
    lines = res.text.strip().split("\n")
    assert lines[0] == "User,Email,Survey,Submission Date,Answers"
    assert len(lines) == 2
    assert lines[1].startswith("Unknown User,Unknown Email,Employee Pulse,")
    assert lines[1].endswith('"How satisfied are you with your role?: 4; '
                             'What should we improve?: more, please"')


# ─── Oversized input ─────────────────────────────────────────────

async def test_oversized_rating_returns_400_not_500(client, headers, survey):
    res = await _submit(client, headers, survey["id"], [
        {"questionIndex": 0, "value": "1" * 5000}, {"questionIndex": 1, "value": "ok"},
    ])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_INPUT"


async def test_answer_longer_than_limit_rejected_at_boundary(client, headers, survey):
    res = await _submit(client, headers, survey["id"], [
        {"questionIndex": 0, "value": "4"}, {"questionIndex": 1, "value": "x" * 5001},
    ])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
