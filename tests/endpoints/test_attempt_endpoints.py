from exam_portal.core.constants import RoleEnum
from exam_portal.schemas.user import UserContext
from tests.helpers.asserts import api_call, assert_error


def _start(client, exam, headers):
    response = api_call(client, "POST", f"/exams/{exam.id}/attempts", headers=headers)
    return response.json()["data"]["attempt"]


def test_questions_hide_answer_key(client, two_question_exam, student_context, auth_headers):
    exam, q1, q2 = two_question_exam
    response = api_call(client, "GET", f"/exams/{exam.id}/questions", headers=auth_headers(student_context))

    questions = response.json()["data"]
    assert [q["id"] for q in questions] == [q1.id, q2.id]
    assert all("correct_answer" not in q for q in questions)


def test_start_attempt_returns_exam_without_answer_key(client, two_question_exam, student_context, auth_headers):
    exam, _, _ = two_question_exam
    response = api_call(client, "POST", f"/exams/{exam.id}/attempts", headers=auth_headers(student_context))

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["attempt"]["status"] == "pending"
    assert data["exam"]["id"] == exam.id
    assert all("correct_answer" not in q for q in data["exam"]["questions"])


def test_start_attempt_twice_resumes(client, two_question_exam, student_context, auth_headers):
    exam, _, _ = two_question_exam
    headers = auth_headers(student_context)
    assert _start(client, exam, headers)["id"] == _start(client, exam, headers)["id"]


def test_missing_token_is_rejected(client, two_question_exam):
    exam, _, _ = two_question_exam
    response = client.post(f"/exams/{exam.id}/attempts")
    assert_error(response, 401, "INVALID_TOKEN")


def test_garbage_token_is_rejected(client, two_question_exam):
    exam, _, _ = two_question_exam
    response = client.post(f"/exams/{exam.id}/attempts", headers={"Authorization": "Bearer not-a-jwt"})
    assert_error(response, 401, "INVALID_TOKEN")
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_unknown_exam(client, student_context, auth_headers):
    response = client.post("/exams/999999/attempts", headers=auth_headers(student_context))
    assert_error(response, 404, "NOT_FOUND")
    body = response.json()
    assert body["error"]["retryable"] is False
    assert body["path"].endswith("/exams/999999/attempts")
    assert body["request_id"]


def test_request_id_is_echoed(client, student_context, auth_headers):
    headers = {**auth_headers(student_context), "X-Request-ID": "req-123"}
    response = client.post("/exams/999999/attempts", headers=headers)
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.json()["request_id"] == "req-123"


def test_record_answer_and_submit(client, two_question_exam, student_context, auth_headers):
    exam, q1, q2 = two_question_exam
    headers = auth_headers(student_context)
    attempt = _start(client, exam, headers)

    api_call(client, "POST", f"/attempts/{attempt['id']}/answers", headers=headers,
             json={"question_id": q1.id, "answer_text": "B"})
    api_call(client, "POST", f"/attempts/{attempt['id']}/answers", headers=headers,
             json={"question_id": q1.id, "answer_text": "A"})
    api_call(client, "POST", f"/attempts/{attempt['id']}/answers", headers=headers,
             json={"question_id": q2.id, "answer_text": "essay"})

    progress = api_call(client, "GET", f"/attempts/{attempt['id']}/progress", headers=headers).json()["data"]
    assert progress["answered_questions"] == 2
    assert progress["total_questions"] == 2

    submitted = api_call(client, "POST", f"/attempts/{attempt['id']}/submit", headers=headers).json()["data"]
    assert submitted["status"] == "completed"
    assert submitted["total_score"] == 5
    verdicts = {a["question_id"]: a["verdict"] for a in submitted["user_answers"]}
    assert verdicts == {q1.id: "correct", q2.id: "pending"}

    response = client.post(f"/attempts/{attempt['id']}/submit", headers=headers)
    assert_error(response, 409, "ALREADY_COMPLETED")

    response = client.post(f"/attempts/{attempt['id']}/answers", headers=headers,
                           json={"question_id": q1.id, "answer_text": "C"})
    assert_error(response, 409, "ATTEMPT_NOT_EDITABLE")


def test_bulk_answers(client, two_question_exam, student_context, auth_headers):
    exam, q1, q2 = two_question_exam
    headers = auth_headers(student_context)
    attempt = _start(client, exam, headers)

    response = api_call(client, "POST", f"/attempts/{attempt['id']}/answers/bulk", headers=headers, json=[
        {"question_id": q1.id, "answer_text": "A"},
        {"question_id": q2.id, "answer_text": "essay"},
    ])
    assert len(response.json()["data"]) == 2

    response = client.post(f"/attempts/{attempt['id']}/answers/bulk", headers=headers,
                           json=[{"question_id": 999999, "answer_text": "A"}])
    assert_error(response, 422, "VALIDATION_ERROR")
    assert response.json()["error"]["details"] == {"question_ids": [999999]}


def test_other_students_cannot_touch_attempt(client, two_question_exam, student_context, user_ids, auth_headers):
    exam, q1, _ = two_question_exam
    attempt = _start(client, exam, auth_headers(student_context))
    intruder_headers = auth_headers(UserContext(user_id=user_ids(), role=RoleEnum.STUDENT))

    response = client.post(f"/attempts/{attempt['id']}/answers", headers=intruder_headers,
                           json={"question_id": q1.id, "answer_text": "A"})
    assert_error(response, 403, "UNAUTHORIZED")

    response = client.get(f"/attempts/{attempt['id']}", headers=intruder_headers)
    assert_error(response, 403, "UNAUTHORIZED")


def test_my_attempts(client, two_question_exam, student_context, auth_headers):
    exam, _, _ = two_question_exam
    headers = auth_headers(student_context)
    attempt = _start(client, exam, headers)

    response = api_call(client, "GET", "/attempts/me", headers=headers)
    assert [a["id"] for a in response.json()["data"]] == [attempt["id"]]


def test_malformed_body_uses_error_envelope(client, two_question_exam, student_context, auth_headers):
    exam, _, _ = two_question_exam
    headers = auth_headers(student_context)
    attempt = _start(client, exam, headers)

    response = client.post(f"/attempts/{attempt['id']}/answers", headers=headers, json={"answer_text": "A"})
    assert_error(response, 422, "VALIDATION_ERROR")
    assert "validation_errors" in response.json()["error"]["details"]


def test_result_summary(client, two_question_exam, student_context, admin_context, auth_headers):
    exam, q1, q2 = two_question_exam
    headers = auth_headers(student_context)
    attempt = _start(client, exam, headers)
    api_call(client, "POST", f"/attempts/{attempt['id']}/answers", headers=headers,
             json={"question_id": q1.id, "answer_text": "A"})
    api_call(client, "POST", f"/attempts/{attempt['id']}/answers", headers=headers,
             json={"question_id": q2.id, "answer_text": "essay"})
    api_call(client, "POST", f"/attempts/{attempt['id']}/submit", headers=headers)

    data = api_call(client, "GET", f"/attempts/{attempt['id']}/result", headers=headers).json()["data"]
    assert data["statistics"]["total_score"] == 5
    assert data["statistics"]["pending_evaluation"] == 1
    assert data["statistics"]["passed"] is None
    assert [a["verdict"] for a in data["answers"]] == ["correct", "pending"]
    assert all(a["correct_answer"] is None for a in data["answers"])

    admin_data = api_call(client, "GET", f"/attempts/{attempt['id']}/result",
                          headers=auth_headers(admin_context)).json()["data"]
    assert admin_data["answers"][0]["correct_answer"] == "A"


def test_result_of_unsubmitted_attempt(client, two_question_exam, student_context, auth_headers):
    exam, _, _ = two_question_exam
    headers = auth_headers(student_context)
    attempt = _start(client, exam, headers)

    response = client.get(f"/attempts/{attempt['id']}/result", headers=headers)
    assert_error(response, 409, "INVALID_STATE")
