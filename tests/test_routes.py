import uuid

from app.models.quiz_db.quiz_question_db import QuizQuestion
from tests.helpers import answer_key, auth_headers


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_requires_token(client, quiz):
    r = client.get(f"/quizzes/{quiz.id}")
    assert r.status_code == 401


def test_role_gate(client, student, meeting):
    r = client.post(
        f"/meetings/{meeting.id}/quizzes",
        headers=auth_headers(student),
        json={"title": "Nope", "quiz_type": "mc", "duration_minute": 10},
    )
    assert r.status_code == 403


def test_create_and_list_quizzes(client, teacher, meeting):
    hdr = auth_headers(teacher)
    for title in ("Quiz A", "Quiz B", "Quiz C"):
        r = client.post(
            f"/meetings/{meeting.id}/quizzes",
            headers=hdr,
            json={"title": title, "quiz_type": "tf", "duration_minute": 15, "is_open": True},
        )
        assert r.status_code == 201
        assert r.json()["type"] == "tf"

    r = client.get(f"/meetings/{meeting.id}/quizzes", headers=hdr, params={"size": 2, "sort": "title", "order": "desc"})
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 3
    assert body["has_next"] is True
    assert body["has_prev"] is False
    assert [q["title"] for q in body["items"]] == ["Quiz C", "Quiz B"]


def test_invalid_body_is_400_with_error_shape(client, teacher, meeting):
    r = client.post(
        f"/meetings/{meeting.id}/quizzes",
        headers=auth_headers(teacher),
        json={"title": "Bad", "quiz_type": "mc", "duration_minute": 0},
    )
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "ValidationError"
    assert body["details"]["validation_errors"]


def test_unassigned_teacher_gets_403(client, other_teacher, quiz):
    r = client.patch(f"/quizzes/{quiz.id}", headers=auth_headers(other_teacher), json={"title": "Mine now"})
    assert r.status_code == 403
    assert r.json()["error"] == "Forbidden"


def test_unknown_quiz_is_404(client, teacher):
    r = client.get(f"/quizzes/{uuid.uuid4()}", headers=auth_headers(teacher))
    assert r.status_code == 404
    assert r.json()["message"] == "quiz not found"


def test_update_and_delete(client, teacher, quiz):
    hdr = auth_headers(teacher)

    r = client.patch(f"/quizzes/{quiz.id}", headers=hdr, json={"max_attempts": 3})
    assert r.status_code == 200
    assert r.json()["max_attempts"] == 3

    r = client.delete(f"/quizzes/{quiz.id}", headers=hdr)
    assert r.status_code == 204
    assert client.get(f"/quizzes/{quiz.id}", headers=hdr).status_code == 404


def test_import_questions_upload(client, db, teacher, make_quiz):
    quiz = make_quiz(questions=[])
    content = "Question,A,B,Correct\nCapital of France?,Paris,Rome,A\nbroken\n"

    r = client.post(
        f"/quizzes/{quiz.id}/import-questions",
        headers=auth_headers(teacher),
        files={"file": ("questions.csv", content.encode("utf-8"), "text/csv")},
    )

    assert r.status_code == 200
    assert r.json()["imported"] == 1
    assert r.json()["skipped"] == 1
    assert db.query(QuizQuestion).filter(QuizQuestion.quiz_id == quiz.id).count() == 1

    r = client.get(f"/quizzes/{quiz.id}/questions", headers=auth_headers(teacher))
    options = r.json()["questions"][0]["options"]
    assert [o["is_correct"] for o in options] == [True, False]


def test_import_rejects_unknown_file_type(client, teacher, quiz):
    r = client.post(
        f"/quizzes/{quiz.id}/import-questions",
        headers=auth_headers(teacher),
        files={"file": ("questions.txt", b"hello", "text/plain")},
    )
    assert r.status_code == 400


def test_student_flow(client, student, quiz):
    hdr = auth_headers(student)
    key = answer_key(quiz)

    r = client.get(f"/quizzes/{quiz.id}/attempts/active", headers=hdr)
    assert r.json() == {"message": "No attempt yet", "data": None}

    r = client.post(f"/quizzes/{quiz.id}/start", headers=hdr)
    assert r.status_code == 201
    attempt_id = r.json()["id"]

    r = client.get(f"/quizzes/{quiz.id}/attempts/active", headers=hdr)
    assert r.json()["data"]["id"] == attempt_id

    for (correct, wrong), right in zip(key.values(), [True, False, True]):
        option = correct if right else wrong
        r = client.post(
            f"/attempts/{attempt_id}/temp-submissions",
            headers=hdr,
            json={"question_id": str(option.question_id), "selected_option_id": str(option.id)},
        )
        assert r.status_code == 200
        assert r.json()["revision"] == 1

    r = client.get(f"/attempts/{attempt_id}", headers=hdr)
    assert r.status_code == 200
    detail = r.json()
    assert len(detail["temp_submissions"]) == 3
    for question in detail["quiz"]["questions"]:
        for option in question["options"]:
            assert "is_correct" not in option

    r = client.post(f"/attempts/{attempt_id}/submissions", headers=hdr)
    assert r.status_code == 201
    assert r.json()["score_percent"] == 66

    r = client.post(f"/attempts/{attempt_id}/submissions", headers=hdr)
    assert r.status_code == 409
    assert r.json() == {
        "success": False,
        "message": "quiz already submitted",
        "error": "Conflict",
        "details": {},
    }

    r = client.get(f"/attempts/{attempt_id}/result", headers=hdr)
    assert r.status_code == 200
    assert r.json()["attempt"]["quiz"]["id"] == str(quiz.id)

    r = client.get(f"/quizzes/{quiz.id}/attempts", headers=hdr)
    assert r.json()[0]["result"]["correct_answers"] == 2

    r = client.post(f"/quizzes/{quiz.id}/start", headers=hdr)
    assert r.status_code == 409
    assert r.json()["message"] == "maximum attempts reached"


def test_empty_submit_is_400(client, student, quiz):
    hdr = auth_headers(student)
    attempt_id = client.post(f"/quizzes/{quiz.id}/start", headers=hdr).json()["id"]

    r = client.post(f"/attempts/{attempt_id}/submissions", headers=hdr)
    assert r.status_code == 400
    assert r.json()["error"] == "EmptySubmission"


def test_closed_quiz_start_is_409(client, student, make_quiz):
    quiz = make_quiz(is_open=False)
    r = client.post(f"/quizzes/{quiz.id}/start", headers=auth_headers(student))
    assert r.status_code == 409
    assert r.json()["message"] == "quiz is not open"


def test_other_student_cannot_see_attempt(client, student, classmate, quiz):
    attempt_id = client.post(f"/quizzes/{quiz.id}/start", headers=auth_headers(student)).json()["id"]

    r = client.get(f"/attempts/{attempt_id}", headers=auth_headers(classmate))
    assert r.status_code == 403


def test_unassigned_teacher_import_is_403_before_file_is_read(client, db, other_teacher, make_quiz):
    quiz = make_quiz(questions=[])

    r = client.post(
        f"/quizzes/{quiz.id}/import-questions",
        headers=auth_headers(other_teacher),
        files={"file": ("q.txt", b"not a spreadsheet", "text/plain")},
    )

    assert r.status_code == 403
    assert r.json()["error"] == "Forbidden"
    assert db.query(QuizQuestion).count() == 0


def test_create_quiz_on_unknown_meeting_is_404(client, admin):
    r = client.post(
        f"/meetings/{uuid.uuid4()}/quizzes",
        headers=auth_headers(admin),
        json={"title": "Orphan", "quiz_type": "mc", "duration_minute": 10},
    )
    assert r.status_code == 404
    assert r.json()["message"] == "meeting not found"
