from app.jobs import auto_submit
from app.models.quiz_db.quiz_attempt_db import QuizAttempt
from app.services import quiz_attempts, quiz_autosave
from tests.conftest import TestingSessionLocal
from tests.helpers import minutes_ago


def test_run_sweep_submits_expired_attempts(db, student, make_quiz, monkeypatch):
    quiz = make_quiz(duration_minute=30)
    attempt = quiz_attempts.start_quiz(db, student, quiz.id, now=minutes_ago(40))
    question = quiz.questions[0]
    quiz_autosave.save_temp_submission(db, student, attempt.id, question.id, question.options[0].id)
    monkeypatch.setattr(auto_submit, "SessionLocal", TestingSessionLocal)

    assert auto_submit.run_sweep() == 1

    db.expire_all()
    assert db.get(QuizAttempt, attempt.id).ended_at is not None


def test_once_flag_runs_a_single_sweep(monkeypatch):
    sweeps = []
    monkeypatch.setattr(auto_submit, "run_sweep", lambda: sweeps.append(1) or 0)
    monkeypatch.setattr("sys.argv", ["auto_submit", "--once"])

    auto_submit.main()

    assert sweeps == [1]
