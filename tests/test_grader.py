import logging

import pytest

from app.core.exceptions import ConflictException, EmptySubmissionException
from app.models.quiz_db.quiz_attempt_db import QuizAttempt
from app.models.quiz_db.quiz_crud import QuizRepository
from app.models.quiz_db.quiz_result_db import QuizResult
from app.models.quiz_db.quiz_submission_db import QuizSubmission
from app.services import quiz_attempts, quiz_autosave, quiz_grader
from app.services.quiz_grader import attempt_deadline, compute_score
from tests.helpers import answer_key, minutes_ago


def _answer(db, user, attempt, quiz, picks):
    """picks: one bool per question, True answers correctly."""
    key = answer_key(quiz)
    for question, right in zip(quiz.questions, picks):
        correct, wrong = key[question.id]
        option = correct if right else wrong
        quiz_autosave.save_temp_submission(db, user, attempt.id, question.id, option.id)


def test_compute_score_truncates():
    score = compute_score([1, 0, 1])
    assert score.total_questions == 3
    assert score.correct_answers == 2
    assert score.wrong_answers == 1
    assert score.score_percent == 66


def test_compute_score_bounds():
    assert compute_score([1, 1]).score_percent == 100
    assert compute_score([0, 0, 0]).score_percent == 0


def test_submit_scores_two_of_three(db, student, quiz):
    attempt = quiz_attempts.start_quiz(db, student, quiz.id)
    _answer(db, student, attempt, quiz, [True, False, True])

    result = quiz_grader.submit_quiz(db, student, attempt.id)

    assert result.total_questions == 3
    assert result.correct_answers == 2
    assert result.wrong_answers == 1
    assert result.score_percent == 66
    assert result.quiz_id == quiz.id
    assert result.user_id == student.id

    scores = sorted(s.score for s in QuizRepository(db).get_submissions(attempt.id))
    assert scores == [0, 1, 1]
    assert db.get(QuizAttempt, attempt.id).ended_at is not None


def test_unanswered_questions_are_not_counted(db, student, quiz):
    attempt = quiz_attempts.start_quiz(db, student, quiz.id)
    _answer(db, student, attempt, quiz, [True])

    result = quiz_grader.submit_quiz(db, student, attempt.id)

    assert result.total_questions == 1
    assert result.score_percent == 100


def test_second_submit_conflicts_without_duplicates(db, student, quiz):
    attempt = quiz_attempts.start_quiz(db, student, quiz.id)
    _answer(db, student, attempt, quiz, [True, True, True])
    quiz_grader.submit_quiz(db, student, attempt.id)

    with pytest.raises(ConflictException) as exc_info:
        quiz_grader.submit_quiz(db, student, attempt.id)
    assert exc_info.value.message == "quiz already submitted"

    assert db.query(QuizResult).count() == 1
    assert db.query(QuizSubmission).count() == 3


def test_empty_submission_writes_nothing(db, student, quiz):
    attempt = quiz_attempts.start_quiz(db, student, quiz.id)

    with pytest.raises(EmptySubmissionException):
        quiz_grader.submit_quiz(db, student, attempt.id)

    assert db.query(QuizResult).count() == 0
    assert db.query(QuizSubmission).count() == 0
    assert db.get(QuizAttempt, attempt.id).ended_at is None


def test_question_without_correct_option_scores_zero(db, student, make_quiz):
    quiz = make_quiz(questions=[("Pick one", ["A", "B"], None)])
    attempt = quiz_attempts.start_quiz(db, student, quiz.id)
    question = quiz.questions[0]
    quiz_autosave.save_temp_submission(db, student, attempt.id, question.id, question.options[0].id)

    result = quiz_grader.submit_quiz(db, student, attempt.id)

    assert result.correct_answers == 0
    assert result.score_percent == 0


def test_deadline_is_capped_by_quiz_end(db, student, make_quiz):
    quiz = make_quiz(duration_minute=60, end_time=minutes_ago(-10))
    attempt = quiz_attempts.start_quiz(db, student, quiz.id)

    assert attempt_deadline(attempt, quiz) == quiz.end_time


def test_auto_submit_finalizes_expired_attempts(db, student, classmate, make_quiz):
    quiz = make_quiz(duration_minute=30)
    expired = quiz_attempts.start_quiz(db, student, quiz.id, now=minutes_ago(40))
    _answer(db, student, expired, quiz, [True, False])
    running = quiz_attempts.start_quiz(db, classmate, quiz.id, now=minutes_ago(5))
    _answer(db, classmate, running, quiz, [True])

    submitted = quiz_grader.auto_submit_expired_attempts(db)

    assert submitted == [expired.id]
    result = db.query(QuizResult).filter(QuizResult.attempt_id == expired.id).one()
    assert result.score_percent == 50
    assert db.get(QuizAttempt, running.id).ended_at is None


def test_auto_submit_leaves_empty_attempts_open(db, student, make_quiz):
    quiz = make_quiz(duration_minute=30)
    attempt = quiz_attempts.start_quiz(db, student, quiz.id, now=minutes_ago(40))

    assert quiz_grader.auto_submit_expired_attempts(db) == []
    assert db.get(QuizAttempt, attempt.id).ended_at is None
    assert db.query(QuizResult).count() == 0


def test_late_submit_is_logged_and_scored(db, student, make_quiz, caplog):
    quiz = make_quiz(duration_minute=30)
    attempt = quiz_attempts.start_quiz(db, student, quiz.id, now=minutes_ago(40))
    _answer(db, student, attempt, quiz, [True])

    with caplog.at_level(logging.WARNING, logger="app.services.quiz_grader"):
        result = quiz_grader.submit_quiz(db, student, attempt.id)

    assert result.score_percent == 100
    assert "Late submit" in caplog.text


def test_submit_in_time_logs_no_warning(db, student, quiz, caplog):
    attempt = quiz_attempts.start_quiz(db, student, quiz.id)
    _answer(db, student, attempt, quiz, [True])

    with caplog.at_level(logging.WARNING, logger="app.services.quiz_grader"):
        quiz_grader.submit_quiz(db, student, attempt.id)

    assert "Late submit" not in caplog.text
