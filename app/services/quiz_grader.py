"""
Attempt finalization and scoring.

Submitting turns every draft answer of an attempt into an immutable, scored
submission, writes the attempt's result and closes the attempt, all in one
transaction. Scores are binary per question and the percentage is
truncated, not rounded: ``floor(correct * 100 / total)``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.database import transaction
from app.core.exceptions import (
    ConflictException,
    EmptySubmissionException,
    ForbiddenException,
    NotFoundException,
    QuizServiceException,
)
from app.models.quiz_db.quiz_attempt_db import QuizAttempt
from app.models.quiz_db.quiz_crud import QuizRepository
from app.models.quiz_db.quiz_db import Quiz
from app.models.quiz_db.quiz_result_db import QuizResult
from app.models.quiz_db.quiz_submission_db import QuizSubmission
from app.models.quiz_db.quiz_temp_submission_db import QuizTempSubmission
from app.models.user_db.user_db import User
from app.services.access_guard import AccessGuard

logger = logging.getLogger(__name__)

ALREADY_SUBMITTED = "quiz already submitted"


@dataclass(frozen=True)
class Score:
    total_questions: int
    correct_answers: int
    wrong_answers: int
    score_percent: int


def score_draft(temp: QuizTempSubmission) -> int:
    for option in temp.question.options:
        if option.id == temp.selected_option_id:
            return 1 if option.is_correct else 0
    return 0


def compute_score(scores: List[int]) -> Score:
    total = len(scores)
    correct = sum(scores)
    return Score(
        total_questions=total,
        correct_answers=correct,
        wrong_answers=total - correct,
        score_percent=(correct * 100) // total,
    )


def _finalize(repo: QuizRepository, attempt: QuizAttempt, now: datetime) -> QuizResult:
    temps = repo.get_temp_submissions(attempt.id)
    if not temps:
        raise EmptySubmissionException()

    submissions = []
    for temp in temps:
        submissions.append(QuizSubmission(
            attempt_id=attempt.id,
            question_id=temp.question_id,
            selected_option_id=temp.selected_option_id,
            score=score_draft(temp),
        ))
    repo.create_submissions(submissions)

    score = compute_score([s.score for s in submissions])
    result = repo.create_result(QuizResult(
        attempt_id=attempt.id,
        quiz_id=attempt.quiz_id,
        user_id=attempt.user_id,
        total_questions=score.total_questions,
        correct_answers=score.correct_answers,
        wrong_answers=score.wrong_answers,
        score_percent=float(score.score_percent),
    ))

    repo.close_attempt(attempt, now)
    return result


def submit_quiz(db: Session, user: User, attempt_id: UUID, now: Optional[datetime] = None) -> QuizResult:
    repo = QuizRepository(db)
    now = now or utcnow()

    try:
        with transaction(db):
            attempt = repo.get_attempt_by_id(attempt_id, for_update=True)
            if not attempt:
                raise NotFoundException("quiz attempt not found", resource="attempt")
            if attempt.user_id != user.id:
                raise ForbiddenException("forbidden: not your attempt")
            if attempt.ended_at is not None:
                raise ConflictException(ALREADY_SUBMITTED)

            quiz = repo.get_quiz_by_id(attempt.quiz_id)
            if not quiz:
                raise NotFoundException("quiz not found", resource="quiz")
            AccessGuard(db).ensure_access(user, quiz.meeting_id)

            deadline = attempt_deadline(attempt, quiz)
            if now > deadline:
                logger.warning("Late submit on attempt %s: deadline was %s", attempt.id, deadline)

            result = _finalize(repo, attempt, now)
    except IntegrityError as err:
        # unique keys on result/submissions: another submit finished first
        raise ConflictException(ALREADY_SUBMITTED) from err

    db.refresh(result)
    logger.info(
        "Attempt %s submitted by %s: %d/%d correct (%d%%)",
        attempt_id, user.id, result.correct_answers, result.total_questions, int(result.score_percent),
    )
    return result


def attempt_deadline(attempt: QuizAttempt, quiz: Quiz) -> datetime:
    deadline = attempt.started_at + timedelta(minutes=quiz.duration_minute)
    if quiz.end_time and quiz.end_time < deadline:
        deadline = quiz.end_time
    return deadline


def auto_submit_expired_attempts(db: Session, now: Optional[datetime] = None) -> List[UUID]:
    """
    Finalize every active attempt whose time is up.

    Runs as the system: no caller, so no ownership or access checks. Each
    attempt is finalized in its own transaction; attempts without drafts
    cannot be finalized and stay active.
    """
    repo = QuizRepository(db)
    now = now or utcnow()

    expired = [
        attempt.id
        for attempt in repo.get_all_active_attempts()
        if now > attempt_deadline(attempt, attempt.quiz)
    ]

    submitted = []
    for attempt_id in expired:
        try:
            with transaction(db):
                attempt = repo.get_attempt_by_id(attempt_id, for_update=True)
                if attempt is None or attempt.ended_at is not None:
                    continue
                _finalize(repo, attempt, now)
        except EmptySubmissionException:
            logger.info("Attempt %s expired without answers, left open", attempt_id)
            continue
        except (QuizServiceException, IntegrityError):
            logger.exception("Failed to auto-submit attempt %s", attempt_id)
            continue

        submitted.append(attempt_id)
        logger.info("Auto-submitted attempt %s", attempt_id)

    return submitted
