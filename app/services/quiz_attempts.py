"""
Attempt lifecycle: NoAttempt -> Active -> Ended.

An attempt becomes Active when it is started and Ended when it is
submitted (see ``quiz_grader``). Ended attempts never become Active again;
starting over creates a new attempt, within the quiz's ``max_attempts``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.database import transaction
from app.core.exceptions import ConflictException, ForbiddenException, NotFoundException
from app.models.quiz_db.quiz_attempt_db import QuizAttempt
from app.models.quiz_db.quiz_crud import QuizRepository
from app.models.quiz_db.quiz_db import Quiz
from app.models.quiz_db.quiz_result_db import QuizResult
from app.models.quiz_db.quiz_temp_submission_db import QuizTempSubmission
from app.models.user_db.user_db import User
from app.services.access_guard import AccessGuard

logger = logging.getLogger(__name__)

ATTEMPT_ONGOING = "quiz attempt still ongoing"


@dataclass
class AttemptDetail:
    attempt: QuizAttempt
    quiz: Quiz
    temp_submissions: List[QuizTempSubmission] = field(default_factory=list)


def check_start_window(quiz: Quiz, now: datetime) -> None:
    if not quiz.is_open:
        raise ConflictException("quiz is not open")
    if quiz.start_time and now < quiz.start_time:
        raise ConflictException("quiz has not started yet")
    if quiz.end_time and now > quiz.end_time:
        raise ConflictException("quiz has ended")


def start_quiz(db: Session, user: User, quiz_id: UUID, now: Optional[datetime] = None) -> QuizAttempt:
    repo = QuizRepository(db)
    now = now or utcnow()

    with transaction(db):
        quiz = repo.get_quiz_by_id(quiz_id)
        if not quiz:
            raise NotFoundException("quiz not found", resource="quiz")

        AccessGuard(db).ensure_access(user, quiz.meeting_id)
        check_start_window(quiz, now)

        if repo.count_attempts(quiz.id, user.id) >= quiz.max_attempts:
            raise ConflictException("maximum attempts reached")
        if repo.get_active_attempt(quiz.id, user.id):
            raise ConflictException(ATTEMPT_ONGOING)

        attempt = QuizAttempt(quiz_id=quiz.id, user_id=user.id, started_at=now)
        try:
            repo.create_attempt(attempt)
        except IntegrityError as err:
            # a concurrent start won the race for the active-attempt slot
            raise ConflictException(ATTEMPT_ONGOING) from err

    db.refresh(attempt)
    logger.info("User %s started attempt %s on quiz %s", user.id, attempt.id, quiz_id)
    return attempt


def get_active_attempt(db: Session, user: User, quiz_id: UUID) -> Optional[QuizAttempt]:
    repo = QuizRepository(db)
    quiz = repo.get_quiz_by_id(quiz_id)
    if not quiz:
        raise NotFoundException("quiz not found", resource="quiz")

    AccessGuard(db).ensure_access(user, quiz.meeting_id)
    return repo.get_active_attempt(quiz.id, user.id)


def get_attempt_detail(db: Session, user: User, attempt_id: UUID) -> AttemptDetail:
    repo = QuizRepository(db)
    attempt = repo.get_attempt_by_id(attempt_id)
    if not attempt:
        raise NotFoundException("attempt not found", resource="attempt")
    if attempt.user_id != user.id:
        raise ForbiddenException("forbidden: not your attempt")

    quiz = repo.get_quiz_with_questions(attempt.quiz_id)
    if not quiz:
        raise NotFoundException("quiz not found", resource="quiz")
    AccessGuard(db).ensure_access(user, quiz.meeting_id)

    return AttemptDetail(
        attempt=attempt,
        quiz=quiz,
        temp_submissions=repo.get_temp_submissions(attempt.id),
    )


def list_attempts(db: Session, user: User, quiz_id: UUID) -> List[Tuple[QuizAttempt, Optional[QuizResult]]]:
    repo = QuizRepository(db)
    quiz = repo.get_quiz_by_id(quiz_id)
    if not quiz:
        raise NotFoundException("quiz not found", resource="quiz")
    AccessGuard(db).ensure_access(user, quiz.meeting_id)

    attempts = repo.get_attempts_by_quiz_and_user(quiz.id, user.id)
    results = repo.get_results_by_attempt_ids([a.id for a in attempts])
    return [(attempt, results.get(attempt.id)) for attempt in attempts]
