import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.database import transaction
from app.core.exceptions import ConflictException, ForbiddenException, NotFoundException
from app.models.quiz_db.quiz_crud import QuizRepository
from app.models.quiz_db.quiz_temp_submission_db import QuizTempSubmission
from app.models.user_db.user_db import User
from app.services.access_guard import AccessGuard
from app.services.quiz_grader import attempt_deadline

logger = logging.getLogger(__name__)


def save_temp_submission(
    db: Session,
    user: User,
    attempt_id: UUID,
    question_id: UUID,
    selected_option_id: UUID,
    expected_revision: Optional[int] = None,
) -> QuizTempSubmission:
    """
    Autosave the draft answer for one question of an active attempt.

    Drafts are last-write-wins per (attempt, question). ``expected_revision``
    is informational: a mismatch is logged as a stale write but the write
    still goes through.
    """
    repo = QuizRepository(db)

    attempt = repo.get_attempt_by_id(attempt_id)
    if not attempt:
        raise NotFoundException("quiz attempt not found", resource="attempt")
    if attempt.user_id != user.id:
        raise ForbiddenException("forbidden: not your attempt")
    if attempt.ended_at is not None:
        raise ConflictException("quiz already submitted")

    quiz = repo.get_quiz_by_id(attempt.quiz_id)
    if not quiz:
        raise NotFoundException("quiz not found", resource="quiz")
    AccessGuard(db).ensure_access(user, quiz.meeting_id, "forbidden: not allowed to access this quiz")

    deadline = attempt_deadline(attempt, quiz)
    if utcnow() > deadline:
        # late writes are logged, not rejected
        logger.warning("Late autosave on attempt %s: deadline was %s", attempt.id, deadline)

    question = repo.get_question(question_id, quiz.id)
    if not question:
        raise NotFoundException("question not found in this quiz", resource="question")
    option = repo.get_option(selected_option_id, question.id)
    if not option:
        raise NotFoundException("selected option does not belong to the question", resource="option")

    if expected_revision is not None:
        current = repo.get_temp_submission(attempt.id, question.id)
        current_revision = current.revision if current else 0
        if current_revision != expected_revision:
            logger.warning(
                "Stale autosave on attempt %s question %s: client revision %s, stored %s",
                attempt.id, question.id, expected_revision, current_revision,
            )

    # ids only: the ORM objects above are expired if the first write rolls back
    attempt_id, question_id, option_id = attempt.id, question.id, option.id
    try:
        temp = _write_draft(db, repo, attempt_id, question_id, option_id)
    except IntegrityError:
        # another request inserted this question's draft first; overwrite it
        temp = _write_draft(db, repo, attempt_id, question_id, option_id)

    db.refresh(temp)
    return temp


def _write_draft(
    db: Session, repo: QuizRepository, attempt_id: UUID, question_id: UUID, option_id: UUID
) -> QuizTempSubmission:
    with transaction(db):
        # re-read under lock so a draft never lands after the attempt was submitted
        attempt = repo.get_attempt_by_id(attempt_id, for_update=True)
        if attempt is None or attempt.ended_at is not None:
            raise ConflictException("quiz already submitted")
        return repo.save_temp_submission(attempt_id, question_id, option_id)
