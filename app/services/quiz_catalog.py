import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from app.models.batch_db.batch_crud import get_meeting_by_id
from app.models.quiz_db.quiz_crud import QuizRepository
from app.models.quiz_db.quiz_db import Quiz
from app.models.quiz_db.quiz_option_db import QuizOption
from app.models.quiz_db.quiz_question_db import QuizQuestion
from app.models.user_db.user_db import RoleType, User
from app.schemas.quiz.quiz_base import QuizCreate, QuizUpdate
from app.services.access_guard import AccessGuard

logger = logging.getLogger(__name__)

MIN_IMPORT_ROW_CELLS = 3


def option_letter(index: int) -> str:
    return chr(ord("A") + index)


def _ensure_can_edit(db: Session, user: User, meeting_id: UUID) -> None:
    if user.role == RoleType.student:
        raise ForbiddenException("forbidden: students cannot manage quizzes")
    AccessGuard(db).ensure_access(user, meeting_id, "forbidden: not teacher of this meeting")


def _get_quiz_or_404(repo: QuizRepository, quiz_id: UUID) -> Quiz:
    quiz = repo.get_quiz_by_id(quiz_id)
    if not quiz:
        raise NotFoundException("quiz not found", resource="quiz")
    return quiz


def create_quiz_metadata(db: Session, user: User, meeting_id: UUID, body: QuizCreate) -> Quiz:
    with transaction(db):
        # admins pass the access guard even for meetings that do not exist
        if not get_meeting_by_id(db, meeting_id):
            raise NotFoundException("meeting not found", resource="meeting")
        _ensure_can_edit(db, user, meeting_id)

        quiz = QuizRepository(db).create_quiz(Quiz(
            meeting_id=meeting_id,
            title=body.title,
            description=body.description,
            type=body.quiz_type,
            is_open=body.is_open,
            start_time=body.start_time,
            end_time=body.end_time,
            duration_minute=body.duration_minute,
            max_attempts=body.max_attempts,
        ))
    db.refresh(quiz)

    logger.info("Quiz %s created on meeting %s by %s", quiz.id, meeting_id, user.id)
    return quiz


def update_quiz(db: Session, user: User, quiz_id: UUID, body: QuizUpdate) -> Quiz:
    repo = QuizRepository(db)
    quiz = _get_quiz_or_404(repo, quiz_id)
    _ensure_can_edit(db, user, quiz.meeting_id)

    # only fields present in the request overwrite the stored quiz
    changes = body.model_dump(exclude_unset=True)
    for field in ("title", "type", "is_open", "duration_minute", "max_attempts"):
        if field in changes and changes[field] is None:
            raise ValidationException(f"{field} cannot be null", {field: "required"})

    start_time = changes.get("start_time", quiz.start_time)
    end_time = changes.get("end_time", quiz.end_time)
    if start_time and end_time and end_time < start_time:
        raise ValidationException(
            "end_time must not be before start_time",
            {"end_time": "before start_time"},
        )

    with transaction(db):
        for field, value in changes.items():
            setattr(quiz, field, value)
        db.flush()
    db.refresh(quiz)

    logger.info("Quiz %s updated by %s: %s", quiz.id, user.id, sorted(changes))
    return quiz


def delete_quiz(db: Session, user: User, quiz_id: UUID) -> None:
    repo = QuizRepository(db)
    quiz = _get_quiz_or_404(repo, quiz_id)
    _ensure_can_edit(db, user, quiz.meeting_id)

    with transaction(db):
        repo.delete_quiz(quiz)

    logger.info("Quiz %s deleted by %s", quiz_id, user.id)


def ensure_can_import(db: Session, user: User, quiz_id: UUID) -> Quiz:
    """Resolve the quiz and authorize the caller before an upload is read."""
    quiz = _get_quiz_or_404(QuizRepository(db), quiz_id)
    _ensure_can_edit(db, user, quiz.meeting_id)
    return quiz


def import_questions(db: Session, user: User, quiz_id: UUID, rows: List[List[str]]) -> Tuple[int, int]:
    """
    Create one question per row and one option per option cell.

    Rows are ``[question, option A, ..., correct letter]``. Rows shorter than
    three cells are skipped; everything else is written in one transaction,
    so a failing row leaves the quiz untouched. Returns (imported, skipped).
    """
    repo = QuizRepository(db)
    quiz = ensure_can_import(db, user, quiz_id)

    if not rows:
        raise ValidationException("import file has no questions")

    imported = 0
    skipped = 0
    with transaction(db):
        position = repo.count_questions(quiz.id)
        for row_number, row in enumerate(rows, start=2):
            if len(row) < MIN_IMPORT_ROW_CELLS:
                logger.info("Import into quiz %s: skipping row %d with %d cells", quiz.id, row_number, len(row))
                skipped += 1
                continue

            question_text = row[0]
            correct_letter = row[-1].strip().upper()
            option_cells = row[1:-1]

            question = repo.create_question(QuizQuestion(
                quiz_id=quiz.id,
                question=question_text,
                position=position,
            ))
            position += 1

            options = [
                QuizOption(
                    question_id=question.id,
                    option_text=text,
                    is_correct=option_letter(index) == correct_letter,
                    position=index,
                )
                for index, text in enumerate(option_cells)
            ]
            if not any(option.is_correct for option in options):
                logger.warning(
                    "Import into quiz %s: row %d has no option matching correct letter %r",
                    quiz.id, row_number, correct_letter,
                )
            repo.create_options(options)
            imported += 1

    logger.info("Imported %d questions into quiz %s (%d rows skipped)", imported, quiz.id, skipped)
    return imported, skipped


def get_quiz_metadata(db: Session, user: User, quiz_id: UUID) -> Quiz:
    quiz = _get_quiz_or_404(QuizRepository(db), quiz_id)
    AccessGuard(db).ensure_access(user, quiz.meeting_id)
    return quiz


def get_quiz_with_questions(db: Session, user: User, quiz_id: UUID) -> Quiz:
    quiz = QuizRepository(db).get_quiz_with_questions(quiz_id)
    if not quiz:
        raise NotFoundException("quiz not found", resource="quiz")
    AccessGuard(db).ensure_access(user, quiz.meeting_id)
    return quiz


def list_quizzes_by_meeting(
    db: Session,
    user: User,
    meeting_id: UUID,
    page: int = 1,
    size: int = 10,
    sort: str = "created_at",
    order: str = "asc",
    search: Optional[str] = None,
    is_open: Optional[bool] = None,
    quiz_type: Optional[str] = None,
) -> Tuple[List[Quiz], int]:
    AccessGuard(db).ensure_access(user, meeting_id)
    return QuizRepository(db).list_quizzes_by_meeting(
        meeting_id,
        skip=(page - 1) * size,
        limit=size,
        sort=sort,
        order=order,
        search=search,
        filters={"is_open": is_open, "type": quiz_type},
    )
