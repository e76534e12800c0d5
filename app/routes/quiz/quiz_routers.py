from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from app.core.database import get_db
from app.core.security import get_current_user, require_roles
from app.models.user_db.user_db import RoleType, User
from app.schemas.quiz.attempt_base import ActiveAttemptOut, AttemptOut, AttemptWithResultOut, ResultOut
from app.schemas.quiz.quiz_base import ImportQuestionsOut, QuizOut, QuizUpdate, QuizWithQuestionsOut
from app.services import quiz_attempts, quiz_catalog
from app.services.quiz_importer import read_question_rows

quiz_router = APIRouter(prefix="/quizzes", tags=["Quiz"])

staff_only = require_roles(RoleType.admin, RoleType.teacher)
student_only = require_roles(RoleType.student)


@quiz_router.get("/{quiz_id}", response_model=QuizOut)
def get_quiz(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return quiz_catalog.get_quiz_metadata(db, current_user, quiz_id)


@quiz_router.get("/{quiz_id}/questions", response_model=QuizWithQuestionsOut)
def get_quiz_with_questions(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_only)
):
    return quiz_catalog.get_quiz_with_questions(db, current_user, quiz_id)


@quiz_router.patch("/{quiz_id}", response_model=QuizOut)
def update_quiz(
    quiz_id: UUID,
    quiz_in: QuizUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_only)
):
    return quiz_catalog.update_quiz(db, current_user, quiz_id, quiz_in)


@quiz_router.delete("/{quiz_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_quiz(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_only)
):
    quiz_catalog.delete_quiz(db, current_user, quiz_id)
    return None


@quiz_router.post("/{quiz_id}/import-questions", response_model=ImportQuestionsOut)
def import_questions(
    quiz_id: UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_only)
):
    # authorize before the upload is read or parsed
    quiz_catalog.ensure_can_import(db, current_user, quiz_id)
    rows = read_question_rows(file.filename, file.file.read())
    imported, skipped = quiz_catalog.import_questions(db, current_user, quiz_id, rows)
    return ImportQuestionsOut(quiz_id=quiz_id, imported=imported, skipped=skipped)


@quiz_router.post("/{quiz_id}/start", response_model=AttemptOut, status_code=status.HTTP_201_CREATED)
def start_quiz(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(student_only)
):
    return quiz_attempts.start_quiz(db, current_user, quiz_id)


@quiz_router.get("/{quiz_id}/attempts/active", response_model=ActiveAttemptOut)
def get_active_attempt(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(student_only)
):
    attempt = quiz_attempts.get_active_attempt(db, current_user, quiz_id)
    if attempt is None:
        return ActiveAttemptOut(message="No attempt yet", data=None)
    return ActiveAttemptOut(message="Success", data=AttemptOut.model_validate(attempt))


@quiz_router.get("/{quiz_id}/attempts", response_model=List[AttemptWithResultOut])
def list_attempts(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(student_only)
):
    return [
        AttemptWithResultOut(
            **AttemptOut.model_validate(attempt).model_dump(),
            result=ResultOut.model_validate(result) if result else None,
        )
        for attempt, result in quiz_attempts.list_attempts(db, current_user, quiz_id)
    ]
