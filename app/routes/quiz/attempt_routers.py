from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from uuid import UUID

from app.core.database import get_db
from app.core.security import get_current_user, require_roles
from app.models.user_db.user_db import RoleType, User
from app.schemas.quiz.attempt_base import (
    AttemptDetailOut,
    AttemptOut,
    ResultDetailOut,
    ResultOut,
    SaveTempSubmissionRequest,
    TempSubmissionOut,
)
from app.schemas.quiz.quiz_base import QuizForUserOut
from app.services import quiz_attempts, quiz_autosave, quiz_grader, quiz_results

attempt_router = APIRouter(prefix="/attempts", tags=["Quiz attempts"])

student_only = require_roles(RoleType.student)


@attempt_router.get("/{attempt_id}", response_model=AttemptDetailOut)
def get_attempt_detail(
    attempt_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(student_only)
):
    detail = quiz_attempts.get_attempt_detail(db, current_user, attempt_id)
    return AttemptDetailOut(
        attempt=AttemptOut.model_validate(detail.attempt),
        quiz=QuizForUserOut.model_validate(detail.quiz),
        temp_submissions=[TempSubmissionOut.model_validate(t) for t in detail.temp_submissions],
    )


@attempt_router.post("/{attempt_id}/temp-submissions", response_model=TempSubmissionOut)
def save_temp_submission(
    attempt_id: UUID,
    body: SaveTempSubmissionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(student_only)
):
    return quiz_autosave.save_temp_submission(
        db,
        current_user,
        attempt_id,
        body.question_id,
        body.selected_option_id,
        expected_revision=body.expected_revision,
    )


@attempt_router.post("/{attempt_id}/submissions", response_model=ResultOut, status_code=status.HTTP_201_CREATED)
def submit_quiz(
    attempt_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(student_only)
):
    return quiz_grader.submit_quiz(db, current_user, attempt_id)


@attempt_router.get("/{attempt_id}/result", response_model=ResultDetailOut)
def get_attempt_result(
    attempt_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return quiz_results.get_attempt_result(db, current_user, attempt_id)
