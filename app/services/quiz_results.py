from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenException, NotFoundException
from app.models.quiz_db.quiz_crud import QuizRepository
from app.models.quiz_db.quiz_result_db import QuizResult
from app.models.user_db.user_db import RoleType, User
from app.services.access_guard import AccessGuard


def get_attempt_result(db: Session, user: User, attempt_id: UUID) -> QuizResult:
    result = QuizRepository(db).get_result_by_attempt_id(attempt_id)
    # a result whose quiz was deleted has no attempt left to authorize against
    if not result or not result.attempt:
        raise NotFoundException("quiz result not found", resource="result")

    AccessGuard(db).ensure_access(user, result.attempt.quiz.meeting_id)

    # teachers and admins may read anyone's result, students only their own
    if user.role == RoleType.student and result.attempt.user_id != user.id:
        raise ForbiddenException("forbidden: not your result")

    return result
