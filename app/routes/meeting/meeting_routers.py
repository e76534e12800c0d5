from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from app.core.database import get_db
from app.core.security import require_roles
from app.models.quiz_db.quiz_db import QuizType
from app.models.user_db.user_db import RoleType, User
from app.schemas.common.page_response import PageResponse
from app.schemas.quiz.quiz_base import QuizCreate, QuizOut
from app.services import quiz_catalog

meeting_router = APIRouter(prefix="/meetings", tags=["Meeting quizzes"])

staff_only = require_roles(RoleType.admin, RoleType.teacher)


@meeting_router.post("/{meeting_id}/quizzes", response_model=QuizOut, status_code=status.HTTP_201_CREATED)
def create_quiz(
    meeting_id: UUID,
    quiz_in: QuizCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_only)
):
    return quiz_catalog.create_quiz_metadata(db, current_user, meeting_id, quiz_in)


@meeting_router.get("/{meeting_id}/quizzes", response_model=PageResponse[QuizOut])
def list_quizzes(
    meeting_id: UUID,
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    sort: str = Query("created_at"),
    order: str = Query("asc"),
    q: Optional[str] = Query(None),
    is_open: Optional[bool] = Query(None),
    type: Optional[QuizType] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_only)
):
    quizzes, total = quiz_catalog.list_quizzes_by_meeting(
        db,
        current_user,
        meeting_id,
        page=page,
        size=size,
        sort=sort,
        order=order,
        search=q,
        is_open=is_open,
        quiz_type=type,
    )

    has_next = (page * size) < total
    has_prev = page > 1

    return PageResponse[QuizOut](
        page=page,
        size=size,
        total=total,
        has_next=has_next,
        has_prev=has_prev,
        items=quizzes
    )
