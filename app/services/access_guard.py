"""
Access guard for quiz resources.

One predicate decides whether a user may act on the quizzes of a meeting.
The decision is made by a strategy picked from the user's role:

- admin: always allowed
- teacher: allowed when they teach a meeting of the batch that owns the meeting
- student: allowed when they hold a paid purchase for that batch

Any other role, a meeting that belongs to no batch, or a lookup that fails
with a database error, is denied.
"""

import logging
from typing import Callable, Dict
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenException
from app.models.batch_db.batch_crud import get_batch_by_meeting_id, is_batch_owned_by_teacher
from app.models.batch_db.batch_db import Batch
from app.models.purchase_db.purchase_crud import has_paid
from app.models.user_db.user_db import RoleType, User

logger = logging.getLogger(__name__)

AccessStrategy = Callable[[Session, User, Batch], bool]


def admin_access(db: Session, user: User, batch: Batch) -> bool:
    return True


def teacher_ownership_access(db: Session, user: User, batch: Batch) -> bool:
    return is_batch_owned_by_teacher(db, user.id, batch.slug)


def student_payment_access(db: Session, user: User, batch: Batch) -> bool:
    return has_paid(db, user.id, batch.id)


DEFAULT_STRATEGIES: Dict[RoleType, AccessStrategy] = {
    RoleType.admin: admin_access,
    RoleType.teacher: teacher_ownership_access,
    RoleType.student: student_payment_access,
}


class AccessGuard:

    def __init__(self, db: Session, strategies: Dict[RoleType, AccessStrategy] | None = None):
        self.db = db
        self.strategies = strategies or DEFAULT_STRATEGIES

    def can_access(self, user: User, meeting_id: UUID) -> bool:
        strategy = self.strategies.get(user.role)
        if strategy is None:
            return False

        # admins are allowed even for meetings the lookups know nothing about
        if strategy is admin_access:
            return True

        try:
            batch = get_batch_by_meeting_id(self.db, meeting_id)
            if batch is None:
                return False
            return strategy(self.db, user, batch)
        except SQLAlchemyError:
            logger.exception("Access lookup failed for user %s on meeting %s", user.id, meeting_id)
            return False

    def ensure_access(self, user: User, meeting_id: UUID, message: str = "forbidden") -> None:
        if not self.can_access(user, meeting_id):
            logger.info("Access denied: user=%s role=%s meeting=%s", user.id, user.role, meeting_id)
            raise ForbiddenException(message)
