from uuid import UUID
from sqlalchemy.orm import Session

from app.models.batch_db.batch_db import Batch, Meeting, meeting_teachers


def get_batch_by_meeting_id(db: Session, meeting_id: UUID) -> Batch | None:
    return (
        db.query(Batch)
        .join(Meeting, Meeting.batch_id == Batch.id)
        .filter(Meeting.id == meeting_id)
        .first()
    )


def is_batch_owned_by_teacher(db: Session, teacher_id: UUID, batch_slug: str) -> bool:
    # a teacher owns a batch when they teach at least one of its meetings
    count = (
        db.query(Meeting)
        .join(meeting_teachers, meeting_teachers.c.meeting_id == Meeting.id)
        .join(Batch, Batch.id == Meeting.batch_id)
        .filter(meeting_teachers.c.user_id == teacher_id, Batch.slug == batch_slug)
        .count()
    )
    return count > 0


def get_meeting_by_id(db: Session, meeting_id: UUID) -> Meeting | None:
    return db.query(Meeting).filter(Meeting.id == meeting_id).first()
