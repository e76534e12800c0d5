import uuid
from sqlalchemy import Column, String, ForeignKey, Table, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base


# Teaching assignments: which teachers teach which meeting
meeting_teachers = Table(
    "meeting_teachers",
    Base.metadata,
    Column("meeting_id", Uuid(as_uuid=True), ForeignKey("meetings.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Batch(Base):
    __tablename__ = "batches"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    slug = Column(String, unique=True, nullable=False)
    title = Column(String, nullable=False)

    meetings = relationship("Meeting", back_populates="batch")


class Meeting(Base):
    __tablename__ = "meetings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    batch_id = Column(Uuid(as_uuid=True), ForeignKey("batches.id"), nullable=False, index=True)
    title = Column(String, nullable=False)

    batch = relationship("Batch", back_populates="meetings")
    teachers = relationship("User", secondary=meeting_teachers)
