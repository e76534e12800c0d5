import enum
import uuid
from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.core.database import Base


class QuizType(str, enum.Enum):
    tf = "tf"  # true / false
    mc = "mc"  # multiple choice


class Quiz(Base):
    __tablename__ = "quizzes"
    __table_args__ = (
        CheckConstraint("max_attempts >= 1", name="ck_quizzes_max_attempts"),
        CheckConstraint("duration_minute >= 1", name="ck_quizzes_duration_minute"),
    )

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        index=True
    )

    meeting_id = Column(Uuid(as_uuid=True), ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(QuizType, name="quiz_type"), nullable=False)
    is_open = Column(Boolean, nullable=False, default=False)
    start_time = Column(DateTime, nullable=True)  # None = open from the beginning
    end_time = Column(DateTime, nullable=True)  # None = never closes
    duration_minute = Column(Integer, nullable=False)
    max_attempts = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    questions = relationship(
        "QuizQuestion",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuizQuestion.position",
    )
    attempts = relationship("QuizAttempt", back_populates="quiz", cascade="all, delete-orphan")
