import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Index, Uuid, text
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.core.database import Base


class QuizAttempt(Base):
    __tablename__ = "quiz_attempts"
    __table_args__ = (
        # at most one active (ended_at IS NULL) attempt per (quiz, user)
        Index(
            "uq_quiz_attempts_active",
            "quiz_id",
            "user_id",
            unique=True,
            postgresql_where=text("ended_at IS NULL"),
            sqlite_where=text("ended_at IS NULL"),
        ),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    quiz_id = Column(Uuid(as_uuid=True), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    started_at = Column(DateTime, nullable=False, default=utcnow)
    ended_at = Column(DateTime, nullable=True)  # set once, at submit

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    quiz = relationship("Quiz", back_populates="attempts")
    temp_submissions = relationship("QuizTempSubmission", back_populates="attempt", cascade="all, delete-orphan")
    submissions = relationship("QuizSubmission", back_populates="attempt", cascade="all, delete-orphan")

    @property
    def is_active(self) -> bool:
        return self.ended_at is None
