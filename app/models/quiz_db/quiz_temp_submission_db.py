import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.core.database import Base


class QuizTempSubmission(Base):
    """Autosaved draft answer, one row per (attempt, question)."""

    __tablename__ = "quiz_temp_submissions"
    __table_args__ = (
        UniqueConstraint("attempt_id", "question_id", name="uq_quiz_temp_submissions_attempt_question"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    attempt_id = Column(Uuid(as_uuid=True), ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(Uuid(as_uuid=True), ForeignKey("quiz_questions.id", ondelete="CASCADE"), nullable=False)
    selected_option_id = Column(Uuid(as_uuid=True), ForeignKey("quiz_options.id", ondelete="CASCADE"), nullable=False)
    revision = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    attempt = relationship("QuizAttempt", back_populates="temp_submissions")
    question = relationship("QuizQuestion")
