import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.core.database import Base


class QuizSubmission(Base):
    """Final, scored answer written once when the attempt is submitted."""

    __tablename__ = "quiz_submissions"
    __table_args__ = (
        UniqueConstraint("attempt_id", "question_id", name="uq_quiz_submissions_attempt_question"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    attempt_id = Column(Uuid(as_uuid=True), ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(Uuid(as_uuid=True), ForeignKey("quiz_questions.id", ondelete="CASCADE"), nullable=False)
    selected_option_id = Column(Uuid(as_uuid=True), ForeignKey("quiz_options.id", ondelete="CASCADE"), nullable=False)
    score = Column(Integer, nullable=False)  # 1 = correct, 0 = wrong

    created_at = Column(DateTime, default=utcnow)

    attempt = relationship("QuizAttempt", back_populates="submissions")
