import uuid
from sqlalchemy import Column, DateTime, Float, Integer, Uuid
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.core.database import Base


class QuizResult(Base):
    __tablename__ = "quiz_results"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    # no FK: results outlive the attempts of a deleted quiz
    attempt_id = Column(Uuid(as_uuid=True), nullable=False, unique=True, index=True)
    quiz_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    total_questions = Column(Integer, nullable=False)
    correct_answers = Column(Integer, nullable=False)
    wrong_answers = Column(Integer, nullable=False)
    score_percent = Column(Float, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    attempt = relationship(
        "QuizAttempt",
        primaryjoin="QuizResult.attempt_id == QuizAttempt.id",
        foreign_keys="QuizResult.attempt_id",
        viewonly=True,
        lazy="joined",
    )
