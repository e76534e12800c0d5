from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from typing import List, Optional

from app.schemas.quiz.quiz_base import QuizForUserOut, QuizOut


class SaveTempSubmissionRequest(BaseModel):
    question_id: UUID
    selected_option_id: UUID
    expected_revision: Optional[int] = None


class TempSubmissionOut(BaseModel):
    id: UUID
    attempt_id: UUID
    question_id: UUID
    selected_option_id: UUID
    revision: int
    updated_at: datetime

    class Config:
        from_attributes = True


class AttemptOut(BaseModel):
    id: UUID
    quiz_id: UUID
    user_id: UUID
    started_at: datetime
    ended_at: Optional[datetime] = None
    is_active: bool

    class Config:
        from_attributes = True


class ActiveAttemptOut(BaseModel):
    message: str
    data: Optional[AttemptOut] = None


class AttemptDetailOut(BaseModel):
    attempt: AttemptOut
    quiz: QuizForUserOut
    temp_submissions: List[TempSubmissionOut] = []


class ResultOut(BaseModel):
    id: UUID
    attempt_id: UUID
    total_questions: int
    correct_answers: int
    wrong_answers: int
    score_percent: float
    created_at: datetime

    class Config:
        from_attributes = True


class AttemptWithResultOut(AttemptOut):
    result: Optional[ResultOut] = None


class AttemptWithQuizOut(AttemptOut):
    quiz: QuizOut


class ResultDetailOut(ResultOut):
    attempt: AttemptWithQuizOut
