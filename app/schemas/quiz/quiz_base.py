from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional

from app.core.clock import to_naive_utc
from app.models.quiz_db.quiz_db import QuizType


class QuizCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    quiz_type: QuizType
    duration_minute: int = Field(ge=1)
    max_attempts: int = Field(default=1, ge=1)
    is_open: bool = False
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_time(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_window(self):
        if self.start_time and self.end_time and self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class QuizUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    type: Optional[QuizType] = None
    is_open: Optional[bool] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration_minute: Optional[int] = Field(default=None, ge=1)
    max_attempts: Optional[int] = Field(default=None, ge=1)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_time(cls, value):
        return to_naive_utc(value)


class QuizOut(BaseModel):
    id: UUID
    meeting_id: UUID
    title: str
    description: Optional[str] = None
    type: QuizType
    is_open: bool
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration_minute: int
    max_attempts: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OptionOut(BaseModel):
    id: UUID
    question_id: UUID
    option_text: str
    is_correct: bool

    class Config:
        from_attributes = True


class QuestionOut(BaseModel):
    id: UUID
    quiz_id: UUID
    question: str
    options: List[OptionOut] = []

    class Config:
        from_attributes = True


class QuizWithQuestionsOut(QuizOut):
    questions: List[QuestionOut] = []


# Student-facing projections: never expose is_correct

class OptionForUserOut(BaseModel):
    id: UUID
    question_id: UUID
    option_text: str

    class Config:
        from_attributes = True


class QuestionForUserOut(BaseModel):
    id: UUID
    quiz_id: UUID
    question: str
    options: List[OptionForUserOut] = []

    class Config:
        from_attributes = True


class QuizForUserOut(QuizOut):
    questions: List[QuestionForUserOut] = []


class ImportQuestionsOut(BaseModel):
    quiz_id: UUID
    imported: int
    skipped: int
