from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session, selectinload

from app.models.quiz_db.quiz_attempt_db import QuizAttempt
from app.models.quiz_db.quiz_db import Quiz
from app.models.quiz_db.quiz_option_db import QuizOption
from app.models.quiz_db.quiz_question_db import QuizQuestion
from app.models.quiz_db.quiz_result_db import QuizResult
from app.models.quiz_db.quiz_submission_db import QuizSubmission
from app.models.quiz_db.quiz_temp_submission_db import QuizTempSubmission


SORTABLE_QUIZ_COLUMNS = {
    "title", "type", "is_open", "start_time", "end_time",
    "duration_minute", "max_attempts", "created_at", "updated_at",
}


class QuizRepository:
    """
    Quiz persistence bound to one Session.

    Services open a unit of work with ``transaction(db)`` and hand the same
    session to the repository, so every read and write of one operation
    runs in one database transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    # quizzes

    def get_quiz_by_id(self, quiz_id: UUID) -> Optional[Quiz]:
        return self.db.query(Quiz).filter(Quiz.id == quiz_id).first()

    def get_quiz_with_questions(self, quiz_id: UUID) -> Optional[Quiz]:
        return (
            self.db.query(Quiz)
            .options(selectinload(Quiz.questions).selectinload(QuizQuestion.options))
            .filter(Quiz.id == quiz_id)
            .first()
        )

    def list_quizzes_by_meeting(
        self,
        meeting_id: UUID,
        skip: int = 0,
        limit: int = 10,
        sort: str = "created_at",
        order: str = "asc",
        search: Optional[str] = None,
        filters: Optional[Dict[str, object]] = None,
    ) -> Tuple[List[Quiz], int]:
        query = self.db.query(Quiz).filter(Quiz.meeting_id == meeting_id)

        if search:
            query = query.filter(Quiz.title.ilike(f"%{search}%"))
        for column, value in (filters or {}).items():
            if value is not None:
                query = query.filter(getattr(Quiz, column) == value)

        if sort not in SORTABLE_QUIZ_COLUMNS:
            sort = "created_at"
        direction = desc if order == "desc" else asc

        total = query.count()
        quizzes = (
            query.order_by(direction(getattr(Quiz, sort)), Quiz.id)
            .offset(skip)
            .limit(limit)
            .all()
        )
        return quizzes, total

    def create_quiz(self, quiz: Quiz) -> Quiz:
        self.db.add(quiz)
        self.db.flush()
        return quiz

    def delete_quiz(self, quiz: Quiz) -> None:
        self.db.delete(quiz)
        self.db.flush()

    # questions / options

    def count_questions(self, quiz_id: UUID) -> int:
        return self.db.query(QuizQuestion).filter(QuizQuestion.quiz_id == quiz_id).count()

    def create_question(self, question: QuizQuestion) -> QuizQuestion:
        self.db.add(question)
        self.db.flush()
        return question

    def create_options(self, options: List[QuizOption]) -> None:
        if not options:
            return
        self.db.add_all(options)
        self.db.flush()

    def get_question(self, question_id: UUID, quiz_id: UUID) -> Optional[QuizQuestion]:
        return (
            self.db.query(QuizQuestion)
            .filter(QuizQuestion.id == question_id, QuizQuestion.quiz_id == quiz_id)
            .first()
        )

    def get_option(self, option_id: UUID, question_id: UUID) -> Optional[QuizOption]:
        return (
            self.db.query(QuizOption)
            .filter(QuizOption.id == option_id, QuizOption.question_id == question_id)
            .first()
        )

    # attempts

    def get_attempt_by_id(self, attempt_id: UUID, for_update: bool = False) -> Optional[QuizAttempt]:
        query = self.db.query(QuizAttempt).filter(QuizAttempt.id == attempt_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get_attempts_by_quiz_and_user(self, quiz_id: UUID, user_id: UUID) -> List[QuizAttempt]:
        return (
            self.db.query(QuizAttempt)
            .filter(QuizAttempt.quiz_id == quiz_id, QuizAttempt.user_id == user_id)
            .order_by(QuizAttempt.started_at.desc())
            .all()
        )

    def count_attempts(self, quiz_id: UUID, user_id: UUID) -> int:
        return (
            self.db.query(QuizAttempt)
            .filter(QuizAttempt.quiz_id == quiz_id, QuizAttempt.user_id == user_id)
            .count()
        )

    def get_active_attempt(self, quiz_id: UUID, user_id: UUID) -> Optional[QuizAttempt]:
        return (
            self.db.query(QuizAttempt)
            .filter(
                QuizAttempt.quiz_id == quiz_id,
                QuizAttempt.user_id == user_id,
                QuizAttempt.ended_at.is_(None),
            )
            .order_by(QuizAttempt.started_at.desc())
            .first()
        )

    def get_all_active_attempts(self) -> List[QuizAttempt]:
        return (
            self.db.query(QuizAttempt)
            .options(selectinload(QuizAttempt.quiz))
            .filter(QuizAttempt.ended_at.is_(None))
            .all()
        )

    def create_attempt(self, attempt: QuizAttempt) -> QuizAttempt:
        self.db.add(attempt)
        self.db.flush()
        return attempt

    def close_attempt(self, attempt: QuizAttempt, ended_at: datetime) -> None:
        attempt.ended_at = ended_at
        self.db.flush()

    # drafts

    def get_temp_submission(self, attempt_id: UUID, question_id: UUID) -> Optional[QuizTempSubmission]:
        return (
            self.db.query(QuizTempSubmission)
            .filter(
                QuizTempSubmission.attempt_id == attempt_id,
                QuizTempSubmission.question_id == question_id,
            )
            .first()
        )

    def get_temp_submissions(self, attempt_id: UUID) -> List[QuizTempSubmission]:
        return (
            self.db.query(QuizTempSubmission)
            .options(selectinload(QuizTempSubmission.question).selectinload(QuizQuestion.options))
            .filter(QuizTempSubmission.attempt_id == attempt_id)
            .all()
        )

    def save_temp_submission(
        self, attempt_id: UUID, question_id: UUID, selected_option_id: UUID
    ) -> QuizTempSubmission:
        existing = self.get_temp_submission(attempt_id, question_id)
        if existing:
            existing.selected_option_id = selected_option_id
            existing.revision = existing.revision + 1
            self.db.flush()
            return existing

        temp = QuizTempSubmission(
            attempt_id=attempt_id,
            question_id=question_id,
            selected_option_id=selected_option_id,
            revision=1,
        )
        self.db.add(temp)
        self.db.flush()
        return temp

    # final submissions / results

    def create_submissions(self, submissions: List[QuizSubmission]) -> None:
        self.db.add_all(submissions)
        self.db.flush()

    def get_submissions(self, attempt_id: UUID) -> List[QuizSubmission]:
        return self.db.query(QuizSubmission).filter(QuizSubmission.attempt_id == attempt_id).all()

    def create_result(self, result: QuizResult) -> QuizResult:
        self.db.add(result)
        self.db.flush()
        return result

    def get_result_by_attempt_id(self, attempt_id: UUID) -> Optional[QuizResult]:
        return self.db.query(QuizResult).filter(QuizResult.attempt_id == attempt_id).first()

    def get_results_by_attempt_ids(self, attempt_ids: List[UUID]) -> Dict[UUID, QuizResult]:
        if not attempt_ids:
            return {}
        results = self.db.query(QuizResult).filter(QuizResult.attempt_id.in_(attempt_ids)).all()
        return {r.attempt_id: r for r in results}
