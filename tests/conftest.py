import os

os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.database import Base, get_db  # noqa: E402
from app.models.batch_db.batch_db import Batch, Meeting  # noqa: E402
from app.models.purchase_db.purchase_db import PaymentStatus, Purchase  # noqa: E402
from app.models.quiz_db.quiz_db import Quiz, QuizType  # noqa: E402
from app.models.quiz_db.quiz_option_db import QuizOption  # noqa: E402
from app.models.quiz_db.quiz_question_db import QuizQuestion  # noqa: E402
from app.models.user_db.user_db import RoleType, User  # noqa: E402
from main import app  # noqa: E402

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _user(db, name, role):
    user = User(name=name, email=f"{name.lower()}@brevet.test", role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db):
    return _user(db, "Admin", RoleType.admin)


@pytest.fixture
def teacher(db):
    return _user(db, "Teacher", RoleType.teacher)


@pytest.fixture
def other_teacher(db):
    return _user(db, "Stranger", RoleType.teacher)


@pytest.fixture
def student(db):
    return _user(db, "Student", RoleType.student)


@pytest.fixture
def classmate(db):
    return _user(db, "Classmate", RoleType.student)


@pytest.fixture
def outsider(db):
    # student without a paid purchase
    return _user(db, "Outsider", RoleType.student)


@pytest.fixture
def batch(db):
    batch = Batch(slug="brevet-ab-01", title="Brevet AB 01")
    db.add(batch)
    db.commit()
    db.refresh(batch)
    return batch


@pytest.fixture
def meeting(db, batch, teacher, student, classmate):
    meeting = Meeting(batch_id=batch.id, title="Meeting 1")
    meeting.teachers.append(teacher)
    db.add(meeting)
    for buyer in (student, classmate):
        db.add(Purchase(user_id=buyer.id, batch_id=batch.id, payment_status=PaymentStatus.paid))
    db.commit()
    db.refresh(meeting)
    return meeting


@pytest.fixture
def make_quiz(db, meeting):
    """Build a quiz with questions; each question is (text, [options], correct index)."""

    def _make(questions=None, **fields):
        if questions is None:
            questions = [
                ("2 + 2 = ?", ["3", "4"], 1),
                ("Capital of France?", ["Paris", "Rome"], 0),
                ("Water boils at 100C at sea level", ["True", "False"], 0),
            ]
        values = dict(
            meeting_id=meeting.id,
            title="Weekly quiz",
            type=QuizType.mc,
            is_open=True,
            duration_minute=30,
            max_attempts=1,
        )
        values.update(fields)
        quiz = Quiz(**values)
        db.add(quiz)
        db.flush()

        for position, (text, options, correct) in enumerate(questions):
            question = QuizQuestion(quiz_id=quiz.id, question=text, position=position)
            db.add(question)
            db.flush()
            for index, option_text in enumerate(options):
                db.add(QuizOption(
                    question_id=question.id,
                    option_text=option_text,
                    is_correct=index == correct,
                    position=index,
                ))
        db.commit()
        db.refresh(quiz)
        return quiz

    return _make


@pytest.fixture
def quiz(make_quiz):
    return make_quiz()
