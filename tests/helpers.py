from datetime import timedelta

from app.core.clock import utcnow
from app.core.security import create_access_token


def auth_headers(user):
    token = create_access_token({"sub": str(user.id)}, expires_delta=timedelta(minutes=5))
    return {"Authorization": f"Bearer {token}"}


def minutes_ago(minutes):
    return utcnow() - timedelta(minutes=minutes)


def answer_key(quiz):
    """Map question id -> (correct option, wrong option)."""
    key = {}
    for question in quiz.questions:
        correct = next(o for o in question.options if o.is_correct)
        wrong = next(o for o in question.options if not o.is_correct)
        key[question.id] = (correct, wrong)
    return key
