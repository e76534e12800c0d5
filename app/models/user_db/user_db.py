import enum
import uuid
from sqlalchemy import Column, String, DateTime, Enum, Uuid
from app.core.clock import utcnow
from app.core.database import Base


class RoleType(str, enum.Enum):
    admin = "admin"
    teacher = "teacher"
    student = "student"


class User(Base):
    __tablename__ = "users"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        index=True
    )

    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    role = Column(Enum(RoleType, name="role_type"), nullable=False, default=RoleType.student)
    created_at = Column(DateTime, default=utcnow)
