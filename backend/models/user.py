import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, Integer, String

from database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo so all stored times are naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        String(32),
        unique=True,
        index=True,
        nullable=False,
        default=lambda: uuid.uuid4().hex,
    )
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String(24), nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(
        Enum(Role, name="user_role", native_enum=False, length=16),
        default=Role.USER,
        nullable=False,
    )
    token_version = Column(Integer, default=1, nullable=False)
    password_changed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
