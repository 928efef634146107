"""One-time passcode model for the password reset flow."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from database import Base
from models.user import utcnow


class OtpCode(Base):
    """Stores the hashed, single active passcode issued to an email."""

    __tablename__ = "otp_codes"

    id = Column(Integer, primary_key=True, index=True)
    # One row per email: issuing a new code replaces the previous row.
    email = Column(String, unique=True, index=True, nullable=False)
    code_hash = Column(String(64), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
