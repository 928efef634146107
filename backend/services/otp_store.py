"""Short-lived, single-use passcodes for proving email ownership."""

import hashlib
import logging
import secrets
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import OTP_EXPIRE_MINUTES, OTP_LENGTH
from models.otp import OtpCode
from models.user import utcnow
from services.errors import ConflictError, InvalidOtpError, OtpExpiredError


logger = logging.getLogger(__name__)


def hash_code(code: str) -> str:
    """Codes are stored as SHA-256 digests, never in plain text."""
    return hashlib.sha256(code.encode()).hexdigest()


def generate_code(length: int = OTP_LENGTH) -> str:
    """Uniformly random numeric code, zero-padded to ``length`` digits."""
    return f"{secrets.randbelow(10 ** length):0{length}d}"


class OtpStore:
    """Issues and consumes one-time passcodes keyed by email."""

    def __init__(self, db: Session, ttl: timedelta = timedelta(minutes=OTP_EXPIRE_MINUTES)):
        self.db = db
        self.ttl = ttl

    def issue(self, email: str) -> str:
        """
        Create a new code for ``email`` and return it for out-of-band delivery.

        Any earlier code for the email is removed in the same transaction, so
        only the newest code can ever verify.
        """
        code = generate_code()

        self.db.query(OtpCode).filter(OtpCode.email == email).delete(
            synchronize_session=False
        )
        self.db.add(
            OtpCode(
                email=email,
                code_hash=hash_code(code),
                expires_at=utcnow() + self.ttl,
                used=False,
            )
        )
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent request replaced the row between our delete and insert
            self.db.rollback()
            raise ConflictError("A code was just issued for this email. Please try again")

        return code

    def verify(self, email: str, code: str) -> None:
        """
        Consume the code issued to ``email``.

        Raises:
            InvalidOtpError: no unused code matches (wrong, reused or never issued).
            OtpExpiredError: the code matches but is past its expiry.
        """
        record = (
            self.db.query(OtpCode)
            .filter(
                OtpCode.email == email,
                OtpCode.code_hash == hash_code(code),
                OtpCode.used.is_(False),
            )
            .first()
        )
        if record is None:
            logger.warning("OTP verification failed: no matching unused code")
            raise InvalidOtpError()

        if utcnow() > record.expires_at:
            logger.warning("OTP verification failed: code expired")
            raise OtpExpiredError()

        # Conditional update: only one concurrent verify can flip the flag
        updated = (
            self.db.query(OtpCode)
            .filter(OtpCode.id == record.id, OtpCode.used.is_(False))
            .update({OtpCode.used: True}, synchronize_session=False)
        )
        if updated != 1:
            self.db.rollback()
            raise InvalidOtpError()

        self.db.commit()
