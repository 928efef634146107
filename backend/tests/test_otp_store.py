"""Tests for one-time passcode issue and consumption."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.orm import Session

from models.otp import OtpCode
from models.user import utcnow
from services.errors import InvalidOtpError, OtpExpiredError
from services.otp_store import OtpStore, generate_code, hash_code

EMAIL = "otp@example.com"


class TestGenerateCode:
    def test_six_digits(self):
        """Generated codes are six digits."""
        code = generate_code()
        assert len(code) == 6
        assert code.isdigit()

    @patch("services.otp_store.secrets.randbelow", return_value=42)
    def test_zero_padded(self, mock_randbelow):
        """Small random values are zero padded."""
        assert generate_code() == "000042"
        mock_randbelow.assert_called_once_with(1_000_000)


@pytest.mark.integration
class TestIssue:
    def test_stores_hashed_code_with_expiry(self, db_session: Session):
        """Only the code hash is stored, with a five minute expiry."""
        code = OtpStore(db_session).issue(EMAIL)

        record = db_session.query(OtpCode).filter(OtpCode.email == EMAIL).one()
        assert record.code_hash == hash_code(code)
        assert record.code_hash != code
        assert record.used is False
        assert utcnow() < record.expires_at <= utcnow() + timedelta(minutes=5)

    @patch("services.otp_store.generate_code", side_effect=["111111", "222222"])
    def test_second_issue_invalidates_first(self, mock_generate, db_session: Session):
        """Issuing again replaces the earlier code."""
        store = OtpStore(db_session)
        store.issue(EMAIL)
        store.issue(EMAIL)

        assert db_session.query(OtpCode).filter(OtpCode.email == EMAIL).count() == 1

        with pytest.raises(InvalidOtpError):
            store.verify(EMAIL, "111111")
        store.verify(EMAIL, "222222")

    def test_codes_are_per_email(self, db_session: Session):
        """Codes for different emails coexist."""
        store = OtpStore(db_session)
        store.issue(EMAIL)
        store.issue("other@example.com")

        assert db_session.query(OtpCode).count() == 2


@pytest.mark.integration
class TestVerify:
    def test_success_marks_used(self, db_session: Session):
        """A verified code is marked used."""
        store = OtpStore(db_session)
        code = store.issue(EMAIL)

        store.verify(EMAIL, code)

        record = db_session.query(OtpCode).filter(OtpCode.email == EMAIL).one()
        db_session.refresh(record)
        assert record.used is True

    def test_same_code_twice_is_invalid(self, db_session: Session):
        """A used code is invalid on the second attempt."""
        store = OtpStore(db_session)
        code = store.issue(EMAIL)

        store.verify(EMAIL, code)
        with pytest.raises(InvalidOtpError):
            store.verify(EMAIL, code)

    def test_wrong_code(self, db_session: Session):
        """A wrong code is invalid."""
        store = OtpStore(db_session)
        code = store.issue(EMAIL)
        wrong = "000000" if code != "000000" else "111111"

        with pytest.raises(InvalidOtpError):
            store.verify(EMAIL, wrong)

    def test_never_issued(self, db_session: Session):
        """Verifying with no issued code is invalid."""
        with pytest.raises(InvalidOtpError):
            OtpStore(db_session).verify(EMAIL, "123456")

    def test_code_for_other_email(self, db_session: Session):
        """A code only works for the email it was issued to."""
        store = OtpStore(db_session)
        code = store.issue(EMAIL)

        with pytest.raises(InvalidOtpError):
            store.verify("other@example.com", code)

    def test_expired_code_reports_expired_not_invalid(self, db_session: Session):
        """A matching but stale code reports expired."""
        db_session.add(
            OtpCode(
                email=EMAIL,
                code_hash=hash_code("123456"),
                expires_at=utcnow() - timedelta(seconds=1),
                used=False,
            )
        )
        db_session.commit()

        with pytest.raises(OtpExpiredError):
            OtpStore(db_session).verify(EMAIL, "123456")

    def test_expired_code_is_not_consumed(self, db_session: Session):
        """Expired codes are left unused."""
        store = OtpStore(db_session, ttl=timedelta(seconds=-1))
        code = store.issue(EMAIL)

        with pytest.raises(OtpExpiredError):
            store.verify(EMAIL, code)

        record = db_session.query(OtpCode).filter(OtpCode.email == EMAIL).one()
        assert record.used is False

    def test_used_code_is_invalid_even_when_unexpired(self, db_session: Session):
        """Used codes are invalid before they expire."""
        db_session.add(
            OtpCode(
                email=EMAIL,
                code_hash=hash_code("654321"),
                expires_at=utcnow() + timedelta(minutes=5),
                used=True,
            )
        )
        db_session.commit()

        with pytest.raises(InvalidOtpError):
            OtpStore(db_session).verify(EMAIL, "654321")
