"""Tests for password hashing, request schemas, the email service and config checks."""

import importlib
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from schemas.auth import ResetPasswordRequest, SignupRequest, VerifyOtpRequest
from services.auth import hash_password, verify_password
from services.email_service import EmailService


class TestPasswordHashing:
    """Test bcrypt hashing helpers."""

    def test_hash_is_bcrypt_and_salted(self):
        """Hashes are bcrypt and differ per call."""
        first = hash_password("SomePass123")
        second = hash_password("SomePass123")

        assert first.startswith("$2b$")
        assert len(first) == 60
        assert first != second

    def test_verify_correct_password(self):
        """The right password verifies."""
        hashed = hash_password("SomePass123")
        assert verify_password("SomePass123", hashed) is True

    def test_verify_wrong_password_returns_false(self):
        """A wrong password does not verify."""
        hashed = hash_password("SomePass123")
        assert verify_password("OtherPass123", hashed) is False

    def test_verify_malformed_hash_returns_false(self):
        """A malformed stored hash does not raise."""
        assert verify_password("SomePass123", "not-a-bcrypt-hash") is False

    def test_cost_factor_is_applied(self):
        """The rounds argument sets the bcrypt cost."""
        assert hash_password("SomePass123", rounds=5).startswith("$2b$05$")

    def test_long_password_is_accepted(self):
        """Passwords beyond bcrypt's 72 byte window still hash and verify."""
        password = "p" * 100
        hashed = hash_password(password)
        assert verify_password(password, hashed)


class TestSchemas:
    """Test request schema constraints."""

    def test_signup_valid(self):
        """A valid signup payload parses the role."""
        request = SignupRequest(
            username="alice",
            email="alice@example.com",
            password="secret1",
            role="ADMIN",
        )
        assert request.role.value == "ADMIN"

    @pytest.mark.parametrize(
        "field, value",
        [
            ("username", "a" * 25),
            ("email", "alice"),
            ("password", "short"),
            ("role", "ROOT"),
        ],
    )
    def test_signup_invalid(self, field, value):
        """Each field constraint is enforced."""
        payload = {
            "username": "alice",
            "email": "alice@example.com",
            "password": "secret1",
            "role": "USER",
        }
        payload[field] = value

        with pytest.raises(ValidationError) as exc_info:
            SignupRequest(**payload)
        assert field in str(exc_info.value)

    def test_signup_username_at_limit(self):
        """A 24 character username is accepted."""
        request = SignupRequest(
            username="a" * 24, email="alice@example.com", password="secret1", role="USER"
        )
        assert len(request.username) == 24

    def test_reset_password_weak_password_rejected(self):
        """Reset rejects passwords under 6 characters."""
        with pytest.raises(ValidationError) as exc_info:
            ResetPasswordRequest(email="alice@example.com", new_password="weak")
        assert "at least 6 characters" in str(exc_info.value)

    def test_verify_otp_requires_six_digits(self):
        """OTP codes must be six digits."""
        assert VerifyOtpRequest(email="alice@example.com", otp="012345").otp == "012345"
        with pytest.raises(ValidationError):
            VerifyOtpRequest(email="alice@example.com", otp="12a456")


class TestEmailService:
    """Test EmailService for passcode emails."""

    @patch("services.email_service.SendGridAPIClient")
    def test_send_otp_success(self, mock_sendgrid_class):
        """Verify passcode email is sent via SendGrid."""
        mock_client = MagicMock()
        mock_sendgrid_class.return_value = mock_client
        mock_client.send.return_value = MagicMock(status_code=202)

        service = EmailService(api_key="SG.test", from_email="noreply@example.com", timeout=30)
        result = service.send_otp(to_email="user@example.com", code="123456")

        assert result is True
        mock_sendgrid_class.assert_called_once_with("SG.test")
        mock_client.send.assert_called_once()
        assert mock_client.client.timeout == 30

    @patch("services.email_service.SendGridAPIClient")
    def test_send_otp_failure_returns_false(self, mock_sendgrid_class):
        """Verify failed email send returns False."""
        mock_client = MagicMock()
        mock_sendgrid_class.return_value = mock_client
        mock_client.send.side_effect = Exception("SendGrid error")

        service = EmailService(api_key="SG.test", from_email="noreply@example.com")
        result = service.send_otp(to_email="user@example.com", code="123456")

        assert result is False

    def test_email_contains_code(self):
        """The email body includes the code."""
        service = EmailService(api_key="SG.test", from_email="noreply@example.com")
        html = service._build_otp_email_html(code="987654")

        assert "987654" in html
        assert "Reset Your Password" in html

    def test_missing_settings(self):
        """Missing sender settings are listed by name."""
        assert EmailService(api_key=None, from_email=None).missing_settings() == [
            "sender email",
            "SendGrid API key",
        ]
        assert EmailService(api_key="SG.test", from_email="a@example.com").missing_settings() == []


class TestValidateConfig:
    """Test production configuration checks."""

    @pytest.fixture
    def reload_config(self, monkeypatch):
        import config

        def _reload(**env):
            for key, value in env.items():
                monkeypatch.setenv(key, value)
            return importlib.reload(config)

        yield _reload
        monkeypatch.undo()
        importlib.reload(config)

    def test_development_is_lenient(self, reload_config):
        """Development accepts the default settings."""
        config = reload_config(ENV="development")
        config.validate_config()

    def test_production_requires_settings(self, reload_config, monkeypatch):
        """Production lists every missing or weak setting."""
        monkeypatch.delenv("SENDGRID_API_KEY", raising=False)
        config = reload_config(
            ENV="production",
            SECRET_KEY="dev-secret-key-change-in-production-abc123xyz789",
            BCRYPT_ROUNDS="4",
        )

        with pytest.raises(RuntimeError) as exc_info:
            config.validate_config()

        message = str(exc_info.value)
        assert "SECRET_KEY" in message
        assert "SENDGRID_API_KEY" in message
        assert "BCRYPT_ROUNDS" in message

    def test_production_with_valid_settings(self, reload_config):
        """Production accepts a complete configuration."""
        config = reload_config(
            ENV="production",
            SECRET_KEY="a-real-secret",
            SENDGRID_API_KEY="SG.key",
            SENDGRID_FROM_EMAIL="noreply@example.com",
            BCRYPT_ROUNDS="12",
            COOKIE_SECURE="true",
        )
        config.validate_config()
