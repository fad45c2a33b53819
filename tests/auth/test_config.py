"""Tests for AuthConfig bounds and defaults."""

import pytest
from pydantic import ValidationError

from auth.config import AuthConfig


class TestDefaults:
    def test_defaults(self):
        config = AuthConfig()

        assert config.auth_code_expiry_minutes == 1
        assert config.failed_attempt_delay_seconds == 0.5
        assert config.auth_fail_threshold == 10
        assert config.login_thread_title == "Message Bot Login"
        assert config.compliance_thread_title == "Compliance Alerts"


class TestBounds:
    """Out-of-range values are rejected at construction."""

    def test_expiry_upper_bound(self):
        with pytest.raises(ValidationError):
            AuthConfig(auth_code_expiry_minutes=11)

    def test_expiry_lower_bound(self):
        with pytest.raises(ValidationError):
            AuthConfig(auth_code_expiry_minutes=0)

    def test_negative_delay(self):
        with pytest.raises(ValidationError):
            AuthConfig(failed_attempt_delay_seconds=-1)

    def test_threshold_at_least_one(self):
        with pytest.raises(ValidationError):
            AuthConfig(auth_fail_threshold=0)

    def test_session_expiry_bound(self):
        with pytest.raises(ValidationError):
            AuthConfig(session_expiry_hours=721)
