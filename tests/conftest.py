"""
Shared test fixtures and configuration.
"""

import pytest
import os
import sys
from datetime import datetime, timedelta, timezone

# Add the parent directory to the path so we can import the sts_profile_auth package
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sts_profile_auth.auth import ProfileConfig
from sts_profile_auth.credentials.chain import ResolvedCredentials


class FakeAssumeRole:
    """Records token exchange calls and hands out numbered temporary credentials."""

    def __init__(self, fail_on_call=None):
        self.calls = []
        self.fail_on_call = fail_on_call

    def __call__(self, credentials, role_arn, session_name, region, duration_seconds):
        self.calls.append({
            "credentials": credentials,
            "role_arn": role_arn,
            "session_name": session_name,
            "region": region,
            "duration_seconds": duration_seconds,
        })
        n = len(self.calls)
        if self.fail_on_call == n:
            raise RuntimeError("AccessDenied")
        return ResolvedCredentials(
            access_key_id=f"ASIATEMP{n}",
            secret_access_key=f"secret-{n}",
            session_token=f"token-{n}",
            expiration=datetime.now(timezone.utc) + timedelta(hours=1),
        )


@pytest.fixture
def fake_assume():
    """Fixture providing a recording token exchange."""
    return FakeAssumeRole()


@pytest.fixture
def failing_assume():
    """Fixture providing a token exchange that fails on the given call number."""
    return lambda call_number: FakeAssumeRole(fail_on_call=call_number)


@pytest.fixture
def make_config(tmp_path, fake_assume):
    """Fixture writing config/credentials files and returning a ProfileConfig for them."""
    def _make(config_text="", credentials_text="", **kwargs):
        config_path = tmp_path / "config"
        credentials_path = tmp_path / "credentials"
        config_path.write_text(config_text)
        credentials_path.write_text(credentials_text)
        kwargs.setdefault("assume_fn", fake_assume)
        kwargs.setdefault("default_provider", None)
        return ProfileConfig(config_path, credentials_path, **kwargs)

    return _make
