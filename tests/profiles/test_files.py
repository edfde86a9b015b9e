import pytest
from pathlib import Path
from sts_profile_auth.profiles.files import (
    get_aws_config_path,
    get_aws_credentials_path,
    get_current_profile,
    read_profile_file,
)


def test_default_paths_are_under_home(monkeypatch, tmp_path):
    """Test fallback to ~/.aws when no override is set."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)

    assert get_aws_config_path({}) == tmp_path / ".aws" / "config"
    assert get_aws_credentials_path({}) == tmp_path / ".aws" / "credentials"


def test_environment_overrides():
    """Test AWS_CONFIG_FILE and AWS_SHARED_CREDENTIALS_FILE."""
    env = {
        "AWS_CONFIG_FILE": "/etc/aws/config",
        "AWS_SHARED_CREDENTIALS_FILE": "/etc/aws/credentials",
    }

    assert get_aws_config_path(env) == Path("/etc/aws/config")
    assert get_aws_credentials_path(env) == Path("/etc/aws/credentials")


def test_overrides_read_from_os_environ(monkeypatch):
    monkeypatch.setenv("AWS_CONFIG_FILE", "/tmp/aws-config")

    assert get_aws_config_path() == Path("/tmp/aws-config")


def test_missing_file_reads_as_empty(tmp_path):
    """Test that a missing file is not an error."""
    assert read_profile_file(tmp_path / "nope") == ""


def test_read_existing_file(tmp_path):
    path = tmp_path / "credentials"
    path.write_text("[default]\nregion = us-east-1\n")

    assert read_profile_file(path) == "[default]\nregion = us-east-1\n"


@pytest.mark.parametrize("env, expected", [
    ({"AWS_PROFILE": "dev"}, "dev"),
    ({"AWS_DEFAULT_PROFILE": "ops"}, "ops"),
    ({"AWS_PROFILE": "dev", "AWS_DEFAULT_PROFILE": "ops"}, "dev"),
    ({}, None),
])
def test_get_current_profile(env, expected):
    """Test profile selection from the environment."""
    assert get_current_profile(env) == expected
