import threading
import pytest
from datetime import datetime, timedelta, timezone
from sts_profile_auth.errors import (
    AssumeRoleFailed,
    ExpiredOrInvalidSession,
    MissingCredentials,
    ResolutionCancelled,
)
from sts_profile_auth.credentials.chain import (
    build,
    session_name_for,
    static_credentials,
    ResolvedCredentials,
)
from sts_profile_auth.profiles.config_parser import ProfileTable
from sts_profile_auth.profiles.resolver import resolve_plan

KEYS = {"aws_access_key_id": "AKIABASE", "aws_secret_access_key": "base-secret"}


def role(name):
    return f"arn:aws:iam::123456789012:role/{name}"


@pytest.fixture
def three_hop_table():
    """A -> B -> C -> base, three role assumptions."""
    return ProfileTable({
        "A": {"role_arn": role("a"), "source_profile": "B"},
        "B": {"role_arn": role("b"), "source_profile": "C"},
        "C": {"role_arn": role("c"), "source_profile": "base"},
        "base": dict(KEYS),
    })


def test_static_profile_returns_keys_unchanged(fake_assume):
    """Test the identity case."""
    table = ProfileTable({"default": dict(KEYS, aws_session_token="tok")})

    credentials = build(table, resolve_plan(table, "default"), fake_assume)

    assert credentials == ResolvedCredentials("AKIABASE", "base-secret", "tok")
    assert fake_assume.calls == []


def test_each_hop_uses_previous_credentials(three_hop_table, fake_assume):
    """Test that hops run innermost first and feed each other."""
    plan = resolve_plan(three_hop_table, "A")

    credentials = build(three_hop_table, plan, fake_assume, region="eu-west-1")

    assert [call["role_arn"] for call in fake_assume.calls] == [role("c"), role("b"), role("a")]
    assert fake_assume.calls[0]["credentials"].access_key_id == "AKIABASE"
    assert fake_assume.calls[1]["credentials"].access_key_id == "ASIATEMP1"
    assert fake_assume.calls[2]["credentials"].access_key_id == "ASIATEMP2"
    assert credentials.access_key_id == "ASIATEMP3"
    assert all(call["region"] == "eu-west-1" for call in fake_assume.calls)


def test_session_name_derives_from_target(three_hop_table, fake_assume):
    """Test that every hop uses the target profile's session name."""
    build(three_hop_table, resolve_plan(three_hop_table, "A"), fake_assume)

    assert {call["session_name"] for call in fake_assume.calls} == {"A-sts-profile-auth"}


def test_region_defaults_to_plan_region(fake_assume):
    table = ProfileTable({"ops": dict(KEYS, role_arn=role("ops"), region="ap-south-1")})

    build(table, resolve_plan(table, "ops"), fake_assume)

    assert fake_assume.calls[0]["region"] == "ap-south-1"


def test_failure_on_second_hop_stops_the_chain(three_hop_table, failing_assume):
    """Test fail-fast: the third hop never runs and nothing is returned."""
    assume = failing_assume(2)

    with pytest.raises(AssumeRoleFailed) as exc_info:
        build(three_hop_table, resolve_plan(three_hop_table, "A"), assume)

    assert len(assume.calls) == 2
    assert exc_info.value.hop == 1
    assert exc_info.value.profile == "B"
    assert exc_info.value.role_arn == role("b")
    assert isinstance(exc_info.value.cause, RuntimeError)
    assert exc_info.value.__cause__ is exc_info.value.cause


def test_ambient_credentials_used_without_static_keys(fake_assume):
    """Test the default provider fallback at the base."""
    table = ProfileTable({"ci": {"role_arn": role("ci")}})
    ambient = ResolvedCredentials("AKIAENV", "env-secret")

    build(table, resolve_plan(table, "ci"), fake_assume, default_provider=lambda: ambient)

    assert fake_assume.calls[0]["credentials"] == ambient


def test_missing_credentials_without_provider(fake_assume):
    table = ProfileTable({"ci": {"role_arn": role("ci")}})

    with pytest.raises(MissingCredentials) as exc_info:
        build(table, resolve_plan(table, "ci"), fake_assume)

    assert exc_info.value.profile == "ci"
    assert fake_assume.calls == []


def test_missing_credentials_when_provider_finds_nothing(fake_assume):
    table = ProfileTable({"ci": {}})

    with pytest.raises(MissingCredentials):
        build(table, resolve_plan(table, "ci"), fake_assume, default_provider=lambda: None)


def test_half_a_key_pair_is_missing_credentials():
    """Test a profile with an access key id but no secret."""
    table = ProfileTable({"dev": {"aws_access_key_id": "AKIA"}})

    with pytest.raises(MissingCredentials) as exc_info:
        static_credentials(table, "dev")

    assert "aws_secret_access_key" in str(exc_info.value)


@pytest.mark.parametrize("returned", [
    None,
    ResolvedCredentials("", "secret", "token"),
    ResolvedCredentials("ASIA", "", "token"),
    ResolvedCredentials("ASIA", "secret", "token", datetime.now(timezone.utc) - timedelta(minutes=5)),
    ResolvedCredentials("ASIA", "secret", "token", (datetime.now(timezone.utc) - timedelta(minutes=5)).replace(tzinfo=None)),
])
def test_unusable_exchange_result(returned):
    """Test empty keys and already expired credentials."""
    table = ProfileTable({"ops": dict(KEYS, role_arn=role("ops"))})

    with pytest.raises(ExpiredOrInvalidSession) as exc_info:
        build(table, resolve_plan(table, "ops"), lambda *args: returned)

    assert exc_info.value.hop == 0


def test_duration_precedence(fake_assume):
    """Test that a profile's duration_seconds beats the builder default."""
    table = ProfileTable({
        "A": {"role_arn": role("a"), "source_profile": "B", "duration_seconds": "900"},
        "B": dict(KEYS, role_arn=role("b")),
    })

    build(table, resolve_plan(table, "A"), fake_assume, duration_seconds=3600)

    assert [call["duration_seconds"] for call in fake_assume.calls] == [3600, 900]


def test_cancel_before_first_hop(three_hop_table, fake_assume):
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(ResolutionCancelled):
        build(three_hop_table, resolve_plan(three_hop_table, "A"), fake_assume, cancel_event=cancel)

    assert fake_assume.calls == []


def test_cancel_between_hops(three_hop_table, fake_assume):
    """Test that setting the event mid-chain stops before the next hop."""
    cancel = threading.Event()
    inner = fake_assume

    def assume(*args):
        result = inner(*args)
        cancel.set()
        return result

    with pytest.raises(ResolutionCancelled) as exc_info:
        build(three_hop_table, resolve_plan(three_hop_table, "A"), assume, cancel_event=cancel)

    assert len(inner.calls) == 1
    assert exc_info.value.hop == 1


@pytest.mark.parametrize("profile, expected", [
    ("dev", "dev-sts-profile-auth"),
    ("team/dev:admin", "team-dev-admin-sts-profile-auth"),
    ("x" * 80, "x" * 64),
])
def test_session_name_for(profile, expected):
    """Test that session names fit the STS RoleSessionName rules."""
    assert session_name_for(profile) == expected


def test_repr_hides_secrets():
    credentials = ResolvedCredentials("AKIAEXAMPLE", "very-secret", "token")

    assert "very-secret" not in repr(credentials)
    assert "token" not in repr(credentials)
