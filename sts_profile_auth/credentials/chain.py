"""
Credential Chain Builder

Turns a ResolutionPlan into temporary credentials by performing each role
assumption in order, feeding the credentials obtained at one hop into the
next. The token exchange itself and the ambient credential lookup are
injected so the chain can run without network access.
"""

import logging
import re
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from ..errors import (
    AssumeRoleFailed,
    ExpiredOrInvalidSession,
    MissingCredentials,
    ResolutionCancelled,
)
from ..profiles.config_parser import (
    ACCESS_KEY_ID,
    SECRET_ACCESS_KEY,
    SESSION_TOKEN,
    ProfileTable,
)
from ..profiles.resolver import AssumptionStep, ResolutionPlan

logger = logging.getLogger(__name__)

SESSION_NAME_SUFFIX = "sts-profile-auth"
MAX_SESSION_NAME_LENGTH = 64


@dataclass(frozen=True)
class ResolvedCredentials:
    """An access key pair, plus a session token and expiry for temporary credentials."""

    access_key_id: str
    secret_access_key: str
    session_token: Optional[str] = None
    expiration: Optional[datetime] = None

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return (
            f"ResolvedCredentials(access_key_id={self.access_key_id[:4]}..., "
            f"expiration={self.expiration})"
        )

    @property
    def is_temporary(self) -> bool:
        return self.session_token is not None


# (credentials, role_arn, session_name, region, duration_seconds) -> credentials
AssumeRoleFn = Callable[
    [ResolvedCredentials, str, str, Optional[str], Optional[int]], ResolvedCredentials
]
DefaultCredentialsProvider = Callable[[], Optional[ResolvedCredentials]]


def session_name_for(profile: str) -> str:
    """
    Build the RoleSessionName used when assuming roles for a profile.

    The name is deterministic so sessions can be traced back to the profile
    in CloudTrail.
    """
    name = re.sub(r"[^A-Za-z0-9+=,.@_-]", "-", f"{profile}-{SESSION_NAME_SUFFIX}")
    return name[:MAX_SESSION_NAME_LENGTH]


def static_credentials(table: ProfileTable, profile: str) -> Optional[ResolvedCredentials]:
    """
    Read the static keys of a profile.

    Returns:
        Optional[ResolvedCredentials]: The keys, or None if the profile has none

    Raises:
        MissingCredentials: If only one half of the key pair is defined
    """
    settings = table.get(profile)
    access_key = settings.get(ACCESS_KEY_ID)
    secret_key = settings.get(SECRET_ACCESS_KEY)
    if not access_key and not secret_key:
        return None
    if not (access_key and secret_key):
        missing = SECRET_ACCESS_KEY if access_key else ACCESS_KEY_ID
        raise MissingCredentials(f"Profile '{profile}' is missing {missing}", profile=profile)
    return ResolvedCredentials(access_key, secret_key, settings.get(SESSION_TOKEN))


def _validate(credentials: Optional[ResolvedCredentials], step: AssumptionStep, hop: int) -> ResolvedCredentials:
    if credentials is None or not credentials.access_key_id or not credentials.secret_access_key:
        raise ExpiredOrInvalidSession(
            f"Assuming {step.role_arn} for profile '{step.profile}' returned no usable credentials",
            profile=step.profile,
            hop=hop,
        )

    expiration = credentials.expiration
    if expiration is not None:
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        if expiration <= datetime.now(timezone.utc):
            raise ExpiredOrInvalidSession(
                f"Credentials for profile '{step.profile}' expired at {expiration.isoformat()}",
                profile=step.profile,
                hop=hop,
            )
    return credentials


def build(
    table: ProfileTable,
    plan: ResolutionPlan,
    assume_fn: AssumeRoleFn,
    default_provider: Optional[DefaultCredentialsProvider] = None,
    region: Optional[str] = None,
    duration_seconds: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ResolvedCredentials:
    """
    Produce the final credentials for a resolution plan.

    Args:
        table: Parsed profiles
        plan: Plan returned by resolve_plan
        assume_fn: Performs one security token exchange
        default_provider: Supplies ambient credentials when the base profile
            has no static keys
        region: Region passed to the token exchange (defaults to plan.region)
        duration_seconds: Session duration for hops whose profile sets none
        cancel_event: When set, resolution stops before the next hop

    Returns:
        ResolvedCredentials: Credentials for the target profile

    Raises:
        MissingCredentials: If the base profile yields no credentials
        AssumeRoleFailed: If any token exchange raises
        ExpiredOrInvalidSession: If a token exchange returns unusable credentials
        ResolutionCancelled: If `cancel_event` is set between hops
    """
    credentials = static_credentials(table, plan.base_profile)
    if credentials is None:
        if default_provider is not None:
            logger.info(f"Profile '{plan.base_profile}' has no static keys, using ambient credentials")
            credentials = default_provider()
        if credentials is None:
            raise MissingCredentials(
                f"Profile '{plan.base_profile}' has no static keys and no ambient credentials were found",
                profile=plan.base_profile,
            )

    region = region or plan.region
    session_name = session_name_for(plan.target)
    total = len(plan.steps)

    for hop, step in enumerate(plan.steps):
        if cancel_event is not None and cancel_event.is_set():
            raise ResolutionCancelled(
                f"Resolution of profile '{plan.target}' cancelled before hop {hop + 1} of {total}",
                profile=plan.target,
                hop=hop,
            )

        logger.info(
            f"Assuming {step.role_arn} for profile '{step.profile}' "
            f"using '{step.source_profile}' (hop {hop + 1} of {total})"
        )
        try:
            result = assume_fn(
                credentials,
                step.role_arn,
                session_name,
                region,
                step.duration_seconds or duration_seconds,
            )
        except Exception as e:
            raise AssumeRoleFailed(step.profile, step.role_arn, hop, e) from e

        credentials = _validate(result, step, hop)

    return credentials
