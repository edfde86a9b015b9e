"""
Profile authentication

Entry point tying the pieces together: read both files, resolve the
profile's chain and perform the role assumptions. The ProfileConfig is owned
by the caller; nothing is cached between calls, so every `resolve` re-reads
the files and re-runs the chain.
"""

import logging
import threading
from pathlib import Path
from typing import Mapping, Optional, Tuple, Union

from .credentials.chain import (
    AssumeRoleFn,
    DefaultCredentialsProvider,
    ResolvedCredentials,
    build,
)
from .credentials.sts import ambient_credentials, assume_role_with_boto3
from .profiles.config_parser import ProfileTable, parse
from .profiles.files import (
    get_aws_config_path,
    get_aws_credentials_path,
    get_current_profile,
    read_profile_file,
)
from .profiles.resolver import MAX_CHAIN_DEPTH, ResolutionPlan, resolve_plan

logger = logging.getLogger(__name__)

__all__ = [
    'ProfileConfig',
    'resolve',
    'DEFAULT_REGION',
    'DEFAULT_PROFILE',
]

DEFAULT_REGION = "us-east-1"
DEFAULT_PROFILE = "default"


class ProfileConfig:
    """
    Where profiles are read from and how credentials are obtained.

    Construct one per process (or per test) and pass it to `resolve`.
    """

    def __init__(
        self,
        config_path: Union[str, Path],
        credentials_path: Union[str, Path],
        profile_name: str = DEFAULT_PROFILE,
        default_region: str = DEFAULT_REGION,
        max_depth: int = MAX_CHAIN_DEPTH,
        duration_seconds: Optional[int] = None,
        assume_fn: AssumeRoleFn = assume_role_with_boto3,
        default_provider: Optional[DefaultCredentialsProvider] = ambient_credentials,
    ):
        self.config_path = Path(config_path)
        self.credentials_path = Path(credentials_path)
        self.profile_name = profile_name
        self.default_region = default_region
        self.max_depth = max_depth
        self.duration_seconds = duration_seconds
        self.assume_fn = assume_fn
        self.default_provider = default_provider

    def __repr__(self) -> str:
        return (
            f"ProfileConfig(config_path={str(self.config_path)!r}, "
            f"credentials_path={str(self.credentials_path)!r}, profile_name={self.profile_name!r})"
        )

    @classmethod
    def from_environment(cls, env: Optional[Mapping[str, str]] = None, **kwargs) -> "ProfileConfig":
        """
        Build a config from AWS_CONFIG_FILE, AWS_SHARED_CREDENTIALS_FILE and AWS_PROFILE.

        Args:
            env: Environment to read, os.environ if None
            **kwargs: Overrides for any other ProfileConfig argument
        """
        kwargs.setdefault("profile_name", get_current_profile(env) or DEFAULT_PROFILE)
        return cls(get_aws_config_path(env), get_aws_credentials_path(env), **kwargs)

    def load_table(self) -> ProfileTable:
        """Read and parse both files. Missing files count as empty."""
        return parse(read_profile_file(self.config_path), read_profile_file(self.credentials_path))

    def plan(self, profile_name: Optional[str] = None) -> ResolutionPlan:
        """Resolve the assumption chain for a profile without any network calls."""
        return resolve_plan(self.load_table(), profile_name or self.profile_name, self.max_depth)


def resolve(
    profile_name: Optional[str] = None,
    region_override: Optional[str] = None,
    config: Optional[ProfileConfig] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Tuple[ResolvedCredentials, str]:
    """
    Resolve credentials and region for a profile.

    Args:
        profile_name: Profile to resolve, the config's profile_name if None
        region_override: Region that takes precedence over any profile setting
        config: Caller-owned configuration, read from the environment if None
        cancel_event: Set it to abort between role assumptions

    Returns:
        Tuple of (credentials, region)

    Raises:
        ResolutionError: Any subclass, see sts_profile_auth.errors
    """
    if config is None:
        config = ProfileConfig.from_environment()
    profile_name = profile_name or config.profile_name

    table = config.load_table()
    plan = resolve_plan(table, profile_name, config.max_depth)
    region = region_override or plan.region or config.default_region

    credentials = build(
        table,
        plan,
        config.assume_fn,
        default_provider=config.default_provider,
        region=region,
        duration_seconds=config.duration_seconds,
        cancel_event=cancel_event,
    )
    logger.info(f"Resolved credentials for profile '{profile_name}' in {region}")
    return credentials, region
