"""
AWS Profile Manager

This module provides utilities for inspecting the AWS profiles configured on
the system: listing them with how each one authenticates, and validating
that a profile's chain actually yields working credentials.
"""

from typing import List, Optional, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from .auth import ProfileConfig, resolve
from .errors import ResolutionError
from .profiles.config_parser import has_static_credentials
from .utils.clients import boto3_client_factory, build_client

__all__ = [
    'list_profiles',
    'validate_profile',
    'ProfileInfo',
]


class ProfileInfo:
    """Contains information about an AWS profile."""
    def __init__(self, name: str, region: Optional[str] = None,
                 auth_method: Optional[str] = None, source_profile: Optional[str] = None,
                 role_name: Optional[str] = None, is_default: bool = False,
                 is_active: bool = False):
        self.name = name
        self.region = region
        self.auth_method = auth_method  # "api_key", "role" or "ambient"
        self.source_profile = source_profile
        self.role_name = role_name
        self.is_default = is_default
        self.is_active = is_active

    def __str__(self) -> str:
        """Return string representation of the profile info."""
        status = []
        if self.is_active:
            status.append("ACTIVE")
        if self.is_default:
            status.append("DEFAULT")

        status_str = f" ({', '.join(status)})" if status else ""
        region_str = f" - {self.region}" if self.region else ""

        identity_info = []
        if self.auth_method:
            identity_info.append(self.auth_method)
        if self.role_name:
            identity_info.append(self.role_name)
        if self.source_profile:
            identity_info.append(f"via {self.source_profile}")

        identity_str = f" [{', '.join(identity_info)}]" if identity_info else ""

        return f"{self.name}{region_str}{identity_str}{status_str}"


def _role_name(role_arn: str) -> Optional[str]:
    # Format: arn:aws:iam::ACCOUNT:role/ROLE
    parts = role_arn.split("/")
    return parts[-1] if len(parts) >= 2 else None


def list_profiles(config: Optional[ProfileConfig] = None) -> List[ProfileInfo]:
    """
    List all AWS profiles defined in the config and credentials files.

    Args:
        config: Where to read profiles from, the environment's files if None

    Returns:
        List of ProfileInfo objects, sorted by name
    """
    if config is None:
        config = ProfileConfig.from_environment()

    table = config.load_table()
    profiles = []
    for name in table.names():
        settings = table.get(name)
        role_arn = settings.get("role_arn")

        if role_arn:
            auth_method = "role"
        elif has_static_credentials(settings):
            auth_method = "api_key"
        else:
            auth_method = "ambient"

        profiles.append(ProfileInfo(
            name=name,
            region=settings.get("region"),
            auth_method=auth_method,
            source_profile=settings.get("source_profile"),
            role_name=_role_name(role_arn) if role_arn else None,
            is_default=(name == "default"),
            is_active=(name == config.profile_name),
        ))

    return profiles


def validate_profile(profile_name: Optional[str] = None,
                     config: Optional[ProfileConfig] = None) -> Tuple[bool, str]:
    """
    Validate AWS credentials for a profile.

    Resolves the full chain and calls STS GetCallerIdentity with the result.

    Args:
        profile_name: Name of the profile to validate (uses current if None)
        config: Where to read profiles from, the environment's files if None

    Returns:
        Tuple of (success, message)
    """
    try:
        credentials, region = resolve(profile_name, config=config)
        sts = build_client(credentials, region, boto3_client_factory("sts"))
        identity = sts.get_caller_identity()
    except (ResolutionError, BotoCoreError, ClientError) as e:
        return False, f"Credential validation failed: {str(e)}"

    return True, f"Credentials are valid ({identity.get('Arn')})"
