"""
Authenticate with a profile from your AWS config and credentials files,
following role_arn / source_profile chains the way the AWS CLI does.
"""

from .auth import resolve, ProfileConfig, DEFAULT_REGION
from .credentials import ResolvedCredentials
from .errors import (
    ResolutionError,
    ParseError,
    ProfileNotFound,
    CycleDetected,
    ChainTooDeep,
    InvalidProfile,
    MissingCredentials,
    AssumeRoleFailed,
    ExpiredOrInvalidSession,
    ResolutionCancelled,
)
from .profile_manager import list_profiles, validate_profile, ProfileInfo
from .utils import build_client

__all__ = [
    'resolve',
    'build_client',
    'ProfileConfig',
    'DEFAULT_REGION',
    'ResolvedCredentials',
    'ResolutionError',
    'ParseError',
    'ProfileNotFound',
    'CycleDetected',
    'ChainTooDeep',
    'InvalidProfile',
    'MissingCredentials',
    'AssumeRoleFailed',
    'ExpiredOrInvalidSession',
    'ResolutionCancelled',
    'list_profiles',
    'validate_profile',
    'ProfileInfo',
]
