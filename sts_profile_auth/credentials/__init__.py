"""
Building temporary credentials by chaining STS role assumptions.
"""

from .chain import build, session_name_for, ResolvedCredentials
from .sts import assume_role_with_boto3, ambient_credentials

__all__ = [
    'build',
    'session_name_for',
    'ResolvedCredentials',
    'assume_role_with_boto3',
    'ambient_credentials',
]
