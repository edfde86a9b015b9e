"""
Utility functions for using resolved credentials.
"""

from .clients import build_client, boto3_session, boto3_client_factory, pulumi_provider_factory

__all__ = [
    'build_client',
    'boto3_session',
    'boto3_client_factory',
    'pulumi_provider_factory',
]
