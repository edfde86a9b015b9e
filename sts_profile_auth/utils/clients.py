"""
Client construction from resolved credentials.

`build_client` is deliberately separate from `resolve`: callers resolve
once and can then build as many clients as they need.
"""

from typing import Any, Callable, Optional, TypeVar

import boto3
import pulumi
import pulumi_aws as aws

from ..credentials.chain import ResolvedCredentials

T = TypeVar("T")

ClientConstructor = Callable[[ResolvedCredentials, str], T]


def build_client(credentials: ResolvedCredentials, region: str, constructor: ClientConstructor) -> T:
    """
    Construct a client from resolved credentials.

    Args:
        credentials: Credentials returned by resolve
        region: Region returned by resolve
        constructor: Callable taking (credentials, region)

    Returns:
        Whatever `constructor` returns
    """
    return constructor(credentials, region)


def boto3_session(credentials: ResolvedCredentials, region: str) -> boto3.Session:
    """Create a boto3 session pinned to the given credentials and region."""
    return boto3.Session(
        aws_access_key_id=credentials.access_key_id,
        aws_secret_access_key=credentials.secret_access_key,
        aws_session_token=credentials.session_token,
        region_name=region,
    )


def boto3_client_factory(service_name: str, **client_kwargs: Any) -> ClientConstructor:
    """
    Get a constructor that builds a boto3 client for a service.

    Args:
        service_name: boto3 service name, e.g. "ec2" or "sts"
        **client_kwargs: Extra arguments for Session.client

    Returns:
        ClientConstructor: Usable with build_client
    """
    def construct(credentials: ResolvedCredentials, region: str):
        return boto3_session(credentials, region).client(service_name, **client_kwargs)

    return construct


def pulumi_provider_factory(
    resource_name: str,
    opts: Optional[pulumi.ResourceOptions] = None,
) -> ClientConstructor:
    """
    Get a constructor that builds an explicit Pulumi AWS provider.

    Resources created with `opts=pulumi.ResourceOptions(provider=...)` are
    then deployed with the chained profile's credentials instead of the
    ambient ones.

    Args:
        resource_name: Pulumi name of the provider resource
        opts: Optional resource options for the provider itself

    Returns:
        ClientConstructor: Usable with build_client
    """
    def construct(credentials: ResolvedCredentials, region: str) -> aws.Provider:
        return aws.Provider(
            resource_name,
            opts=opts,
            access_key=credentials.access_key_id,
            secret_key=credentials.secret_access_key,
            token=credentials.session_token,
            region=region,
        )

    return construct
