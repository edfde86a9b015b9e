"""
boto3 backed token exchange and ambient credential lookup.
"""

import logging
from typing import List, Optional

import boto3
from botocore.credentials import (
    ContainerProvider,
    CredentialProvider,
    CredentialResolver,
    EnvProvider,
    InstanceMetadataFetcher,
    InstanceMetadataProvider,
)

from .chain import ResolvedCredentials

logger = logging.getLogger(__name__)

METADATA_TIMEOUT_SECONDS = 1


def assume_role_with_boto3(
    credentials: ResolvedCredentials,
    role_arn: str,
    session_name: str,
    region: Optional[str] = None,
    duration_seconds: Optional[int] = None,
) -> ResolvedCredentials:
    """
    Assume a role with STS using the given caller credentials.

    Args:
        credentials: Credentials of the source profile
        role_arn: ARN of the role to assume
        session_name: RoleSessionName sent to STS
        region: Region of the STS endpoint
        duration_seconds: Requested session duration, STS default if None

    Returns:
        ResolvedCredentials: The temporary credentials issued by STS

    Raises:
        botocore.exceptions.ClientError: If STS rejects the request
        botocore.exceptions.BotoCoreError: On transport or configuration errors
    """
    sts = boto3.client(
        "sts",
        region_name=region,
        aws_access_key_id=credentials.access_key_id,
        aws_secret_access_key=credentials.secret_access_key,
        aws_session_token=credentials.session_token,
    )

    assume_kwargs = {
        "RoleArn": role_arn,
        "RoleSessionName": session_name,
    }
    if duration_seconds:
        assume_kwargs["DurationSeconds"] = duration_seconds

    response = sts.assume_role(**assume_kwargs)
    issued = response.get("Credentials") or {}
    return ResolvedCredentials(
        access_key_id=issued.get("AccessKeyId", ""),
        secret_access_key=issued.get("SecretAccessKey", ""),
        session_token=issued.get("SessionToken"),
        expiration=issued.get("Expiration"),
    )


def _ambient_providers() -> List[CredentialProvider]:
    # Shared config files are left out so a profile can never resolve to itself
    return [
        EnvProvider(),
        ContainerProvider(),
        InstanceMetadataProvider(
            iam_role_fetcher=InstanceMetadataFetcher(timeout=METADATA_TIMEOUT_SECONDS, num_attempts=1)
        ),
    ]


def ambient_credentials() -> Optional[ResolvedCredentials]:
    """
    Look up credentials from the environment, ECS task role or EC2 instance role.

    Off EC2 the instance metadata lookup blocks for up to
    METADATA_TIMEOUT_SECONDS before giving up. Pass another
    `default_provider` to ProfileConfig (or None) to skip it.

    Returns:
        Optional[ResolvedCredentials]: The first credentials found, or None
    """
    found = CredentialResolver(_ambient_providers()).load_credentials()
    if found is None:
        logger.warning("No ambient AWS credentials found")
        return None

    frozen = found.get_frozen_credentials()
    logger.info(f"Using ambient credentials from {found.method}")
    return ResolvedCredentials(
        access_key_id=frozen.access_key,
        secret_access_key=frozen.secret_key,
        session_token=frozen.token,
    )
