"""
Example deployment through a chained AWS profile

This example demonstrates how to:
1. Resolve a profile that assumes a role through one or more source profiles
2. Build an explicit Pulumi AWS provider from the temporary credentials
3. Deploy resources with that provider instead of the ambient credentials

Set the profile with `pulumi config set awsProfile <name>`; `awsRegion` is
optional and overrides the profile's region.
"""

import pulumi
import pulumi_aws as aws
from sts_profile_auth import resolve, build_client
from sts_profile_auth.utils import pulumi_provider_factory

config = pulumi.Config()
profile = config.get("awsProfile")

credentials, region = resolve(profile, region_override=config.get("awsRegion"))
provider = build_client(credentials, region, pulumi_provider_factory(f"{profile or 'default'}-provider"))

bucket = aws.s3.BucketV2(
    "chained-profile-artifacts",
    tags={
        "Profile": profile or "default",
        "ManagedBy": "sts-profile-auth",
    },
    opts=pulumi.ResourceOptions(provider=provider),
)

pulumi.export("region", region)
pulumi.export("bucket_name", bucket.bucket)
pulumi.export("credentials_expire", credentials.expiration.isoformat() if credentials.expiration else None)
