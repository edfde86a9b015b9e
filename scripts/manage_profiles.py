#!/usr/bin/env python3
"""
AWS Profile Manager CLI

A command-line utility for inspecting AWS profiles and resolving their
role_arn / source_profile chains into temporary credentials.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Add the parent directory to sys.path to import from sts_profile_auth
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from sts_profile_auth import (
    ProfileConfig,
    ResolutionError,
    list_profiles,
    resolve,
    validate_profile,
)
from sts_profile_auth.profiles import get_current_profile


def format_profile_list(profiles):
    """Format profiles for display."""
    if not profiles:
        return "No AWS profiles found."

    output = []
    for p in profiles:
        marker = "→ " if p.is_active else "  "
        output.append(f"{marker}{p}")

    return "\n".join(output)


def format_exports(credentials, region):
    """Format resolved credentials as shell export lines."""
    lines = [
        f"export AWS_ACCESS_KEY_ID={credentials.access_key_id}",
        f"export AWS_SECRET_ACCESS_KEY={credentials.secret_access_key}",
    ]
    if credentials.session_token:
        lines.append(f"export AWS_SESSION_TOKEN={credentials.session_token}")
    else:
        lines.append("unset AWS_SESSION_TOKEN")
    lines.append(f"export AWS_REGION={region}")
    if credentials.expiration:
        lines.append(f"# expires {credentials.expiration.isoformat()}")
    return "\n".join(lines)


def handle_list(args, config):
    """Handle the list command."""
    profiles = list_profiles(config)
    print("AWS Profiles:")
    print(format_profile_list(profiles))


def handle_current(args, config):
    """Handle the current command."""
    current = get_current_profile()
    if current:
        print(f"Current AWS profile: {current}")
    else:
        print("No AWS profile explicitly set (using default)")


def handle_plan(args, config):
    """Handle the plan command."""
    plan = config.plan(args.profile)
    print(f"Profile: {plan.target}")
    print(f"Base profile: {plan.base_profile}")
    print(f"Region: {plan.region or f'{config.default_region} (default)'}")
    if not plan.steps:
        print("No role assumption needed")
    for i, step in enumerate(plan.steps, 1):
        print(f"  {i}. {step.profile}: assume {step.role_arn} using {step.source_profile}")


def handle_resolve(args, config):
    """Handle the resolve command."""
    credentials, region = resolve(args.profile, region_override=args.region, config=config)
    print(format_exports(credentials, region))


def handle_validate(args, config):
    """Handle the validate command."""
    success, message = validate_profile(args.profile, config=config)

    if success:
        print(f"✅ {message}")
    else:
        print(f"❌ {message}")
        sys.exit(1)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="AWS Profile Manager - Resolve chained AWS profiles into credentials"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log each role assumption")
    parser.add_argument("--duration", type=int,
                        help="Session duration in seconds for profiles that set none")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # List command
    list_parser = subparsers.add_parser("list", help="List all AWS profiles")
    list_parser.set_defaults(func=handle_list)

    # Current command
    current_parser = subparsers.add_parser("current", help="Show current AWS profile")
    current_parser.set_defaults(func=handle_current)

    # Plan command
    plan_parser = subparsers.add_parser("plan", help="Show the role assumption chain of a profile")
    plan_parser.add_argument("profile", nargs="?", help="Profile to inspect (uses current if not specified)")
    plan_parser.set_defaults(func=handle_plan)

    # Resolve command
    resolve_parser = subparsers.add_parser("resolve", help="Print credentials for a profile as shell exports")
    resolve_parser.add_argument("profile", nargs="?", help="Profile to resolve (uses current if not specified)")
    resolve_parser.add_argument("--region", help="Region overriding the profile's region")
    resolve_parser.set_defaults(func=handle_resolve)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate AWS credentials for a profile")
    validate_parser.add_argument("--profile", help="Profile to validate (uses current if not specified)")
    validate_parser.set_defaults(func=handle_validate)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = ProfileConfig.from_environment(os.environ, duration_seconds=args.duration)
    try:
        args.func(args, config)
    except ResolutionError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
