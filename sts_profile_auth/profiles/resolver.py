"""
Profile Graph Resolver

Walks the `source_profile` chain of a profile down to the profile that
supplies the initial credentials, and turns it into an ordered list of role
assumptions to perform.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..errors import ChainTooDeep, CycleDetected, InvalidProfile, ProfileNotFound
from .config_parser import ProfileSettings, ProfileTable, has_static_credentials

logger = logging.getLogger(__name__)

__all__ = [
    'resolve_plan',
    'AssumptionStep',
    'ResolutionPlan',
    'MAX_CHAIN_DEPTH',
]

MAX_CHAIN_DEPTH = 10


@dataclass(frozen=True)
class AssumptionStep:
    """One hop: use the credentials of `source_profile` to assume `role_arn`."""

    role_arn: str
    source_profile: str
    profile: str
    duration_seconds: Optional[int] = None


@dataclass(frozen=True)
class ResolutionPlan:
    """
    Everything needed to produce credentials for `target`.

    Attributes:
        target: The profile originally requested
        base_profile: The profile at the end of the chain
        steps: Role assumptions, innermost (closest to the base) first
        region: Region of the target, or of its nearest ancestor defining one
    """

    target: str
    base_profile: str
    steps: Tuple[AssumptionStep, ...] = ()
    region: Optional[str] = None

    @property
    def chain(self) -> List[str]:
        """Profile names from the base to the target."""
        names = [self.base_profile]
        names.extend(step.profile for step in self.steps if step.profile != self.base_profile)
        return names


def _duration_seconds(name: str, settings: ProfileSettings) -> Optional[int]:
    raw = settings.get("duration_seconds")
    if raw is None:
        return None
    try:
        duration = int(raw)
    except ValueError:
        raise InvalidProfile(
            f"Profile '{name}' has a non-integer duration_seconds: {raw!r}", profile=name
        ) from None
    if duration <= 0:
        raise InvalidProfile(f"Profile '{name}' has a non-positive duration_seconds: {raw}", profile=name)
    return duration


def resolve_plan(table: ProfileTable, start: str, max_depth: int = MAX_CHAIN_DEPTH) -> ResolutionPlan:
    """
    Resolve the chain of role assumptions for a profile.

    Args:
        table: Parsed profiles
        start: Name of the profile to resolve
        max_depth: Maximum number of source_profile hops

    Returns:
        ResolutionPlan: The base profile, the ordered steps and the region

    Raises:
        ProfileNotFound: If `start` or any profile in its chain is missing
        CycleDetected: If the chain revisits a profile
        ChainTooDeep: If the chain has more than `max_depth` hops
        InvalidProfile: If a profile in the chain is inconsistent
    """
    settings = table.get(start)
    visited = [start]
    steps: List[AssumptionStep] = []
    region: Optional[str] = None
    current = start

    while True:
        # Closest to the target wins
        if region is None:
            region = settings.get("region")

        role_arn = settings.get("role_arn")
        source = settings.get("source_profile")

        if source is None:
            if role_arn:
                # Self-assuming role, from its own keys or ambient credentials
                steps.append(AssumptionStep(role_arn, current, current, _duration_seconds(current, settings)))
            break

        if source in visited:
            raise CycleDetected(visited + [source])
        if not role_arn:
            raise InvalidProfile(
                f"Profile '{current}' sets source_profile '{source}' but no role_arn", profile=current
            )
        if has_static_credentials(settings):
            raise InvalidProfile(
                f"Profile '{current}' defines static keys and also chains through '{source}'; "
                f"remove one of them",
                profile=current,
            )
        if len(visited) > max_depth:
            raise ChainTooDeep(start, max_depth)

        steps.append(AssumptionStep(role_arn, source, current, _duration_seconds(current, settings)))
        settings = table.get(source, referenced_by=current)
        visited.append(source)
        current = source

    steps.reverse()
    plan = ResolutionPlan(target=start, base_profile=current, steps=tuple(steps), region=region)
    logger.debug(f"Resolved profile '{start}': {' -> '.join(plan.chain)} ({len(steps)} role assumption(s))")
    return plan
