"""
Errors raised while resolving AWS profile credentials.

Every error carries the profile it relates to so the offending
configuration entry can be located. None of them are retried internally.
"""

from typing import List, Optional


class ResolutionError(Exception):
    """Base class for all credential resolution failures."""

    def __init__(self, message: str, profile: Optional[str] = None, hop: Optional[int] = None):
        super().__init__(message)
        self.profile = profile
        self.hop = hop


class ParseError(ResolutionError):
    """A configuration file could not be parsed."""

    def __init__(self, message: str, source: str, lineno: Optional[int] = None):
        location = f"{source}, line {lineno}" if lineno else source
        super().__init__(f"{location}: {message}")
        self.source = source
        self.lineno = lineno


class ProfileNotFound(ResolutionError):
    def __init__(self, profile: str, referenced_by: Optional[str] = None):
        if referenced_by:
            message = f"Profile '{profile}' (source_profile of '{referenced_by}') is not available"
        else:
            message = f"Profile '{profile}' is not available"
        super().__init__(message, profile=profile)
        self.referenced_by = referenced_by


class CycleDetected(ResolutionError):
    def __init__(self, chain: List[str]):
        super().__init__(
            f"source_profile cycle detected: {' -> '.join(chain)}",
            profile=chain[0],
            hop=len(chain) - 1,
        )
        self.chain = chain


class ChainTooDeep(ResolutionError):
    def __init__(self, profile: str, max_depth: int):
        super().__init__(
            f"Profile '{profile}' chains through more than {max_depth} source profiles",
            profile=profile,
            hop=max_depth,
        )
        self.max_depth = max_depth


class InvalidProfile(ResolutionError):
    """A profile's settings are inconsistent or ambiguous."""


class MissingCredentials(ResolutionError):
    """Neither static nor ambient credentials are available at the chain's base."""


class AssumeRoleFailed(ResolutionError):
    def __init__(self, profile: str, role_arn: str, hop: int, cause: BaseException):
        super().__init__(
            f"Failed to assume {role_arn} for profile '{profile}' (hop {hop + 1}): {cause}",
            profile=profile,
            hop=hop,
        )
        self.role_arn = role_arn
        self.cause = cause


class ExpiredOrInvalidSession(ResolutionError):
    """A token exchange returned credentials that cannot be used."""


class ResolutionCancelled(ResolutionError):
    """The caller cancelled resolution between two role assumptions."""
