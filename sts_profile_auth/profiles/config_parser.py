"""
AWS Config Parser

This module turns the contents of the AWS config file and the shared
credentials file into a single ProfileTable. Section naming differs between
the two files (`[profile dev]` versus `[dev]`); both normalize to the same
profile name, and the credentials file wins when both define the same key.
"""

import configparser
import logging
import re
from typing import Dict, Iterator, List, Optional

from ..errors import ParseError, ProfileNotFound

logger = logging.getLogger(__name__)

__all__ = [
    'parse',
    'parse_profiles',
    'has_static_credentials',
    'ProfileTable',
    'ProfileSettings',
]

ProfileSettings = Dict[str, str]

CONFIG_SOURCE = "config"
CREDENTIALS_SOURCE = "credentials"

ACCESS_KEY_ID = "aws_access_key_id"
SECRET_ACCESS_KEY = "aws_secret_access_key"
SESSION_TOKEN = "aws_session_token"

# Config file sections that are not profiles
_NON_PROFILE_PREFIXES = ("sso-session ", "services ")

_PROFILE_HEADER = re.compile(r"^\s*profile\s+(?P<name>.*?)\s*$")

# configparser folds its default section into every other one, so point it
# at a name no AWS file can contain.
_UNUSED_DEFAULT_SECTION = "\x00"


class ProfileTable:
    """Mapping of profile name to its merged settings."""

    def __init__(self, profiles: Optional[Dict[str, ProfileSettings]] = None):
        self._profiles: Dict[str, ProfileSettings] = {
            name: dict(settings) for name, settings in (profiles or {}).items()
        }

    def __contains__(self, name: object) -> bool:
        return name in self._profiles

    def __iter__(self) -> Iterator[str]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __repr__(self) -> str:
        return f"ProfileTable({self.names()!r})"

    def names(self) -> List[str]:
        """Return all profile names, sorted."""
        return sorted(self._profiles)

    def get(self, name: str, referenced_by: Optional[str] = None) -> ProfileSettings:
        """
        Look up the settings of a profile.

        Args:
            name: Profile name
            referenced_by: Profile whose source_profile points at `name`, used
                for the error message

        Returns:
            ProfileSettings: A copy of the profile's settings

        Raises:
            ProfileNotFound: If the profile is not defined in either file
        """
        if name not in self._profiles:
            raise ProfileNotFound(name, referenced_by=referenced_by)
        return dict(self._profiles[name])

    def merge(self, other: "ProfileTable") -> "ProfileTable":
        """
        Merge another table on top of this one.

        Keys defined by `other` win; keys only present here are retained.

        Returns:
            ProfileTable: A new table, neither input is modified
        """
        merged = {name: dict(settings) for name, settings in self._profiles.items()}
        for name, settings in other._profiles.items():
            merged.setdefault(name, {}).update(settings)
        return ProfileTable(merged)

    def as_dict(self) -> Dict[str, ProfileSettings]:
        return {name: dict(settings) for name, settings in self._profiles.items()}


def has_static_credentials(settings: ProfileSettings) -> bool:
    """Check whether a profile defines both halves of an access key."""
    return bool(settings.get(ACCESS_KEY_ID)) and bool(settings.get(SECRET_ACCESS_KEY))


def _profile_name(section: str, source: str) -> Optional[str]:
    """
    Normalize a section header to a profile name.

    Returns:
        Optional[str]: The profile name, or None for non-profile sections
    """
    match = _PROFILE_HEADER.match(section)
    if match:
        name = match.group("name")
        if not name:
            raise ParseError(f"Section '[{section}]' has no profile name", source)
        return name

    if source == CONFIG_SOURCE and section.startswith(_NON_PROFILE_PREFIXES):
        logger.debug(f"Skipping non-profile section [{section}] in {source}")
        return None

    name = section.strip()
    if not name:
        raise ParseError("Empty section header", source)
    return name


def parse_profiles(text: str, source: str = CONFIG_SOURCE) -> ProfileTable:
    """
    Parse the contents of a single AWS config or credentials file.

    Args:
        text: Raw file contents
        source: Label used in error messages ("config", "credentials" or a path)

    Returns:
        ProfileTable: Profiles defined in this file

    Raises:
        ParseError: On malformed or unterminated section headers, keys outside
            a section, or lines that are not `key = value` pairs
    """
    parser = configparser.ConfigParser(
        delimiters=("=",),
        comment_prefixes=("#", ";"),
        strict=False,
        empty_lines_in_values=False,
        interpolation=None,
        default_section=_UNUSED_DEFAULT_SECTION,
    )
    parser.optionxform = str  # keep keys verbatim

    # Values never span lines; an indented line is a setting of its own
    lines = "\n".join(line.strip() for line in text.splitlines())

    try:
        parser.read_string(lines, source=source)
    except configparser.MissingSectionHeaderError as e:
        raise ParseError(f"Expected a section header, got {e.line.strip()!r}", source, e.lineno) from e
    except configparser.ParsingError as e:
        lineno, line = e.errors[0]
        raise ParseError(f"Malformed line: {str(line).strip()}", source, lineno) from e

    profiles: Dict[str, ProfileSettings] = {}
    for section in parser.sections():
        name = _profile_name(section, source)
        if name is None:
            continue

        settings = profiles.setdefault(name, {})
        for key, value in parser.items(section):
            value = value.strip()
            # An empty value leaves the key unset
            if value:
                settings[key.strip()] = value

    return ProfileTable(profiles)


def parse(config_text: str, credentials_text: str) -> ProfileTable:
    """
    Parse and merge the AWS config file and the shared credentials file.

    Args:
        config_text: Contents of the config file (empty if missing)
        credentials_text: Contents of the credentials file (empty if missing)

    Returns:
        ProfileTable: Merged profiles, credentials file winning per key
    """
    config = parse_profiles(config_text, CONFIG_SOURCE)
    credentials = parse_profiles(credentials_text, CREDENTIALS_SOURCE)
    table = config.merge(credentials)
    logger.debug(
        f"Parsed {len(config)} profile(s) from config and "
        f"{len(credentials)} from credentials ({len(table)} merged)"
    )
    return table
