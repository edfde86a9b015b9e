"""
Locating and reading the AWS config and shared credentials files.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Union

logger = logging.getLogger(__name__)


def _aws_dir() -> Path:
    return Path.home() / ".aws"


def get_aws_config_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """Get the path to the AWS config file, honoring AWS_CONFIG_FILE."""
    env = os.environ if env is None else env
    override = env.get("AWS_CONFIG_FILE")
    if override:
        return Path(override).expanduser()
    return _aws_dir() / "config"


def get_aws_credentials_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """Get the path to the AWS credentials file, honoring AWS_SHARED_CREDENTIALS_FILE."""
    env = os.environ if env is None else env
    override = env.get("AWS_SHARED_CREDENTIALS_FILE")
    if override:
        return Path(override).expanduser()
    return _aws_dir() / "credentials"


def read_profile_file(path: Union[str, Path]) -> str:
    """
    Read an AWS config or credentials file.

    Args:
        path: Location of the file

    Returns:
        str: The file contents, or an empty string if the file does not exist
    """
    path = Path(path)
    if not path.is_file():
        logger.debug(f"{path} not found, treating it as empty")
        return ""
    return path.read_text(encoding="utf-8")


def get_current_profile(env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Get the name of the profile selected by the environment.

    Returns:
        Name of the active profile or None if none is explicitly set
    """
    env = os.environ if env is None else env
    return env.get("AWS_PROFILE") or env.get("AWS_DEFAULT_PROFILE") or None
