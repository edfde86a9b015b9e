"""
Parsing AWS profile files and resolving source_profile chains.
"""

from .config_parser import parse, ProfileTable
from .files import (
    get_aws_config_path,
    get_aws_credentials_path,
    get_current_profile,
    read_profile_file,
)
from .resolver import resolve_plan, AssumptionStep, ResolutionPlan, MAX_CHAIN_DEPTH

__all__ = [
    'parse',
    'ProfileTable',
    'get_aws_config_path',
    'get_aws_credentials_path',
    'get_current_profile',
    'read_profile_file',
    'resolve_plan',
    'AssumptionStep',
    'ResolutionPlan',
    'MAX_CHAIN_DEPTH',
]
