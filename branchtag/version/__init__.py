"""Semantic version codec."""

from branchtag.version.errors import (
    DigitOverflowError,
    InvalidBudgetError,
    MalformedVersionError,
    VersionError,
)
from branchtag.version.semver import (
    DEFAULT_BUDGET,
    BumpKind,
    DigitBudget,
    SemanticVersion,
    apply_bump,
    is_intermediate,
    parse_version,
    render,
    version_code,
)

__all__ = [
    "DEFAULT_BUDGET",
    "BumpKind",
    "DigitBudget",
    "DigitOverflowError",
    "InvalidBudgetError",
    "MalformedVersionError",
    "SemanticVersion",
    "VersionError",
    "apply_bump",
    "is_intermediate",
    "parse_version",
    "render",
    "version_code",
]
