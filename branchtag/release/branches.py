from __future__ import annotations

from enum import Enum

from branchtag.core.config import BranchPrefixes


class BranchClass(Enum):
    """What the CI/CD run does on a branch."""

    DEVELOP = "develop"
    RELEASE = "release"
    DEV_LAUNCH = "dev-launch"
    NO_OP = "no-op"

    def __str__(self) -> str:
        return self.value


def is_or_starts_with_then_dash(branch: str, prefix: str) -> bool:
    return branch == prefix or branch.startswith(f"{prefix}-")


def classify_branch(branch: str, prefixes: BranchPrefixes | None = None) -> BranchClass:
    """Classify ``branch`` by exact or ``<prefix>-`` match; develop is checked first."""
    p = prefixes or BranchPrefixes()
    if is_or_starts_with_then_dash(branch, p.develop):
        return BranchClass.DEVELOP
    if is_or_starts_with_then_dash(branch, p.release):
        return BranchClass.RELEASE
    if is_or_starts_with_then_dash(branch, p.dev_launch):
        return BranchClass.DEV_LAUNCH
    return BranchClass.NO_OP
