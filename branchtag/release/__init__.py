"""Branch-driven release workflow.

- classify_branch: which CI/CD behavior a branch triggers
- ReleaseOrchestrator: bumps, tags and rolls versions forward
- create_release_notes: commits since the last version
- run_dependent_tasks: configured commands run before tagging
"""

from branchtag.release.branches import BranchClass, classify_branch
from branchtag.release.notes import DIVIDER, IMPORTANT_COMMIT_INDICATOR, create_release_notes
from branchtag.release.orchestrator import (
    OrchestratorSettings,
    ReleaseOrchestrator,
    RunReport,
    SkippedSpecifier,
    develop_bump,
)
from branchtag.release.tasks import TaskFailed, run_dependent_tasks

__all__ = [
    "DIVIDER",
    "IMPORTANT_COMMIT_INDICATOR",
    "BranchClass",
    "OrchestratorSettings",
    "ReleaseOrchestrator",
    "RunReport",
    "SkippedSpecifier",
    "TaskFailed",
    "classify_branch",
    "create_release_notes",
    "develop_bump",
    "run_dependent_tasks",
]
