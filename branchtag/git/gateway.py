"""Version-control capability consumed by the resolver and orchestrator.

The release logic never shells out itself; it talks to a
:class:`VersionControlGateway`. :class:`~branchtag.git.repository.GitRepository`
is the git implementation; tests substitute fakes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from branchtag.core.result import Result

__all__ = [
    "CommandExecutionError",
    "CommandRunner",
    "TagRef",
    "VersionControlGateway",
]


@dataclass(frozen=True, slots=True)
class CommandExecutionError:
    """A version-control command exited non-zero.

    Attributes:
        command: The command line, without the executable.
        message: Diagnostic text reported by the tool.
        returncode: Process exit status (-1 if it never ran).
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class TagRef:
    """A tag and the commit it points to (annotated tags are peeled)."""

    name: str
    commit: str


CommandRunner = Callable[[list[str]], Result[str, CommandExecutionError]]
"""Runs VCS arguments and returns trimmed stdout."""


class VersionControlGateway(Protocol):
    def list_tags(self) -> Result[tuple[TagRef, ...], CommandExecutionError]: ...

    def commit_at(self, offset: int) -> Result[str, CommandExecutionError]:
        """Full hash of the commit ``offset`` steps back from HEAD."""
        ...

    def pretty_commits_from_offset(
        self, offset: int, count: int
    ) -> Result[list[str], CommandExecutionError]:
        """One-line abbreviated summaries, at most ``count`` starting at ``offset``."""
        ...

    def full_commit_at(self, offset: int) -> Result[str, CommandExecutionError]: ...

    def full_commits_between(
        self, start_ref: str, end_ref: str = "HEAD"
    ) -> Result[str, CommandExecutionError]: ...

    def commit_count(self) -> Result[int, CommandExecutionError]:
        """Number of commits from HEAD back to the root."""
        ...

    def commit_of_tag(self, tag: str) -> Result[str, CommandExecutionError]: ...

    def current_branch_name(self) -> Result[str, CommandExecutionError]: ...

    def head_commit_hash(self, short: bool = True) -> Result[str, CommandExecutionError]: ...

    def create_local_branch(self, name: str) -> Result[str, CommandExecutionError]:
        """Create ``name`` from the current HEAD and check it out."""
        ...

    def checkout(self, branch: str) -> Result[str, CommandExecutionError]: ...

    def delete_local_branch(self, name: str) -> Result[str, CommandExecutionError]: ...

    def tag(self, name: str, commit: str | None = None) -> Result[str, CommandExecutionError]:
        """Create a local tag on ``commit`` (HEAD when None)."""
        ...

    def delete_tag(self, name: str) -> Result[str, CommandExecutionError]: ...

    def delete_remote_tag(self, remote: str, name: str) -> Result[str, CommandExecutionError]: ...

    def push(self, remote: str, ref: str) -> Result[str, CommandExecutionError]: ...

    def run_command(self, *arguments: str) -> Result[str, CommandExecutionError]: ...
