"""Git access for branchtag.

- VersionControlGateway: the capability the release logic depends on
- GitRepository: the git implementation of it

Usage:
    from branchtag.git import GitRepository

    repo = GitRepository(Path("/path/to/repo"))
    tags = repo.list_tags()
"""

from branchtag.git.gateway import (
    CommandExecutionError,
    CommandRunner,
    TagRef,
    VersionControlGateway,
)
from branchtag.git.repository import GitRepository, git_runner, parse_tag_refs

__all__ = [
    "CommandExecutionError",
    "CommandRunner",
    "GitRepository",
    "TagRef",
    "VersionControlGateway",
    "git_runner",
    "parse_tag_refs",
]
