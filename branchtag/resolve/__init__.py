"""Resolution of version tags and commits from branch history."""

from branchtag.resolve.errors import NotFoundError, ResolveError
from branchtag.resolve.lookup import Fallthrough, LastVersion, find_last_version, parse_tag_version
from branchtag.resolve.naming import (
    bump_version_commit_prefix,
    bump_version_commit_string,
    bump_version_tag_string,
    version_tag_prefix,
)
from branchtag.resolve.tags import (
    find_last_pretty_commit_including_regex_in_subject,
    find_last_tag_with_prefix,
)

__all__ = [
    "Fallthrough",
    "LastVersion",
    "NotFoundError",
    "ResolveError",
    "bump_version_commit_prefix",
    "bump_version_commit_string",
    "bump_version_tag_string",
    "find_last_pretty_commit_including_regex_in_subject",
    "find_last_tag_with_prefix",
    "find_last_version",
    "parse_tag_version",
    "version_tag_prefix",
]
