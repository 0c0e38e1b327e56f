"""Two-step lookup of the last released version of a version line.

1. The most recent reachable version tag (see :mod:`branchtag.resolve.tags`).
2. Only when no tag matches: the most recent ``bump ... version to X.Y.Z``
   commit subject. This convention is deprecated; :class:`LastVersion`
   records that the lookup fell through to it and why.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from branchtag.core.result import Err, Ok, Result
from branchtag.git.gateway import VersionControlGateway
from branchtag.output.console import ConsoleProtocol
from branchtag.resolve.errors import NotFoundError, ResolveError
from branchtag.resolve.naming import (
    TAG_DELIMITER,
    bump_version_commit_prefix,
    version_from_tag,
    version_tag_prefix,
)
from branchtag.resolve.tags import (
    find_last_pretty_commit_including_regex_in_subject,
    find_last_tag_with_prefix,
)
from branchtag.version.errors import VersionError
from branchtag.version.semver import DEFAULT_BUDGET, DigitBudget, SemanticVersion, parse_version

VersionSource = Literal["tag", "commit_message"]


@dataclass(frozen=True, slots=True)
class Fallthrough:
    """Why the tag lookup did not produce a version."""

    reason: Literal["no_matching_tag"]
    tag_prefix: str


@dataclass(frozen=True, slots=True)
class LastVersion:
    """The resolved last version of one version line.

    Attributes:
        version: Parsed version.
        text: Version text as found in the tag or commit subject.
        source: Where the version came from.
        tag: The tag that produced the version, if any.
        fallthrough: Set when the commit-message search was used.
    """

    version: SemanticVersion
    text: str
    source: VersionSource
    tag: str | None = None
    fallthrough: Fallthrough | None = None


def version_commit_prefixes(project_qualifier: str | None, version_specifier: str = "") -> list[str]:
    """Commit subject prefixes to try, most specific first, without duplicates."""
    candidates = [
        bump_version_commit_prefix(project_qualifier, version_specifier),
        bump_version_commit_prefix(project_qualifier),
        project_qualifier,
        bump_version_commit_prefix(None),
    ]
    seen: list[str] = []
    for prefix in candidates:
        if prefix and prefix.strip() and prefix not in seen:
            seen.append(prefix)
    return seen


def find_last_version_commit_message(
    gateway: VersionControlGateway,
    project_qualifier: str | None,
    version_specifier: str = "",
    console: ConsoleProtocol | None = None,
) -> Result[str, ResolveError]:
    """Most recent one-line commit recording a version bump (deprecated)."""
    last_error: ResolveError = NotFoundError(what="commit", message="no version commit prefixes")
    for prefix in version_commit_prefixes(project_qualifier, version_specifier):
        if console is not None:
            console.log(f"Searching for version commit with prefix: {prefix}")
        pattern = re.compile(re.escape(prefix) + r" ([0-9])+\.([0-9])+\.([0-9])+")
        found = find_last_pretty_commit_including_regex_in_subject(gateway, pattern)
        if isinstance(found, Ok):
            return found
        if not isinstance(found.error, NotFoundError):
            return found
        if console is not None:
            console.log(f"could not find version commit with prefix: {prefix}")
        last_error = found.error
    return Err(last_error)


def parse_tag_version(
    text: str, budget: DigitBudget = DEFAULT_BUDGET
) -> Result[SemanticVersion, VersionError]:
    """Version named by a tag.

    Release tags are written without build number or qualifier (``app/1.2.3``),
    so a tag version with no dash qualifier is final.
    """
    parsed = parse_version(text, budget)
    if isinstance(parsed, Err) or "-" in text:
        return parsed
    return Ok(parsed.value.with_dash_qualifier(""))


def find_last_version_tag(
    gateway: VersionControlGateway,
    project_qualifier: str | None,
    version_specifier: str = "",
    budget: DigitBudget = DEFAULT_BUDGET,
) -> Result[str | None, ResolveError]:
    prefix = version_tag_prefix(project_qualifier, version_specifier)
    return find_last_tag_with_prefix(gateway, prefix, TAG_DELIMITER, budget)


def find_last_version(
    gateway: VersionControlGateway,
    project_qualifier: str | None,
    version_specifier: str = "",
    budget: DigitBudget = DEFAULT_BUDGET,
    console: ConsoleProtocol | None = None,
) -> Result[LastVersion, ResolveError]:
    tag = find_last_version_tag(gateway, project_qualifier, version_specifier, budget)
    if isinstance(tag, Err):
        return tag

    if tag.value is not None:
        text = version_from_tag(tag.value)
        parsed = parse_tag_version(text, budget)
        if isinstance(parsed, Err):
            return parsed
        return Ok(LastVersion(version=parsed.value, text=text, source="tag", tag=tag.value))

    fallthrough = Fallthrough(
        reason="no_matching_tag",
        tag_prefix=version_tag_prefix(project_qualifier, version_specifier),
    )
    commit = find_last_version_commit_message(
        gateway, project_qualifier, version_specifier, console
    )
    if isinstance(commit, Err):
        return commit

    text = commit.value.rsplit(" ", 1)[-1]
    parsed = parse_version(text, budget)
    if isinstance(parsed, Err):
        return parsed
    return Ok(
        LastVersion(
            version=parsed.value,
            text=text,
            source="commit_message",
            fallthrough=fallthrough,
        )
    )
