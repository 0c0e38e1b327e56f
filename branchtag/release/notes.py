"""Release notes assembled from full commit records.

Notes cover the commits not yet released: either the range between the last
version tag and HEAD, or (for repositories still on commit-message versioning)
every commit back to the last version-bump commit that mentions a key text.
"""

from __future__ import annotations

from branchtag.core.result import Err, Ok, Result
from branchtag.git.gateway import VersionControlGateway
from branchtag.output.console import ConsoleProtocol
from branchtag.resolve.errors import ResolveError
from branchtag.resolve.lookup import find_last_version_commit_message
from branchtag.resolve.naming import bump_version_tag_string

DIVIDER = "\n-------\n"
IMPORTANT_COMMIT_INDICATOR = "Related work items"


def format_commits_with_divider(commits: list[str]) -> str:
    return DIVIDER.join(commits)


def _collect_full_commits(
    gateway: VersionControlGateway,
    inclusion_filter: str,
    *,
    until_matches: str | None = None,
    until_rev: str | None = None,
) -> Result[str, ResolveError]:
    total = gateway.commit_count()
    if isinstance(total, Err):
        return total

    kept: list[str] = []
    for offset in range(total.value):
        record = gateway.full_commit_at(offset)
        if isinstance(record, Err):
            return record
        commit = record.value
        if until_matches is not None and until_matches in commit:
            break
        if until_rev is not None and until_rev in commit.split("\n", 1)[0]:
            break
        if inclusion_filter in commit:
            kept.append(commit)
    return Ok(format_commits_with_divider(kept))


def commits_containing_message_text(
    gateway: VersionControlGateway, inclusion_filter: str, until_matches: str | None = None
) -> Result[str, ResolveError]:
    """Full commits from HEAD containing ``inclusion_filter``.

    The walk stops at the first commit containing ``until_matches``.
    """
    return _collect_full_commits(gateway, inclusion_filter, until_matches=until_matches)


def commits_with_key_text(
    gateway: VersionControlGateway, inclusion_filter: str, until_rev: str
) -> Result[str, ResolveError]:
    """Full commits from HEAD containing ``inclusion_filter``.

    The walk stops at the commit whose header line names ``until_rev``.
    """
    return _collect_full_commits(gateway, inclusion_filter, until_rev=until_rev)


def create_release_notes(
    gateway: VersionControlGateway,
    project_qualifier: str | None,
    version_specifier: str,
    last_version: str,
    important_commit_indicator: str = IMPORTANT_COMMIT_INDICATOR,
    console: ConsoleProtocol | None = None,
) -> Result[str, ResolveError]:
    tag = bump_version_tag_string(last_version, project_qualifier, version_specifier)
    ranged = gateway.full_commits_between(tag)
    if isinstance(ranged, Ok):
        return ranged

    if console is not None:
        console.log(f"no commit range for tag {tag} ({ranged.error.message}); searching version commits")
    bump_commit = find_last_version_commit_message(
        gateway, project_qualifier, version_specifier, console
    )
    if isinstance(bump_commit, Err):
        return bump_commit

    commit_hash = bump_commit.value.split(" ", 1)[0]
    return commits_with_key_text(gateway, important_commit_indicator, until_rev=commit_hash)
