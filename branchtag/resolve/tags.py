"""History-walking lookups over the current branch.

Tags are only meaningful as "the last version" when the commit they point to
is reachable from HEAD. Tag creation order and tag-name sort order say
nothing about that, so :func:`find_last_tag_with_prefix` walks the commit
sequence from HEAD and stops at the first commit carrying a matching tag.

Given this history (HEAD first) and tags::

    C3  <- app/4.0.3
    C1  <- app/4.0.1
          (D on another branch <- app/4.0.2)

the result is ``app/4.0.3``; ``app/4.0.2`` is never considered.
"""

from __future__ import annotations

import re

from branchtag.core.result import Err, Ok, Result
from branchtag.git.gateway import TagRef, VersionControlGateway
from branchtag.resolve.errors import NotFoundError, ResolveError
from branchtag.version.semver import DEFAULT_BUDGET, DigitBudget, parse_version

COMMIT_PAGE_SIZE = 10

__all__ = [
    "COMMIT_PAGE_SIZE",
    "find_last_pretty_commit_including_regex_in_subject",
    "find_last_pretty_commit_including_text_in_subject",
    "find_last_tag_with_prefix",
    "group_tags_by_commit",
]


def _matches_prefix(tag_name: str, prefix: str, delimiter: str) -> bool:
    if not prefix:
        # Bare version tags: no namespace, must start like a version.
        return delimiter not in tag_name and tag_name[:1].isdigit()
    return tag_name.startswith(f"{prefix}{delimiter}")


def group_tags_by_commit(
    tags: tuple[TagRef, ...], prefix: str, delimiter: str
) -> dict[str, list[str]]:
    """Map commit -> matching tag names, in first-seen order."""
    grouped: dict[str, list[str]] = {}
    for ref in tags:
        if not _matches_prefix(ref.name, prefix, delimiter):
            continue
        names = grouped.setdefault(ref.commit, [])
        if ref.name not in names:
            names.append(ref.name)
    return grouped


def _highest_version_tag(
    tag_names: list[str], prefix: str, delimiter: str, budget: DigitBudget
) -> Result[str, ResolveError]:
    skip = len(prefix) + len(delimiter) if prefix else 0
    best_name = tag_names[0]
    best_code = -1
    for name in tag_names:
        parsed = parse_version(name[skip:], budget)
        if isinstance(parsed, Err):
            return parsed
        code = parsed.value.code(budget)
        if code > best_code:
            best_name, best_code = name, code
    return Ok(best_name)


def find_last_tag_with_prefix(
    gateway: VersionControlGateway,
    prefix: str,
    delimiter: str = "/",
    budget: DigitBudget = DEFAULT_BUDGET,
) -> Result[str | None, ResolveError]:
    """Find the most recent reachable tag named ``<prefix><delimiter>...``.

    When one commit carries several matching tags the one with the highest
    version code wins; on equal codes the first listed wins.

    Returns:
        Ok(tag name), Ok(None) when no reachable commit carries a matching
        tag, or Err when git fails or a tied tag is not a valid version.
    """
    tags = gateway.list_tags()
    if isinstance(tags, Err):
        return tags

    grouped = group_tags_by_commit(tags.value, prefix, delimiter)
    if not grouped:
        return Ok(None)

    total = gateway.commit_count()
    if isinstance(total, Err):
        return total
    if total.value == 0:
        return Ok(None)

    for offset in range(total.value):
        commit = gateway.commit_at(offset)
        if isinstance(commit, Err):
            return commit
        names = grouped.get(commit.value)
        if not names:
            continue
        if len(names) == 1:
            return Ok(names[0])
        return _highest_version_tag(names, prefix, delimiter, budget)

    return Ok(None)


def _walk_pretty_commits(
    gateway: VersionControlGateway, matches: re.Pattern[str] | str, page_size: int
) -> Result[str | None, ResolveError]:
    total = gateway.commit_count()
    if isinstance(total, Err):
        return total

    offset = 0
    while offset < total.value:
        page = gateway.pretty_commits_from_offset(offset, page_size)
        if isinstance(page, Err):
            return page
        for line in page.value:
            found = matches.search(line) if isinstance(matches, re.Pattern) else matches in line
            if found:
                return Ok(line)
        offset += page_size
    return Ok(None)


def find_last_pretty_commit_including_regex_in_subject(
    gateway: VersionControlGateway,
    regex: re.Pattern[str] | str,
    page_size: int = COMMIT_PAGE_SIZE,
) -> Result[str, ResolveError]:
    """Most recent one-line commit whose summary contains a match of ``regex``.

    Commits are fetched ``page_size`` at a time from HEAD down to the root.
    Kept for repositories that recorded versions in commit subjects before
    tags were used.
    """
    pattern = re.compile(regex) if isinstance(regex, str) else regex
    found = _walk_pretty_commits(gateway, pattern, page_size)
    if isinstance(found, Err):
        return found
    if found.value is None:
        return Err(
            NotFoundError(
                what="commit",
                message=f"No commit with regex pattern '{pattern.pattern}' found",
            )
        )
    return Ok(found.value)


def find_last_pretty_commit_including_text_in_subject(
    gateway: VersionControlGateway,
    text: str,
    page_size: int = COMMIT_PAGE_SIZE,
) -> Result[str, ResolveError]:
    """Like the regex variant, with a case-sensitive substring match."""
    found = _walk_pretty_commits(gateway, text, page_size)
    if isinstance(found, Err):
        return found
    if found.value is None:
        return Err(NotFoundError(what="commit", message=f"No commit with text '{text}' found"))
    return Ok(found.value)
