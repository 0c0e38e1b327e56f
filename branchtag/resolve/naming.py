"""Tag and commit-message names for version lines.

A repository can carry several independent version lines. Each is namespaced
by a project qualifier and, optionally, a version specifier::

    version_tag_prefix("app", "fd")            -> "app-fd"
    bump_version_tag_string("4.1.5", "app")    -> "app/4.1.5"
    bump_version_commit_string("4.1.5", "app") -> "bump app version to 4.1.5"

Blank (empty or whitespace) qualifiers and specifiers are treated as absent.
"""

from __future__ import annotations

TAG_DELIMITER = "/"


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def version_tag_prefix(project_qualifier: str | None, version_specifier: str = "") -> str:
    if _blank(version_specifier):
        return "" if _blank(project_qualifier) else f"{project_qualifier}"
    if _blank(project_qualifier):
        return version_specifier
    return f"{project_qualifier}-{version_specifier}"


def bump_version_tag_string(
    version_string: str, project_qualifier: str | None, version_specifier: str = ""
) -> str:
    prefix = version_tag_prefix(project_qualifier, version_specifier)
    if not prefix.strip():
        return version_string
    return f"{prefix}{TAG_DELIMITER}{version_string}"


def bump_version_commit_prefix(project_qualifier: str | None, version_specifier: str = "") -> str:
    """Subject prefix of a (deprecated) version-bump commit."""
    if _blank(version_specifier):
        if _blank(project_qualifier):
            return "bump version to"
        return f"bump {project_qualifier} version to"
    if _blank(project_qualifier):
        return f"bump {version_specifier} version to"
    return f"bump {version_specifier} {project_qualifier} version to"


def bump_version_commit_string(
    version_string: str, project_qualifier: str | None, version_specifier: str = ""
) -> str:
    prefix = bump_version_commit_prefix(project_qualifier, version_specifier)
    return f"{prefix} {version_string}"


def version_from_tag(tag_name: str) -> str:
    """Version text of a tag: everything after the last delimiter."""
    return tag_name.rsplit(TAG_DELIMITER, 1)[-1]
