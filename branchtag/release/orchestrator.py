"""Branch-driven release state machine.

The checked-out branch decides what a CI/CD run does:

- develop (``develop``, ``develop-*``): tag the next build number
  (``1.2.3-build.4`` -> ``1.2.3-build.5``). After a final ``1.2.3`` tag the
  next patch starts instead (``1.2.4-build.0``).
- release (``release``, ``release-*``): turn the last intermediate version
  into a final tag (``1.2.3``) on the same commit, drop the intermediate tag
  and start the next patch (``1.2.4-build.0``).
- dev launch (``main``, ``main-*``) and anything else: nothing to tag.

Every ref mutation goes through :meth:`ReleaseOrchestrator._perform_modification`
so a dry run logs exactly what would happen. Deleting refs that may not exist
is tolerated; every other failed git command ends the run.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from branchtag.core.config import DEFAULT_REMOTE, BranchPrefixes
from branchtag.core.result import Err, Ok, Result
from branchtag.git.gateway import CommandExecutionError, VersionControlGateway
from branchtag.output.console import ConsoleProtocol
from branchtag.release.branches import BranchClass, classify_branch
from branchtag.release.notes import commits_containing_message_text, create_release_notes
from branchtag.resolve.errors import ResolveError
from branchtag.resolve.lookup import LastVersion, find_last_version
from branchtag.resolve.naming import bump_version_tag_string
from branchtag.version.semver import (
    DEFAULT_BUDGET,
    DEFAULT_DASH_QUALIFIER,
    BumpKind,
    DigitBudget,
    SemanticVersion,
    apply_bump,
)

__all__ = [
    "OrchestratorSettings",
    "ReleaseOrchestrator",
    "RunReport",
    "SkippedSpecifier",
    "develop_bump",
    "tmp_branch_name",
]

GitAction = Callable[[], Result[str, CommandExecutionError]]


@dataclass(frozen=True, slots=True)
class OrchestratorSettings:
    """Inputs of one CI/CD run.

    Attributes:
        branch: Branch being built (possibly overridden by a property).
        project_qualifier: Tag namespace, e.g. ``app``.
        version_specifiers: Independent version lines; empty means one
            unnamed line.
        enable_push: Push created tags and delete remote tags.
        dry_run: Log mutations instead of performing them.
    """

    branch: str
    project_qualifier: str | None = None
    version_specifiers: tuple[str, ...] = ()
    budget: DigitBudget = DEFAULT_BUDGET
    prefixes: BranchPrefixes = field(default_factory=BranchPrefixes)
    develop_tasks: tuple[str, ...] = ()
    release_tasks: tuple[str, ...] = ()
    dry_run: bool = False
    enable_push: bool = False
    remote: str = DEFAULT_REMOTE


@dataclass(frozen=True, slots=True)
class SkippedSpecifier:
    specifier: str
    reason: str


def _empty_strs() -> list[str]:
    return []


def _empty_skips() -> list[SkippedSpecifier]:
    return []


def _empty_failures() -> list[CommandExecutionError]:
    return []


@dataclass
class RunReport:
    """What a run did (or, in a dry run, would have skipped)."""

    branch: str
    branch_class: BranchClass
    dry_run: bool
    created_tags: list[str] = field(default_factory=_empty_strs)
    pushed_tags: list[str] = field(default_factory=_empty_strs)
    deleted_tags: list[str] = field(default_factory=_empty_strs)
    skipped: list[SkippedSpecifier] = field(default_factory=_empty_skips)
    tolerated_failures: list[CommandExecutionError] = field(default_factory=_empty_failures)


def tmp_branch_name(version_specifier: str, next_version: SemanticVersion) -> str:
    if version_specifier.strip():
        return f"tmp-{version_specifier}-{next_version.name}"
    return f"tmp-{next_version.name}"


def develop_bump(version: SemanticVersion) -> BumpKind:
    """Bump a develop run applies: the build number, or the patch once released.

    A final version has already shipped, so development continues on the next
    patch rather than on another build of the released one.
    """
    return BumpKind.BUILD if version.is_intermediate else BumpKind.PATCH


def _next_intermediate(version: SemanticVersion, kind: BumpKind) -> SemanticVersion:
    bumped = apply_bump(version, kind)
    if bumped.is_intermediate:
        return bumped
    return bumped.with_dash_qualifier(DEFAULT_DASH_QUALIFIER)


def _format_tasks(tasks: tuple[str, ...]) -> str:
    return "[" + ", ".join(tasks) + "]"


class ReleaseOrchestrator:
    """Runs the CI/CD step for the current branch.

    Attributes:
        branch_class: Classification of ``settings.branch``.
    """

    def __init__(
        self,
        gateway: VersionControlGateway,
        settings: OrchestratorSettings,
        console: ConsoleProtocol,
    ) -> None:
        self._gateway = gateway
        self._settings = settings
        self._console = console
        self._last_versions: dict[str, LastVersion] | None = None
        self.branch_class = classify_branch(settings.branch, settings.prefixes)

    @property
    def settings(self) -> OrchestratorSettings:
        return self._settings

    @property
    def specifiers(self) -> tuple[str, ...]:
        return self._settings.version_specifiers or ("",)

    # -- resolution ----------------------------------------------------------

    def last_versions(self) -> Result[dict[str, LastVersion], ResolveError]:
        """Last version per specifier, resolved once per orchestrator."""
        if self._last_versions is not None:
            return Ok(self._last_versions)

        resolved: dict[str, LastVersion] = {}
        for specifier in self.specifiers:
            found = find_last_version(
                self._gateway,
                self._settings.project_qualifier,
                specifier,
                self._settings.budget,
                self._console,
            )
            if isinstance(found, Err):
                return found
            last = found.value
            if last.fallthrough is not None:
                self._console.log(
                    f"no {last.fallthrough.tag_prefix or 'bare'} version tag reachable; "
                    f"using deprecated version commit: {last.text}"
                )
            label = f"{specifier} " if specifier else ""
            self._console.log(
                f"last {label}version: {self.branch_specific_version_name(last.version)}"
            )
            resolved[specifier] = last

        self._last_versions = resolved
        return Ok(resolved)

    def branch_specific_version_name(self, version: SemanticVersion) -> str:
        """Full name, except on release branches where only ``major.minor.patch`` shows."""
        on_release = self.branch_class is BranchClass.RELEASE
        return version.version_string(
            include_build_number=not on_release, include_dash_qualifier=not on_release
        )

    # -- reporting -----------------------------------------------------------

    def describe(self) -> Result[str, ResolveError]:
        """One-line description of what :meth:`perform` will do."""
        branch = self._settings.branch
        if self.branch_class is BranchClass.NO_OP:
            return Ok(f"Do nothing because the branch has no special behavior triggers: {branch}")

        versions = self.last_versions()
        if isinstance(versions, Err):
            return versions

        parts: list[str] = []
        for specifier, last in versions.value.items():
            prefix = f"{specifier}/" if specifier else ""
            v = last.version
            match self.branch_class:
                case BranchClass.DEVELOP:
                    bumped = _next_intermediate(v, develop_bump(v))
                    parts.append(f"{prefix}{v.version_string()} -> {prefix}{bumped.version_string()}")
                case BranchClass.RELEASE:
                    parts.append(f"{prefix}{v.version_string(False, False)}")
                case _:
                    parts.append(f"{prefix}{_next_intermediate(v, BumpKind.PATCH).name}")
        desc = ", ".join(parts)

        match self.branch_class:
            case BranchClass.DEVELOP:
                tasks = _format_tasks(self._settings.develop_tasks)
                return Ok(f"Perform tasks {tasks} and bump version on branch: {branch}; {desc}")
            case BranchClass.RELEASE:
                tasks = _format_tasks(self._settings.release_tasks)
                return Ok(f"Perform tasks {tasks} and create tag for version: {desc}")
            case _:
                return Ok(f"Create next dev/release branches for versions: {desc}")

    def release_notes(self, version_specifier: str = "") -> Result[str, ResolveError]:
        versions = self.last_versions()
        if isinstance(versions, Err):
            return versions

        last = versions.value.get(version_specifier)
        if last is None:
            self._console.log(f"Could not find version for versionSpecifier '{version_specifier}'")
            return Ok("")
        return create_release_notes(
            self._gateway,
            self._settings.project_qualifier,
            version_specifier,
            last.text,
            console=self._console,
        )

    def commits_mentioning(
        self, text: str, until_matches: str | None = None
    ) -> Result[str, ResolveError]:
        """Full commits from HEAD mentioning ``text``, back to one mentioning ``until_matches``."""
        return commits_containing_message_text(self._gateway, text, until_matches)

    # -- the run -------------------------------------------------------------

    def perform(self) -> Result[RunReport, ResolveError]:
        settings = self._settings
        self._console.log(f"dryRunMode = {settings.dry_run}")
        self._console.log(f"projectQualifier = {settings.project_qualifier}")
        self._console.log(f"current branch is: {settings.branch}; class: {self.branch_class}")

        report = RunReport(
            branch=settings.branch, branch_class=self.branch_class, dry_run=settings.dry_run
        )
        match self.branch_class:
            case BranchClass.DEVELOP:
                outcome = self._bump_build_numbers(report)
            case BranchClass.RELEASE:
                outcome = self._publish_release_tags(report)
            case _:
                self._console.log(f"There is no configuration for CI/CD from branch: {settings.branch}")
                outcome = Ok(None)

        if isinstance(outcome, Err):
            return outcome
        self._console.log("Perform CI/CD task completed")
        return Ok(report)

    def _bump_build_numbers(self, report: RunReport) -> Result[None, ResolveError]:
        versions = self.last_versions()
        if isinstance(versions, Err):
            return versions

        for specifier, last in versions.value.items():
            version = last.version
            bumped = self._bump_version(specifier, version, develop_bump(version), report)
            if isinstance(bumped, Err):
                return bumped
        return Ok(None)

    def _publish_release_tags(self, report: RunReport) -> Result[None, ResolveError]:
        self._console.log("publishing release tag and beginning next patch version")
        versions = self.last_versions()
        if isinstance(versions, Err):
            return versions

        for specifier, last in versions.value.items():
            version = last.version
            up_to_date = self._ensure_branch_up_to_date(
                specifier, _next_intermediate(version, BumpKind.PATCH), report
            )
            if isinstance(up_to_date, Err):
                return up_to_date

            if not version.is_intermediate:
                self._skip(
                    report,
                    specifier,
                    f"Last tag is NOT intermediate form: {version.name}; "
                    "skipping release--you'll need to release manually",
                )
                continue

            if last.tag is None:
                self._skip(
                    report,
                    specifier,
                    "Last version DID NOT come from tag; "
                    "skipping release--you'll need to add a proper tag or release manually",
                )
                continue

            commit = self._gateway.commit_of_tag(last.tag)
            if isinstance(commit, Err):
                return commit
            commit_to_tag = commit.value.strip()
            self._console.log(f"commit to tag: {commit_to_tag}")
            if not commit_to_tag:
                self._skip(
                    report,
                    specifier,
                    "Could not find commit to tag; skipping release--you'll need to release manually",
                )
                continue

            created = self._create_version_tag(
                specifier, version.version_string(False, False), commit_to_tag, report
            )
            if isinstance(created, Err):
                return created

            self._delete_remote_and_local_tag(last.tag, report)

            bumped = self._bump_version(
                specifier,
                version,
                BumpKind.PATCH,
                report,
                ensure_up_to_date=False,
                commit=commit_to_tag,
            )
            if isinstance(bumped, Err):
                return bumped
        return Ok(None)

    def _bump_version(
        self,
        specifier: str,
        version: SemanticVersion,
        kind: BumpKind,
        report: RunReport,
        *,
        ensure_up_to_date: bool = True,
        commit: str | None = None,
    ) -> Result[None, CommandExecutionError]:
        next_version = _next_intermediate(version, kind)
        self._console.log(f"bumping {kind}: {version.name} -> {next_version.name}")

        if ensure_up_to_date:
            up_to_date = self._ensure_branch_up_to_date(specifier, next_version, report)
            if isinstance(up_to_date, Err):
                return up_to_date

        self._console.log(
            f"Tagging new version bump: {next_version.name} for specifier: {specifier}"
        )
        return self._create_version_tag(specifier, next_version.name, commit, report)

    # -- ref mutations -------------------------------------------------------

    def _ensure_branch_up_to_date(
        self, specifier: str, next_version: SemanticVersion, report: RunReport
    ) -> Result[None, CommandExecutionError]:
        """Re-check out the target branch from the remote before tagging."""
        branch = self._settings.branch
        tmp_branch = tmp_branch_name(specifier, next_version)

        created = self._perform_modification(
            f"creating temporary branch: {tmp_branch}",
            lambda: self._gateway.create_local_branch(tmp_branch),
        )
        if isinstance(created, Err):
            return created

        self._perform_cleanup(
            f"Ensuring {branch} is checked out and up-to-date: first deleting local branch: {branch}",
            lambda: self._gateway.delete_local_branch(branch),
            report,
        )

        checked_out = self._perform_modification(
            f"Ensuring {branch} is checked out and up-to-date: next checking out remote branch: {branch}",
            lambda: self._gateway.checkout(branch),
        )
        if isinstance(checked_out, Err):
            return checked_out

        self._perform_cleanup(
            f"deleting temporary branch: {tmp_branch}",
            lambda: self._gateway.delete_local_branch(tmp_branch),
            report,
        )
        return Ok(None)

    def _create_version_tag(
        self,
        specifier: str,
        version_string: str,
        commit: str | None,
        report: RunReport,
    ) -> Result[None, CommandExecutionError]:
        tag = bump_version_tag_string(version_string, self._settings.project_qualifier, specifier)

        def create() -> Result[str, CommandExecutionError]:
            tagged = self._gateway.tag(tag, commit)
            if isinstance(tagged, Err):
                return tagged
            report.created_tags.append(tag)
            self._log_output(tagged.value)
            if not self._settings.enable_push:
                self._console.log(f"Configured to not push--not creating remote tag: {tag}")
                return Ok("")
            pushed = self._gateway.push(self._settings.remote, tag)
            if isinstance(pushed, Ok):
                report.pushed_tags.append(tag)
            return pushed

        target = commit
        if target is None:
            head = self._gateway.head_commit_hash()
            if isinstance(head, Err):
                return head
            target = f"HEAD ({head.value})"

        performed = self._perform_modification(
            f"pushing version tag: {tag}; tag will be on commit {target}", create
        )
        if isinstance(performed, Err):
            return performed
        return Ok(None)

    def _delete_remote_and_local_tag(self, tag: str, report: RunReport) -> None:
        if self._settings.enable_push:
            self._perform_cleanup(
                f"deleting remote tag: {tag}",
                lambda: self._gateway.delete_remote_tag(self._settings.remote, tag),
                report,
            )
        else:
            self._console.log(f"Configured to not push--not deleting remote tag: {tag}")

        if self._perform_cleanup(
            f"deleting local tag: {tag}", lambda: self._gateway.delete_tag(tag), report
        ):
            report.deleted_tags.append(tag)

    def _perform_modification(
        self, description: str, action: GitAction
    ) -> Result[bool, CommandExecutionError]:
        """Run ``action`` unless in dry-run mode.

        Returns:
            Ok(True) if performed, Ok(False) if skipped by dry run, Err if the
            command failed.
        """
        if self._settings.dry_run:
            self._console.log(f"DRY RUN: would have performed modification: {description}")
            return Ok(False)

        self._console.log(f"Performing modification: {description}")
        result = action()
        if isinstance(result, Err):
            self._console.error(f"{description}: {result.error.message}")
            return result
        self._log_output(result.value)
        return Ok(True)

    def _perform_cleanup(self, description: str, action: GitAction, report: RunReport) -> bool:
        """Like :meth:`_perform_modification`, but a failed command is only logged.

        Returns:
            True if the command ran and succeeded.
        """
        if self._settings.dry_run:
            self._console.log(f"DRY RUN: would have performed modification: {description}")
            return False

        self._console.log(f"Performing modification: {description}")
        result = action()
        if isinstance(result, Err):
            report.tolerated_failures.append(result.error)
            self._console.log(
                f"ignoring failed command '{result.error.command}': {result.error.message}"
            )
            return False
        self._log_output(result.value)
        return True

    def _skip(self, report: RunReport, specifier: str, reason: str) -> None:
        report.skipped.append(SkippedSpecifier(specifier=specifier, reason=reason))
        self._console.warning(reason)

    def _log_output(self, output: str) -> None:
        if output.strip():
            self._console.log(output.strip())
