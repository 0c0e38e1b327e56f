"""Git implementation of the version-control gateway.

Every method builds a git argument list and hands it to a
:data:`~branchtag.git.gateway.CommandRunner`. The default runner executes
``git -C <path> ...`` through :mod:`branchtag.platform.process`.

Usage:
    repo = GitRepository(Path("."))
    match repo.commit_count():
        case Ok(count):
            print(f"{count} commits on this branch")
        case Err(e):
            print(f"git failed: {e.message}")
"""

from __future__ import annotations

from pathlib import Path

from branchtag.core.result import Err, Ok, Result
from branchtag.git.gateway import CommandExecutionError, CommandRunner, TagRef
from branchtag.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone"})

# name<TAB>object<TAB>peeled commit (empty for lightweight tags)
_TAG_FORMAT = "--format=%(refname:strip=2)%09%(objectname)%09%(*objectname)"

__all__ = ["GitRepository", "git_runner", "parse_tag_refs"]


def git_runner(path: Path) -> CommandRunner:
    """Build a runner executing git inside ``path``."""

    def run(args: list[str]) -> Result[str, CommandExecutionError]:
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        )
        result = run_process(["git", "-C", str(path), *args], cwd=path, timeout=timeout)
        match result:
            case Err(e):
                return Err(
                    CommandExecutionError(
                        command=" ".join(args),
                        message=e.stderr.strip() or e.stdout.strip() or str(e),
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(stdout.strip())

    return run


def parse_tag_refs(output: str) -> tuple[TagRef, ...]:
    """Parse ``for-each-ref`` output produced with the tag format."""
    refs: list[TagRef] = []
    for line in output.splitlines():
        parts = line.strip().split("\t")
        if len(parts) < 2 or not parts[0] or not parts[1]:
            continue
        peeled = parts[2] if len(parts) > 2 else ""
        refs.append(TagRef(name=parts[0], commit=peeled or parts[1]))
    return tuple(refs)


class GitRepository:
    """Git-backed :class:`~branchtag.git.gateway.VersionControlGateway`.

    Attributes:
        path: Repository working tree.
    """

    def __init__(self, path: Path, runner: CommandRunner | None = None) -> None:
        self.path = path
        self._runner = runner or git_runner(path)

    def run_command(self, *arguments: str) -> Result[str, CommandExecutionError]:
        """Run arbitrary git arguments; use with care."""
        return self._runner(list(arguments))

    # -- history -------------------------------------------------------------

    def list_tags(self) -> Result[tuple[TagRef, ...], CommandExecutionError]:
        result = self.run_command("for-each-ref", _TAG_FORMAT, "refs/tags")
        return result.map(parse_tag_refs)

    def commit_at(self, offset: int) -> Result[str, CommandExecutionError]:
        result = self.run_command(
            "log", f"--skip={offset}", "--max-count=1", "--pretty=format:%H", "--no-patch"
        )
        return result.map(lambda out: out.replace('"', "").strip())

    def pretty_commits_from_offset(
        self, offset: int, count: int
    ) -> Result[list[str], CommandExecutionError]:
        result = self.run_command(
            "log", "--abbrev-commit", "--pretty=oneline", f"--skip={offset}", f"--max-count={count}"
        )
        return result.map(lambda out: [ln for ln in out.splitlines() if ln.strip()])

    def full_commit_at(self, offset: int) -> Result[str, CommandExecutionError]:
        return self.run_command("log", f"--skip={offset}", "--max-count=1", "--pretty=full")

    def full_commits_between(
        self, start_ref: str, end_ref: str = "HEAD"
    ) -> Result[str, CommandExecutionError]:
        return self.run_command("log", "--pretty=full", f"{end_ref}...{start_ref}")

    def commit_count(self) -> Result[int, CommandExecutionError]:
        result = self.run_command("rev-list", "--count", "HEAD")
        if isinstance(result, Err):
            return result
        try:
            return Ok(int(result.value))
        except ValueError:
            return Err(
                CommandExecutionError(
                    command="rev-list --count HEAD",
                    message=f"unexpected commit count: {result.value!r}",
                )
            )

    def commit_of_tag(self, tag: str) -> Result[str, CommandExecutionError]:
        return self.run_command("rev-list", "-n", "1", tag)

    def current_branch_name(self) -> Result[str, CommandExecutionError]:
        return self.run_command("rev-parse", "--abbrev-ref", "HEAD")

    def head_commit_hash(self, short: bool = True) -> Result[str, CommandExecutionError]:
        if short:
            return self.run_command("rev-parse", "--short=7", "HEAD")
        return self.run_command("rev-parse", "HEAD")

    # -- refs ----------------------------------------------------------------

    def create_local_branch(self, name: str) -> Result[str, CommandExecutionError]:
        return self.run_command("checkout", "-b", name)

    def checkout(self, branch: str) -> Result[str, CommandExecutionError]:
        return self.run_command("checkout", branch)

    def delete_local_branch(self, name: str) -> Result[str, CommandExecutionError]:
        return self.run_command("branch", "-D", name)

    def tag(self, name: str, commit: str | None = None) -> Result[str, CommandExecutionError]:
        if commit is None:
            return self.run_command("tag", name)
        return self.run_command("tag", name, commit)

    def delete_tag(self, name: str) -> Result[str, CommandExecutionError]:
        return self.run_command("tag", "--delete", name)

    def delete_remote_tag(self, remote: str, name: str) -> Result[str, CommandExecutionError]:
        return self.run_command("push", "--delete", remote, name)

    def push(self, remote: str, ref: str) -> Result[str, CommandExecutionError]:
        return self.run_command("push", remote, ref)
