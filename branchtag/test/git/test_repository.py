"""Tests for git/repository.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from branchtag.core.result import Err, Ok, Result
from branchtag.git.gateway import CommandExecutionError, TagRef
from branchtag.git.repository import GitRepository, git_runner, parse_tag_refs
from branchtag.platform.process import ProcessError


class RecordingRunner:
    """Command runner returning canned output per argument list."""

    def __init__(self, responses: dict[tuple[str, ...], str] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[list[str]] = []

    def __call__(self, args: list[str]) -> Result[str, CommandExecutionError]:
        self.calls.append(args)
        return Ok(self.responses.get(tuple(args), ""))


def _repo(tmp_path: Path, runner: RecordingRunner) -> GitRepository:
    return GitRepository(tmp_path, runner=runner)


# =============================================================================
# Tag listing
# =============================================================================


class TestParseTagRefs:
    def test_lightweight_tag_uses_object(self) -> None:
        out = "app/0.0.1\tec7dea9\t\n"
        assert parse_tag_refs(out) == (TagRef("app/0.0.1", "ec7dea9"),)

    def test_annotated_tag_is_peeled(self) -> None:
        out = "app/0.0.1\ttagobject1\tcommit1"
        assert parse_tag_refs(out) == (TagRef("app/0.0.1", "commit1"),)

    def test_keeps_listing_order_and_skips_junk(self) -> None:
        out = "app/0.0.2\tc2\t\n\nbroken\napp/0.0.1\tc1\t\n"
        refs = parse_tag_refs(out)
        assert [r.name for r in refs] == ["app/0.0.2", "app/0.0.1"]

    def test_empty_output(self) -> None:
        assert parse_tag_refs("") == ()


class TestListTags:
    def test_uses_for_each_ref(self, tmp_path: Path) -> None:
        runner = RecordingRunner()
        _repo(tmp_path, runner).list_tags()
        args = runner.calls[0]
        assert args[0] == "for-each-ref"
        assert args[-1] == "refs/tags"
        assert args[1].startswith("--format=%(refname:strip=2)")


# =============================================================================
# History
# =============================================================================


class TestHistory:
    def test_commit_at(self, tmp_path: Path) -> None:
        runner = RecordingRunner(
            {("log", "--skip=3", "--max-count=1", "--pretty=format:%H", "--no-patch"): '"abc"'}
        )
        result = _repo(tmp_path, runner).commit_at(3)
        assert result == Ok("abc")

    def test_pretty_commits_page(self, tmp_path: Path) -> None:
        runner = RecordingRunner(
            {
                ("log", "--abbrev-commit", "--pretty=oneline", "--skip=10", "--max-count=10"): (
                    "abc1234 first\n\ndef5678 second"
                )
            }
        )
        result = _repo(tmp_path, runner).pretty_commits_from_offset(10, 10)
        assert result == Ok(["abc1234 first", "def5678 second"])

    def test_full_commit_at(self, tmp_path: Path) -> None:
        runner = RecordingRunner()
        _repo(tmp_path, runner).full_commit_at(2)
        assert runner.calls == [["log", "--skip=2", "--max-count=1", "--pretty=full"]]

    def test_full_commits_between_defaults_to_head(self, tmp_path: Path) -> None:
        runner = RecordingRunner()
        _repo(tmp_path, runner).full_commits_between("app/1.0.0-build.3")
        assert runner.calls == [["log", "--pretty=full", "HEAD...app/1.0.0-build.3"]]

    def test_commit_count(self, tmp_path: Path) -> None:
        runner = RecordingRunner({("rev-list", "--count", "HEAD"): "42"})
        assert _repo(tmp_path, runner).commit_count() == Ok(42)

    def test_commit_count_rejects_garbage(self, tmp_path: Path) -> None:
        runner = RecordingRunner({("rev-list", "--count", "HEAD"): "fatal"})
        result = _repo(tmp_path, runner).commit_count()
        assert isinstance(result, Err)
        assert "unexpected commit count" in result.error.message

    def test_commit_of_tag(self, tmp_path: Path) -> None:
        runner = RecordingRunner({("rev-list", "-n", "1", "app/1.0.0"): "c1"})
        assert _repo(tmp_path, runner).commit_of_tag("app/1.0.0") == Ok("c1")

    def test_current_branch_name(self, tmp_path: Path) -> None:
        runner = RecordingRunner({("rev-parse", "--abbrev-ref", "HEAD"): "develop"})
        assert _repo(tmp_path, runner).current_branch_name() == Ok("develop")

    @pytest.mark.parametrize(
        ("short", "expected"),
        [(True, ["rev-parse", "--short=7", "HEAD"]), (False, ["rev-parse", "HEAD"])],
    )
    def test_head_commit_hash(self, tmp_path: Path, short: bool, expected: list[str]) -> None:
        runner = RecordingRunner()
        _repo(tmp_path, runner).head_commit_hash(short=short)
        assert runner.calls == [expected]


# =============================================================================
# Ref mutations
# =============================================================================


class TestRefs:
    def test_tag_on_commit(self, tmp_path: Path) -> None:
        runner = RecordingRunner()
        _repo(tmp_path, runner).tag("the_tag/0.1.2-build.0", "c0ffee")
        assert runner.calls == [["tag", "the_tag/0.1.2-build.0", "c0ffee"]]

    def test_tag_on_head(self, tmp_path: Path) -> None:
        runner = RecordingRunner()
        _repo(tmp_path, runner).tag("the_tag/0.1.2-build.0")
        assert runner.calls == [["tag", "the_tag/0.1.2-build.0"]]

    def test_delete_local_tag(self, tmp_path: Path) -> None:
        runner = RecordingRunner()
        _repo(tmp_path, runner).delete_tag("the_tag/0.1.2-build.0")
        assert runner.calls == [["tag", "--delete", "the_tag/0.1.2-build.0"]]

    def test_delete_remote_tag(self, tmp_path: Path) -> None:
        runner = RecordingRunner()
        _repo(tmp_path, runner).delete_remote_tag("origin", "the_tag/0.1.2-build.0")
        assert runner.calls == [["push", "--delete", "origin", "the_tag/0.1.2-build.0"]]

    def test_branch_operations(self, tmp_path: Path) -> None:
        runner = RecordingRunner()
        repo = _repo(tmp_path, runner)
        repo.create_local_branch("tmp-1.0.1-build.0")
        repo.checkout("develop")
        repo.delete_local_branch("tmp-1.0.1-build.0")
        repo.push("origin", "app/1.0.1-build.0")
        assert runner.calls == [
            ["checkout", "-b", "tmp-1.0.1-build.0"],
            ["checkout", "develop"],
            ["branch", "-D", "tmp-1.0.1-build.0"],
            ["push", "origin", "app/1.0.1-build.0"],
        ]


# =============================================================================
# Default runner
# =============================================================================


class TestGitRunner:
    def test_maps_process_error(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import branchtag.git.repository as repository

        seen: dict[str, object] = {}

        def fake_run(cmd: list[str], cwd: Path, env: object = None, *, timeout: float | None = None):
            seen["cmd"] = cmd
            seen["timeout"] = timeout
            return Err(ProcessError(tuple(cmd), 128, "", "fatal: not a git repository\n"))

        monkeypatch.setattr(repository, "run_process", fake_run)
        result = git_runner(tmp_path)(["rev-parse", "HEAD"])

        assert isinstance(result, Err)
        assert result.error.command == "rev-parse HEAD"
        assert result.error.message == "fatal: not a git repository"
        assert result.error.returncode == 128
        assert seen["cmd"] == ["git", "-C", str(tmp_path), "rev-parse", "HEAD"]

    def test_network_commands_get_longer_timeout(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import branchtag.git.repository as repository

        timeouts: list[float | None] = []

        def fake_run(cmd: list[str], cwd: Path, env: object = None, *, timeout: float | None = None):
            timeouts.append(timeout)
            return Ok(" out \n")

        monkeypatch.setattr(repository, "run_process", fake_run)
        runner = git_runner(tmp_path)
        assert runner(["tag", "x"]) == Ok("out")
        runner(["push", "origin", "x"])

        assert timeouts[0] is not None and timeouts[1] is not None
        assert timeouts[1] > timeouts[0]
