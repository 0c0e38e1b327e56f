from __future__ import annotations

from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from branchtag.cli.app import app
from branchtag.cli.context import CLIContext, build_orchestrator
from branchtag.core.config import Config
from branchtag.core.errors import ErrorCode
from branchtag.core.properties import Properties
from branchtag.core.result import Err, Ok, Result
from branchtag.git.gateway import CommandExecutionError
from branchtag.git.repository import GitRepository
from branchtag.output.console import MockConsole
from branchtag.release.orchestrator import OrchestratorSettings, ReleaseOrchestrator
from branchtag.release.tasks import TaskFailed
from branchtag.test._fakes import FakeGateway

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # The app callback writes these; register them so they are restored.
    for name in (
        "BRANCHTAG_REPO",
        "BRANCHTAG_CONFIG",
        "CICD_BRANCH_OVERRIDE",
        "CICD_DRYRUNMODE",
        "CICD_ENABLEPUSH",
    ):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


def _ctx(tmp_path: Path, config: Config | None = None, **properties: str) -> CLIContext:
    return CLIContext(
        repo=GitRepository(tmp_path),
        config=config or Config(),
        properties=Properties(values=dict(properties)),
        console=MockConsole(),
    )


def _patch_cicd(
    monkeypatch: pytest.MonkeyPatch,
    ctx: CLIContext,
    gateway: FakeGateway,
    **settings: object,
) -> None:
    import branchtag.cli.commands.cicd as cicd

    def fake_build_orchestrator(_ctx: CLIContext) -> ReleaseOrchestrator:
        return ReleaseOrchestrator(
            gateway,
            OrchestratorSettings(branch=gateway.branch, project_qualifier="app", **settings),  # type: ignore[arg-type]
            ctx.console,
        )

    monkeypatch.setattr(cicd, "build_context", lambda: ctx)
    monkeypatch.setattr(cicd, "build_orchestrator", fake_build_orchestrator)


def _console(ctx: CLIContext) -> MockConsole:
    assert isinstance(ctx.console, MockConsole)
    return ctx.console


# =============================================================================
# App callback and parse
# =============================================================================


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == "0.4.0"


def test_parse_prints_name_and_code(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--repo", str(tmp_path), "parse", "1.2.3-build.4"])
    assert result.exit_code == 0, result.output
    assert "name: 1.2.3-build.4" in result.output
    assert "code: 1020304" in result.output
    assert "form: intermediate" in result.output


def test_parse_uses_configured_budget(tmp_path: Path) -> None:
    (tmp_path / "branchtag.toml").write_text(
        "[cicd.digits]\nmajor = 8\nminor = 6\npatch = 3\n", encoding="utf-8"
    )
    result = runner.invoke(app, ["--repo", str(tmp_path), "parse", "0.5.105-build.1"])
    assert result.exit_code == 0, result.output
    assert "code: 510501" in result.output


def test_parse_malformed_exits_with_version_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--repo", str(tmp_path), "parse", "1.x.3"])
    assert result.exit_code == int(ErrorCode.VERSION_ERROR)


def test_invalid_config_exits_with_config_error(tmp_path: Path) -> None:
    config = tmp_path / "custom.toml"
    config.write_text("[cicd\n", encoding="utf-8")
    result = runner.invoke(
        app, ["--repo", str(tmp_path), "--config", str(config), "parse", "1.0.0"]
    )
    assert result.exit_code == int(ErrorCode.CONFIG_ERROR)


def test_repo_must_be_directory(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--repo", str(tmp_path / "missing"), "parse", "1.0.0"])
    assert result.exit_code == int(ErrorCode.USER_ERROR)


def test_property_option_overrides_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import os

    monkeypatch.setenv("CICD_ENABLEPUSH", "false")
    result = runner.invoke(
        app, ["-P", "cicd.enablePush=true", "--repo", str(tmp_path), "parse", "1.0.0"]
    )
    assert result.exit_code == 0, result.output
    assert os.environ["CICD_ENABLEPUSH"] == "true"


def test_bad_property_exits_with_user_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["-P", "=oops", "--repo", str(tmp_path), "parse", "1.0.0"])
    assert result.exit_code == int(ErrorCode.USER_ERROR)


# =============================================================================
# Context
# =============================================================================


def test_build_orchestrator_uses_branch_override(tmp_path: Path) -> None:
    def no_git(args: list[str]) -> Result[str, CommandExecutionError]:
        raise AssertionError(f"unexpected git call: {args}")

    ctx = CLIContext(
        repo=GitRepository(tmp_path, runner=no_git),
        config=Config(version_specifiers=("fd",), remote="upstream"),
        properties=Properties(
            values={
                "cicd.branch.override": "release-2",
                "cicd.dryRunMode": "",
                "cicd.enablePush": "true",
            }
        ),
        console=MockConsole(),
    )

    orchestrator = build_orchestrator(ctx)

    settings = orchestrator.settings
    assert settings.branch == "release-2"
    assert settings.project_qualifier == tmp_path.name
    assert settings.version_specifiers == ("fd",)
    assert settings.dry_run is True
    assert settings.enable_push is True
    assert settings.remote == "upstream"


def test_build_orchestrator_reads_current_branch(tmp_path: Path) -> None:
    def git(args: list[str]) -> Result[str, CommandExecutionError]:
        assert args == ["rev-parse", "--abbrev-ref", "HEAD"]
        return Ok("develop")

    ctx = CLIContext(
        repo=GitRepository(tmp_path, runner=git),
        config=Config(project_qualifier="app"),
        properties=Properties(),
        console=MockConsole(),
    )

    orchestrator = build_orchestrator(ctx)

    assert orchestrator.settings.branch == "develop"
    assert orchestrator.settings.project_qualifier == "app"
    assert orchestrator.settings.dry_run is False


def test_build_orchestrator_exits_when_branch_unknown(tmp_path: Path) -> None:
    def git(args: list[str]) -> Result[str, CommandExecutionError]:
        return Err(CommandExecutionError(command=" ".join(args), message="not a git repository"))

    ctx = CLIContext(
        repo=GitRepository(tmp_path, runner=git),
        config=Config(),
        properties=Properties(),
        console=MockConsole(),
    )

    with pytest.raises(typer.Exit) as exc:
        build_orchestrator(ctx)

    assert exc.value.exit_code == int(ErrorCode.VCS_ERROR)


# =============================================================================
# CI/CD commands
# =============================================================================


def test_perform_runs_tasks_then_tags(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import branchtag.cli.commands.cicd as cicd

    ctx = _ctx(tmp_path, Config(tasks={"test": "pytest -q"}))
    gateway = FakeGateway(commits=["h1", "h0"], branch="develop").add_tag("app/1.0.0-build.1", "h0")
    _patch_cicd(monkeypatch, ctx, gateway, develop_tasks=("test",))

    ran: list[tuple[str, ...]] = []

    def fake_run_dependent_tasks(
        names: tuple[str, ...], commands: dict[str, str], cwd: Path, console: object
    ) -> Result[tuple[str, ...], TaskFailed]:
        ran.append(names)
        assert gateway.mutations() == []
        return Ok(names)

    monkeypatch.setattr(cicd, "run_dependent_tasks", fake_run_dependent_tasks)

    cicd.perform()

    assert ran == [("test",)]
    assert gateway.tag_names()[-1] == "app/1.0.0-build.2"
    console = _console(ctx)
    assert console.find("OK tagged app/1.0.0-build.2")
    assert console.find("Perform tasks [test] and bump version on branch: develop")


def test_perform_task_failure_exits_before_tagging(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import branchtag.cli.commands.cicd as cicd

    ctx = _ctx(tmp_path)
    gateway = FakeGateway(commits=["h0"], branch="release").add_tag("app/1.0.0-build.1", "h0")
    _patch_cicd(monkeypatch, ctx, gateway, release_tasks=("publish",))

    def failing_tasks(
        names: tuple[str, ...], commands: dict[str, str], cwd: Path, console: object
    ) -> Result[tuple[str, ...], TaskFailed]:
        return Err(TaskFailed(name="publish", command="twine upload", returncode=1))

    monkeypatch.setattr(cicd, "run_dependent_tasks", failing_tasks)

    with pytest.raises(typer.Exit) as exc:
        cicd.perform()

    assert exc.value.exit_code == int(ErrorCode.TASK_ERROR)
    assert gateway.mutations() == []


def test_perform_reports_dry_run(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import branchtag.cli.commands.cicd as cicd

    ctx = _ctx(tmp_path)
    gateway = FakeGateway(commits=["h0"], branch="develop").add_tag("app/1.0.0-build.1", "h0")
    _patch_cicd(monkeypatch, ctx, gateway, dry_run=True)

    cicd.perform()

    assert gateway.mutations() == []
    assert _console(ctx).find("info: dry run: no refs were changed")


def test_describe_without_versions_exits_with_vcs_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import branchtag.cli.commands.cicd as cicd

    ctx = _ctx(tmp_path)
    _patch_cicd(monkeypatch, ctx, FakeGateway(commits=["h0"], branch="develop"))

    with pytest.raises(typer.Exit) as exc:
        cicd.describe()

    assert exc.value.exit_code == int(ErrorCode.VCS_ERROR)
    assert _console(ctx).has_error()


def test_last_version_lists_each_specifier(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import branchtag.cli.commands.cicd as cicd

    ctx = _ctx(tmp_path)
    gateway = (
        FakeGateway(commits=["h0"], branch="develop")
        .add_tag("app-fd/1.0.0-build.1", "h0")
        .add_tag("app-wd/2.0.0-build.3", "h0")
    )
    _patch_cicd(monkeypatch, ctx, gateway, version_specifiers=("fd", "wd"))

    cicd.last_version()

    console = _console(ctx)
    assert console.find("fd: 1.0.0-build.1 from tag app-fd/1.0.0-build.1")
    assert console.find("wd: 2.0.0-build.3 from tag app-wd/2.0.0-build.3")


def test_notes_unknown_specifier(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import branchtag.cli.commands.cicd as cicd

    ctx = _ctx(tmp_path)
    _patch_cicd(monkeypatch, ctx, FakeGateway(commits=["h0"], branch="develop"))

    with pytest.raises(typer.Exit) as exc:
        cicd.notes(specifier="nope", containing="", until="")

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_notes_prints_commits_since_tag(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import branchtag.cli.commands.cicd as cicd

    ctx = _ctx(tmp_path)
    gateway = FakeGateway(
        commits=["h1", "h0"], branch="develop", subjects={"h1": "add export"}
    ).add_tag("app/1.0.0-build.1", "h0")
    _patch_cicd(monkeypatch, ctx, gateway)

    cicd.notes(specifier="", containing="", until="")

    assert _console(ctx).find("add export")


def test_notes_containing_walks_back_to_marker(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import branchtag.cli.commands.cicd as cicd

    ctx = _ctx(tmp_path)
    gateway = FakeGateway(
        commits=["h2", "h1", "h0"],
        branch="develop",
        subjects={
            "h2": "add export\n\n    Related work items: #7",
            "h1": "bump app version to 1.0.0",
            "h0": "old work\n\n    Related work items: #1",
        },
    )
    _patch_cicd(monkeypatch, ctx, gateway)

    cicd.notes(specifier="", containing="Related work items", until="bump app version")

    console = _console(ctx)
    assert console.find("#7")
    assert not console.find("old work")
    assert all(c[0] != "list_tags" for c in gateway.calls)
