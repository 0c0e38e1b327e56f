"""CI/CD commands: perform, describe, notes, last-version."""

from __future__ import annotations

import typer

from branchtag.cli.commands._helpers import exit_on_error
from branchtag.cli.context import build_context, build_orchestrator
from branchtag.core.errors import ErrorCode
from branchtag.output.console import Style
from branchtag.release.branches import BranchClass
from branchtag.release.tasks import run_dependent_tasks


def perform() -> None:
    """Run dependent tasks, then bump and tag for the current branch."""
    ctx = build_context()
    orchestrator = build_orchestrator(ctx)
    settings = orchestrator.settings

    description = orchestrator.describe()
    exit_on_error(description, ctx)
    ctx.console.header(description.unwrap())

    match orchestrator.branch_class:
        case BranchClass.DEVELOP:
            tasks = settings.develop_tasks
        case BranchClass.RELEASE:
            tasks = settings.release_tasks
        case _:
            tasks = ()
    if tasks:
        exit_on_error(run_dependent_tasks(tasks, ctx.config.tasks, ctx.repo.path, ctx.console), ctx)

    result = orchestrator.perform()
    exit_on_error(result, ctx)
    report = result.unwrap()

    for tag in report.created_tags:
        pushed = " (pushed)" if tag in report.pushed_tags else ""
        ctx.console.success(f"tagged {tag}{pushed}")
    for tag in report.deleted_tags:
        ctx.console.print(f"deleted tag {tag}", Style.DIM)
    if report.dry_run:
        ctx.console.info("dry run: no refs were changed")


def describe() -> None:
    """Print what perform would do on the current branch."""
    ctx = build_context()
    orchestrator = build_orchestrator(ctx)
    description = orchestrator.describe()
    exit_on_error(description, ctx)
    ctx.console.print(description.unwrap())


def notes(
    specifier: str = typer.Option("", "--specifier", "-s", help="Version specifier."),
    containing: str = typer.Option(
        "", "--containing", "-c", help="Only commits mentioning this text, walking back from HEAD."
    ),
    until: str = typer.Option(
        "", "--until", help="With --containing, stop at a commit mentioning this text."
    ),
) -> None:
    """Print release notes for commits since the last version."""
    ctx = build_context()
    orchestrator = build_orchestrator(ctx)
    if containing:
        mentioned = orchestrator.commits_mentioning(containing, until or None)
        exit_on_error(mentioned, ctx)
        ctx.console.print(mentioned.unwrap())
        return

    if specifier and specifier not in orchestrator.specifiers:
        ctx.console.error(f"unknown version specifier: {specifier}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    result = orchestrator.release_notes(specifier)
    exit_on_error(result, ctx)
    ctx.console.print(result.unwrap())


def last_version() -> None:
    """Print the last version of each version line."""
    ctx = build_context()
    orchestrator = build_orchestrator(ctx)
    result = orchestrator.last_versions()
    exit_on_error(result, ctx)

    for specifier, last in result.unwrap().items():
        label = specifier or "(default)"
        origin = f"tag {last.tag}" if last.tag else "version commit"
        ctx.console.print(f"{label}: {last.version.name} from {origin}")
