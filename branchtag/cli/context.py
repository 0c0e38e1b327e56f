from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from branchtag.core.config import CONFIG_FILENAME, Config, load_config_or_default
from branchtag.core.errors import ErrorCode
from branchtag.core.properties import Properties, resolve_properties
from branchtag.core.result import Err
from branchtag.git.repository import GitRepository
from branchtag.output.console import ConsoleProtocol, RichConsole
from branchtag.release.orchestrator import OrchestratorSettings, ReleaseOrchestrator

REPO_ENV = "BRANCHTAG_REPO"
CONFIG_ENV = "BRANCHTAG_CONFIG"


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo: GitRepository
    config: Config
    properties: Properties
    console: ConsoleProtocol

    @property
    def project_qualifier(self) -> str:
        """Configured qualifier, else the repository directory name."""
        return self.config.project_qualifier or self.repo.path.name


def _repo_root() -> Path:
    raw = os.environ.get(REPO_ENV)
    return Path(raw) if raw else Path.cwd()


def build_context() -> CLIContext:
    root = _repo_root()
    config_path = Path(os.environ.get(CONFIG_ENV) or root / CONFIG_FILENAME)

    config_result = load_config_or_default(config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    properties_result = resolve_properties([], os.environ)
    if isinstance(properties_result, Err):
        typer.echo(f"error: {properties_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(
        repo=GitRepository(root),
        config=config_result.value,
        properties=properties_result.value,
        console=RichConsole(),
    )


def build_orchestrator(ctx: CLIContext) -> ReleaseOrchestrator:
    """Orchestrator for the overridden or currently checked-out branch."""
    branch = ctx.properties.branch_override
    if branch is None:
        current = ctx.repo.current_branch_name()
        if isinstance(current, Err):
            ctx.console.error(f"cannot determine current branch: {current.error.message}")
            raise typer.Exit(code=int(ErrorCode.VCS_ERROR))
        branch = current.value

    config = ctx.config
    settings = OrchestratorSettings(
        branch=branch,
        project_qualifier=ctx.project_qualifier,
        version_specifiers=config.version_specifiers,
        budget=config.budget,
        prefixes=config.branches,
        develop_tasks=config.develop_tasks,
        release_tasks=config.release_tasks,
        dry_run=ctx.properties.dry_run,
        enable_push=ctx.properties.enable_push,
        remote=config.remote,
    )
    return ReleaseOrchestrator(ctx.repo, settings, ctx.console)
