from __future__ import annotations

import os
from pathlib import Path

import typer

from branchtag import __version__
from branchtag.cli.commands.cicd import describe, last_version, notes, perform
from branchtag.cli.commands.parse_cmd import parse
from branchtag.cli.context import CONFIG_ENV, REPO_ENV
from branchtag.core.errors import ErrorCode
from branchtag.core.properties import env_name, parse_property_args
from branchtag.core.result import Err


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(perform)
app.command()(describe)
app.command()(notes)
app.command("last-version")(last_version)
app.command()(parse)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Repository root (default: current directory)",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: <repo>/branchtag.toml)",
    ),
    properties: list[str] = typer.Option(
        [],
        "--property",
        "-P",
        help="Property as name=value, e.g. -P cicd.enablePush=true (repeatable)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    if repo is not None:
        try:
            root = repo.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --repo: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir():
            typer.echo(f"error: --repo '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        os.environ[REPO_ENV] = str(root)

    if config is not None:
        os.environ[CONFIG_ENV] = str(config.expanduser())

    # -P values override environment variables of the same property
    parsed = parse_property_args(properties)
    if isinstance(parsed, Err):
        typer.echo(f"error: {parsed.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    for name, value in parsed.value.items():
        os.environ[env_name(name)] = value


def main() -> None:
    app()
