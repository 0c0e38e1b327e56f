from __future__ import annotations

import typer

from branchtag.cli.commands._helpers import exit_on_error
from branchtag.cli.context import build_context
from branchtag.version.semver import parse_version


def parse(version: str = typer.Argument(..., help="Version text, e.g. 1.2.3-build.4")) -> None:
    """Show the canonical name and code of a version."""
    ctx = build_context()
    budget = ctx.config.budget
    result = parse_version(version, budget)
    exit_on_error(result, ctx)

    parsed = result.unwrap()
    form = "intermediate" if parsed.is_intermediate else "final"
    ctx.console.print(f"name: {parsed.name}")
    ctx.console.print(f"code: {parsed.code(budget)}")
    ctx.console.print(f"form: {form}")
