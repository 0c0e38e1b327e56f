"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from branchtag.core.config import ConfigError
from branchtag.core.errors import ErrorCode
from branchtag.core.properties import PropertyError
from branchtag.core.result import Err, Result
from branchtag.git.gateway import CommandExecutionError
from branchtag.release.tasks import TaskFailed
from branchtag.resolve.errors import NotFoundError
from branchtag.version.errors import DigitOverflowError, MalformedVersionError

if TYPE_CHECKING:
    from branchtag.cli.context import CLIContext

T = TypeVar("T")
E = TypeVar("E")


def error_code_for(error: object) -> ErrorCode:
    """Exit code for an error payload."""
    match error:
        case MalformedVersionError() | DigitOverflowError():
            return ErrorCode.VERSION_ERROR
        case CommandExecutionError() | NotFoundError():
            return ErrorCode.VCS_ERROR
        case TaskFailed():
            return ErrorCode.TASK_ERROR
        case ConfigError():
            return ErrorCode.CONFIG_ERROR
        case PropertyError():
            return ErrorCode.USER_ERROR
        case _:
            return ErrorCode.USER_ERROR


def exit_on_error(
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode | None = None,
) -> None:
    """Exit with an error if result is Err, otherwise return.

    This helper reduces boilerplate for the common pattern:
        match result:
            case Err(e):
                ctx.console.error(e.message)
                raise typer.Exit(code=int(ErrorCode.VCS_ERROR))
            case Ok(_):
                pass

    Without an explicit ``error_code`` the code is derived from the error type.
    """
    if isinstance(result, Err):
        error = result.error
        message: str = getattr(error, "message", str(error))
        ctx.console.error(message)
        code = error_code if error_code is not None else error_code_for(error)
        raise typer.Exit(code=int(code))

