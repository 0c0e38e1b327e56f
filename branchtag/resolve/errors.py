from __future__ import annotations

from dataclasses import dataclass

from branchtag.git.gateway import CommandExecutionError
from branchtag.version.errors import DigitOverflowError, MalformedVersionError


@dataclass(frozen=True, slots=True)
class NotFoundError:
    """A history walk reached the root commit without a match."""

    what: str
    message: str


ResolveError = NotFoundError | CommandExecutionError | MalformedVersionError | DigitOverflowError
