"""Dependent tasks run before a CI/CD step.

Tasks are named shell commands from the ``[tasks]`` table of
``branchtag.toml``. Develop and release branches each list the tasks that
must succeed before any tag is created.
"""

from __future__ import annotations

import shlex
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from branchtag.core.result import Err, Ok, Result
from branchtag.output.console import ConsoleProtocol
from branchtag.platform.process import run_silent


@dataclass(frozen=True, slots=True)
class TaskFailed:
    name: str
    command: str
    returncode: int

    @property
    def message(self) -> str:
        return f"task '{self.name}' failed (exit {self.returncode}): {self.command}"


def run_dependent_tasks(
    names: tuple[str, ...],
    commands: Mapping[str, str],
    cwd: Path,
    console: ConsoleProtocol,
) -> Result[tuple[str, ...], TaskFailed]:
    """Run the named tasks in order; unknown names are skipped with a warning.

    Returns:
        Ok(names of the tasks that ran), or Err(TaskFailed) for the first
        failing task.
    """
    ran: list[str] = []
    for name in names:
        command = commands.get(name)
        if command is None:
            console.warning(f"task '{name}' is not defined in [tasks]; skipping")
            continue

        console.log(f"running task {name}: {command}")
        result = run_silent(shlex.split(command), cwd=cwd)
        if isinstance(result, Err):
            return Err(TaskFailed(name=name, command=command, returncode=result.error.returncode))
        ran.append(name)
    return Ok(tuple(ran))
