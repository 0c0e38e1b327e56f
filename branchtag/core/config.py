"""Typed configuration loading.

branchtag reads ``branchtag.toml`` from the repository root. Every key is
optional; a missing file yields the defaults.

    [cicd]
    project_qualifier = "app"
    version_specifiers = ["fd"]
    develop_tasks = ["test"]
    release_tasks = ["test", "publish"]
    remote = "origin"

    [cicd.digits]
    major = 7
    minor = 5
    patch = 3

    [cicd.branches]
    release = "release"
    develop = "develop"
    dev_launch = "main"

    [tasks]
    test = "pytest -q"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from branchtag.version.semver import DEFAULT_BUDGET, DigitBudget

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_str_tuple, get_table

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_REMOTE",
    "BranchPrefixes",
    "Config",
    "ConfigError",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "branchtag.toml"
DEFAULT_REMOTE = "origin"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or is invalid."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class BranchPrefixes:
    """Branch name prefixes that trigger CI/CD behavior."""

    release: str = "release"
    develop: str = "develop"
    dev_launch: str = "main"


def _empty_tasks() -> dict[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container.

    Attributes:
        project_qualifier: Tag namespace; None means the repository name.
        version_specifiers: Independent version lines; empty means one
            unnamed line.
        develop_tasks: Task names to run before tagging on develop branches.
        release_tasks: Task names to run before tagging on release branches.
        remote: Remote that tags are pushed to and deleted from.
        budget: Digit budget for version codes.
        branches: Branch prefixes per branch class.
        tasks: Task name -> shell command.
    """

    project_qualifier: str | None = None
    version_specifiers: tuple[str, ...] = ()
    develop_tasks: tuple[str, ...] = ()
    release_tasks: tuple[str, ...] = ()
    remote: str = DEFAULT_REMOTE
    budget: DigitBudget = DEFAULT_BUDGET
    branches: BranchPrefixes = field(default_factory=BranchPrefixes)
    tasks: dict[str, str] = field(default_factory=_empty_tasks)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Result[Config, ConfigError]:
        """Create Config from parsed TOML."""
        cicd: StrDict = get_table(data, "cicd") or {}
        digits: StrDict = get_table(cicd, "digits") or {}
        branches: StrDict = get_table(cicd, "branches") or {}
        tasks: StrDict = get_table(data, "tasks") or {}

        budget = DigitBudget.create(
            get_int(digits, "major") or DEFAULT_BUDGET.major_place,
            get_int(digits, "minor") or DEFAULT_BUDGET.minor_place,
            get_int(digits, "patch") or DEFAULT_BUDGET.patch_place,
        )
        if isinstance(budget, Err):
            return Err(ConfigError(f"invalid [cicd.digits]: {budget.error.message}"))

        commands: dict[str, str] = {}
        for name in tasks:
            command = get_str(tasks, name)
            if command is None:
                return Err(ConfigError(f"task '{name}' must be a non-empty command string"))
            commands[name] = command

        return Ok(
            cls(
                project_qualifier=get_str(cicd, "project_qualifier"),
                version_specifiers=get_str_tuple(cicd, "version_specifiers") or (),
                develop_tasks=get_str_tuple(cicd, "develop_tasks") or (),
                release_tasks=get_str_tuple(cicd, "release_tasks") or (),
                remote=get_str(cicd, "remote") or DEFAULT_REMOTE,
                budget=budget.value,
                branches=BranchPrefixes(
                    release=get_str(branches, "release") or "release",
                    develop=get_str(branches, "develop") or "develop",
                    dev_launch=get_str(branches, "dev_launch") or "main",
                ),
                tasks=commands,
            )
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and validate configuration from a TOML file."""
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    config = Config.from_dict(result.value)
    if isinstance(config, Err):
        return Err(ConfigError(config.error.message, path=path))
    return config


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Like :func:`load_config`, but a missing file yields the defaults.

    An existing file that fails to parse is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
