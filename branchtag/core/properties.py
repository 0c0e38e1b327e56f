"""Named external properties.

A few switches are deliberately kept out of ``branchtag.toml`` so that a CI
job can flip them per run: ``-P name=value`` on the command line, or an
environment variable named after the property (``cicd.enablePush`` ->
``CICD_ENABLEPUSH``). Command-line values win.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .result import Err, Ok, Result

__all__ = [
    "BRANCH_OVERRIDE",
    "DRY_RUN_MODE",
    "ENABLE_PUSH",
    "Properties",
    "PropertyError",
    "env_name",
    "parse_property_args",
    "resolve_properties",
]

BRANCH_OVERRIDE = "cicd.branch.override"
DRY_RUN_MODE = "cicd.dryRunMode"
ENABLE_PUSH = "cicd.enablePush"

KNOWN_PROPERTIES = (BRANCH_OVERRIDE, DRY_RUN_MODE, ENABLE_PUSH)


@dataclass(frozen=True, slots=True)
class PropertyError:
    message: str


def _empty_values() -> dict[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class Properties:
    values: dict[str, str] = field(default_factory=_empty_values)

    def has(self, name: str) -> bool:
        return name in self.values

    def get(self, name: str) -> str | None:
        return self.values.get(name)

    @property
    def branch_override(self) -> str | None:
        value = self.get(BRANCH_OVERRIDE)
        return value.strip() if value and value.strip() else None

    @property
    def dry_run(self) -> bool:
        """Dry run is on whenever the property is present, whatever its value."""
        return self.has(DRY_RUN_MODE)

    @property
    def enable_push(self) -> bool:
        return (self.get(ENABLE_PUSH) or "").strip().lower() == "true"


def env_name(name: str) -> str:
    return name.replace(".", "_").upper()


def parse_property_args(items: list[str]) -> Result[dict[str, str], PropertyError]:
    """Parse ``name=value`` (or bare ``name``) items."""
    out: dict[str, str] = {}
    for item in items:
        name, _, value = item.partition("=")
        name = name.strip()
        if not name:
            return Err(PropertyError(f"invalid property (expected name=value): {item!r}"))
        out[name] = value.strip()
    return Ok(out)


def resolve_properties(items: list[str], environ: Mapping[str, str]) -> Result[Properties, PropertyError]:
    parsed = parse_property_args(items)
    if isinstance(parsed, Err):
        return parsed

    values: dict[str, str] = {}
    for name in KNOWN_PROPERTIES:
        env_value = environ.get(env_name(name))
        if env_value is not None:
            values[name] = env_value
    values.update(parsed.value)
    return Ok(Properties(values=values))
