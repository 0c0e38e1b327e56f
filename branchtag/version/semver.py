"""Four-part semantic versions packed into a single ordered integer.

A version is ``major.minor.patch`` plus a build number. Intermediate versions
carry a dash qualifier (``1.2.3-build.4``); final versions do not
(``1.2.3.4`` canonically, ``1.2.3`` when rendered without a build number).

The integer ``code`` reserves a fixed number of decimal digits for each field
according to a :class:`DigitBudget`. With the default budget (7, 5, 3)::

    1.2.3-build.4  ->  1 * 10**6 + 2 * 10**4 + 3 * 10**2 + 4  ->  1020304

Codes only order correctly when both sides use the same budget.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

from branchtag.core.result import Err, Ok, Result
from branchtag.version.errors import (
    DigitOverflowError,
    InvalidBudgetError,
    MalformedVersionError,
    VersionError,
)

__all__ = [
    "DEFAULT_BUDGET",
    "DEFAULT_DASH_QUALIFIER",
    "BumpKind",
    "DigitBudget",
    "SemanticVersion",
    "apply_bump",
    "is_intermediate",
    "parse_version",
    "render",
    "version_code",
]

DEFAULT_DASH_QUALIFIER = "build"
MAJOR_DIGITS = 2

_NUMBER_RE = re.compile(r"^[0-9]+$")
_TRAILING_JUNK_RE = re.compile(r"[^0-9].*$")
_FINAL_PATCH_RE = re.compile(r"^([0-9]+)\.([0-9]+)$")


@dataclass(frozen=True, slots=True)
class DigitBudget:
    """Decimal places at which each field starts inside a version code.

    Attributes:
        major_place: Place of the least significant major digit (1-based).
        minor_place: Place of the least significant minor digit.
        patch_place: Place of the least significant patch digit. The build
            number gets the ``patch_place - 1`` digits below it.
    """

    major_place: int = 7
    minor_place: int = 5
    patch_place: int = 3

    @classmethod
    def create(
        cls, major_place: int, minor_place: int, patch_place: int
    ) -> Result[DigitBudget, InvalidBudgetError]:
        if not (major_place > minor_place > patch_place > 1):
            return Err(InvalidBudgetError(major_place, minor_place, patch_place))
        return Ok(cls(major_place, minor_place, patch_place))

    @property
    def minor_digits(self) -> int:
        return self.major_place - self.minor_place

    @property
    def patch_digits(self) -> int:
        return self.minor_place - self.patch_place

    @property
    def build_digits(self) -> int:
        return self.patch_place - 1


DEFAULT_BUDGET = DigitBudget()


class BumpKind(Enum):
    """Which field a bump increments; every less significant field resets."""

    BUILD = "buildNumber"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class SemanticVersion:
    """Immutable version value.

    Attributes:
        major: Major version, at most two digits when parsed.
        minor: Minor version.
        patch: Patch version.
        build_number: Build counter within a patch.
        dash_qualifier: Blank for final versions, usually ``"build"`` otherwise.
    """

    major: int
    minor: int
    patch: int
    build_number: int = 0
    dash_qualifier: str = DEFAULT_DASH_QUALIFIER

    @property
    def is_intermediate(self) -> bool:
        """True when the version carries a non-blank dash qualifier."""
        return bool(self.dash_qualifier.strip())

    @property
    def name(self) -> str:
        """Canonical text form; parses back to an equal version."""
        if self.is_intermediate:
            return f"{self.major}.{self.minor}.{self.patch}-{self.dash_qualifier}.{self.build_number}"
        return f"{self.major}.{self.minor}.{self.patch}.{self.build_number}"

    def code(self, budget: DigitBudget = DEFAULT_BUDGET) -> int:
        return version_code(self, budget)

    def version_string(
        self, include_build_number: bool = True, include_dash_qualifier: bool = True
    ) -> str:
        return render(self, include_build_number, include_dash_qualifier)

    def next_build_number(self, step: int = 1) -> SemanticVersion:
        return apply_bump(self, BumpKind.BUILD, step)

    def next_patch(self, step: int = 1) -> SemanticVersion:
        return apply_bump(self, BumpKind.PATCH, step)

    def next_minor(self, step: int = 1) -> SemanticVersion:
        return apply_bump(self, BumpKind.MINOR, step)

    def next_major(self, step: int = 1) -> SemanticVersion:
        return apply_bump(self, BumpKind.MAJOR, step)

    def with_dash_qualifier(self, qualifier: str) -> SemanticVersion:
        """Copy with another qualifier; a blank one makes the version final.

        Raises:
            ValueError: If ``qualifier`` contains a dot, which would be read
                back as the build number separator.
        """
        qualifier = qualifier.strip()
        if "." in qualifier:
            raise ValueError(f"dash qualifier must not contain '.': {qualifier!r}")
        return replace(self, dash_qualifier=qualifier)

    def __str__(self) -> str:
        return self.name


def apply_bump(version: SemanticVersion, kind: BumpKind, step: int = 1) -> SemanticVersion:
    """Return a copy of ``version`` with ``kind`` incremented by ``step``.

    Fields less significant than ``kind`` are reset to zero. No overflow check
    happens here; a bumped version may exceed the budget and fail to parse.
    """
    match kind:
        case BumpKind.BUILD:
            return replace(version, build_number=version.build_number + step)
        case BumpKind.PATCH:
            return replace(version, patch=version.patch + step, build_number=0)
        case BumpKind.MINOR:
            return replace(version, minor=version.minor + step, patch=0, build_number=0)
        case BumpKind.MAJOR:
            return replace(
                version, major=version.major + step, minor=0, patch=0, build_number=0
            )


def render(
    version: SemanticVersion,
    include_build_number: bool = True,
    include_dash_qualifier: bool = True,
) -> str:
    """Render a version as text.

    With ``include_build_number`` the canonical name is returned and
    ``include_dash_qualifier`` is ignored. Otherwise ``major.minor.patch``,
    followed by ``-qualifier`` when requested and the qualifier is non-blank.
    """
    if include_build_number:
        return version.name
    base = f"{version.major}.{version.minor}.{version.patch}"
    if include_dash_qualifier and version.is_intermediate:
        return f"{base}-{version.dash_qualifier}"
    return base


def version_code(version: SemanticVersion, budget: DigitBudget = DEFAULT_BUDGET) -> int:
    return (
        version.major * 10 ** (budget.major_place - 1)
        + version.minor * 10 ** (budget.minor_place - 1)
        + version.patch * 10 ** (budget.patch_place - 1)
        + version.build_number
    )


def is_intermediate(version: SemanticVersion) -> bool:
    return version.is_intermediate


def parse_version(
    text: str, budget: DigitBudget = DEFAULT_BUDGET
) -> Result[SemanticVersion, VersionError]:
    """Parse ``MAJOR[.MINOR[.PATCH]][-QUALIFIER[.BUILD]]`` or ``MAJOR.MINOR.PATCH.BUILD``.

    A missing qualifier means ``build`` with build number 0. Non-numeric text
    trailing the patch number is ignored, as is a non-numeric build number.
    The four-dotted form (no dash) is the canonical name of a final version
    and parses with a blank qualifier.

    Returns:
        Ok(SemanticVersion), or Err(MalformedVersionError) for non-numeric
        fields, or Err(DigitOverflowError) when a field exceeds its slot.
    """
    raw = text.strip()
    core, sep, qualifier_part = raw.partition("-")

    dash_qualifier = DEFAULT_DASH_QUALIFIER
    build_number = 0
    if sep:
        qualifier, dot, build_text = qualifier_part.partition(".")
        if qualifier:
            dash_qualifier = qualifier
        if dot and _NUMBER_RE.match(build_text):
            build_number = int(build_text)

    parts = core.split(".", 2)
    fields: list[str] = list(parts[:2])
    if len(parts) == 3:
        patch_text = parts[2]
        final = _FINAL_PATCH_RE.match(patch_text) if not sep else None
        if final is not None:
            patch_text = final.group(1)
            build_number = int(final.group(2))
            dash_qualifier = ""
        else:
            patch_text = _TRAILING_JUNK_RE.sub("", patch_text)
        fields.append(patch_text)

    numbers: list[int] = []
    for field in fields:
        if not _NUMBER_RE.match(field):
            return Err(MalformedVersionError(text, f"not a base-10 integer: {field!r} in {text!r}"))
        numbers.append(int(field))
    while len(numbers) < 3:
        numbers.append(0)
    major, minor, patch = numbers

    for slot, value, digits in (
        ("Major", major, MAJOR_DIGITS),
        ("Minor", minor, budget.minor_digits),
        ("Patch", patch, budget.patch_digits),
        ("Build Number", build_number, budget.build_digits),
    ):
        limit = 10**digits
        if value >= limit:
            return Err(DigitOverflowError(text=text, slot=slot, value=value, limit=limit))

    return Ok(
        SemanticVersion(
            major=major,
            minor=minor,
            patch=patch,
            build_number=build_number,
            dash_qualifier=dash_qualifier,
        )
    )
