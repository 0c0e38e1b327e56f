"""Error payloads for the version codec."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MalformedVersionError:
    """A numeric field of a version string is not a base-10 integer."""

    text: str
    message: str


@dataclass(frozen=True, slots=True)
class DigitOverflowError:
    """A version field does not fit in the digits its slot is allotted."""

    text: str
    slot: str
    value: int
    limit: int

    @property
    def message(self) -> str:
        return f"{self.slot} version greater than {self.limit - 1} not supported: {self.text}"


@dataclass(frozen=True, slots=True)
class InvalidBudgetError:
    """Digit places violate major > minor > patch > 1."""

    major_place: int
    minor_place: int
    patch_place: int

    @property
    def message(self) -> str:
        return (
            "digit places must satisfy major > minor > patch > 1 "
            f"(got major={self.major_place}, minor={self.minor_place}, patch={self.patch_place})"
        )


VersionError = MalformedVersionError | DigitOverflowError
