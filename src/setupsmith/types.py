from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class PackageManagerKind(str, Enum):
    APT = "apt"
    DNF = "dnf"
    PACMAN = "pacman"
    HOMEBREW = "homebrew"
    WINGET = "winget"

    @classmethod
    def parse(cls, name: str) -> Optional["PackageManagerKind"]:
        """Return the kind called ``name`` or ``None`` when it is not supported."""

        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class StringValue:
    text: str


@dataclass(frozen=True)
class SequenceValue:
    items: tuple["ConfigValue", ...]


@dataclass(frozen=True)
class OpaqueValue:
    raw: Any


ConfigValue = StringValue | SequenceValue | OpaqueValue


def wrap_value(value: Any) -> ConfigValue:
    if isinstance(value, str):
        return StringValue(value)
    if isinstance(value, (list, tuple)):
        return SequenceValue(tuple(wrap_value(item) for item in value))
    return OpaqueValue(value)


@dataclass(frozen=True)
class DesiredState:
    hostname: str
    package_manager: str
    packages: tuple[str, ...] = ()
    backend: Optional[PackageManagerKind] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.backend is None:
            object.__setattr__(self, "backend", PackageManagerKind.parse(self.package_manager))


@dataclass(frozen=True)
class InstallOutcome:
    package: str
    succeeded: bool
    detail: str = ""

    @classmethod
    def success(cls, package: str) -> "InstallOutcome":
        return cls(package=package, succeeded=True)

    @classmethod
    def failure(cls, package: str, detail: str) -> "InstallOutcome":
        return cls(package=package, succeeded=False, detail=detail)

    def describe(self) -> str:
        if self.succeeded:
            return f"Successfully installed '{self.package}'"
        return f"Failed to install '{self.package}': {self.detail}"


@dataclass(frozen=True)
class ProvisionSummary:
    hostname: str
    package_manager: str
    outcomes: tuple[InstallOutcome, ...] = ()

    @property
    def installed(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failures(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)
