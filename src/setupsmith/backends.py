from __future__ import annotations

from typing import Optional
import logging

from .errors import InstallFailed
from .executors import Executor
from .types import PackageManagerKind

logger = logging.getLogger(__name__)


class PackageBackend:
    """Installs a single package through one package manager."""

    name = "generic"
    env: Optional[dict[str, str]] = None
    supports_sudo = False

    def __init__(self, *, use_sudo: bool = False):
        self.use_sudo = use_sudo and self.supports_sudo

    def command(self, package: str) -> list[str]:
        raise NotImplementedError

    def install(self, executor: Executor, package: str) -> None:
        argv = self.command(package)
        if self.use_sudo:
            argv = ["sudo", *argv]
        logger.debug("package-manager=%s package=%s", self.name, package)
        try:
            result = executor.run(argv, env=self.env)
        except (OSError, ValueError) as exc:
            reason = getattr(exc, "strerror", None) or exc
            raise InstallFailed(package, f"could not run {argv[0]}: {reason}") from exc
        if not result.ok:
            raise InstallFailed(package, result.failure_detail())


class AptBackend(PackageBackend):
    name = "apt"
    env = {"DEBIAN_FRONTEND": "noninteractive"}
    supports_sudo = True

    def command(self, package: str) -> list[str]:
        return ["apt-get", "install", "-y", package]


class DnfBackend(PackageBackend):
    name = "dnf"
    supports_sudo = True

    def command(self, package: str) -> list[str]:
        return ["dnf", "install", "-y", package]


class PacmanBackend(PackageBackend):
    name = "pacman"
    supports_sudo = True

    def command(self, package: str) -> list[str]:
        return ["pacman", "-S", "--noconfirm", package]


class HomebrewBackend(PackageBackend):
    name = "homebrew"
    env = {"NONINTERACTIVE": "1"}

    def command(self, package: str) -> list[str]:
        return ["brew", "install", package]


class WingetBackend(PackageBackend):
    name = "winget"

    def command(self, package: str) -> list[str]:
        return [
            "winget",
            "install",
            "--silent",
            "--accept-package-agreements",
            "--accept-source-agreements",
            package,
        ]


BACKEND_REGISTRY: dict[PackageManagerKind, type[PackageBackend]] = {
    PackageManagerKind.APT: AptBackend,
    PackageManagerKind.DNF: DnfBackend,
    PackageManagerKind.PACMAN: PacmanBackend,
    PackageManagerKind.HOMEBREW: HomebrewBackend,
    PackageManagerKind.WINGET: WingetBackend,
}


def create_backend(kind: PackageManagerKind | str, *, use_sudo: bool = False) -> PackageBackend:
    """Return the backend for ``kind``.

    Unknown names raise ``ValueError``; callers validate the name first.
    """

    if not isinstance(kind, PackageManagerKind):
        parsed = PackageManagerKind.parse(str(kind))
        if parsed is None:
            raise ValueError(f"Unknown package manager '{kind}'")
        kind = parsed
    return BACKEND_REGISTRY[kind](use_sudo=use_sudo)


def install(
    backend_name: PackageManagerKind | str,
    package: str,
    executor: Executor,
    *,
    use_sudo: bool = False,
) -> None:
    create_backend(backend_name, use_sudo=use_sudo).install(executor, package)
