from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
import logging
import os
import platform as platform_mod

from .errors import RenameFailed, UnsupportedPlatformError
from .executors import Executor

logger = logging.getLogger(__name__)


class HostPlatform(ABC):
    """Privilege check and hostname change for one operating system family."""

    name = "generic"

    def __init__(self, executor: Optional[Executor] = None):
        self.executor = executor or Executor()

    @abstractmethod
    def has_elevated_privilege(self) -> bool:
        """Return True when the process may change system identity."""

    @abstractmethod
    def rename_command(self, hostname: str) -> list[str]:
        """Return the argv that sets the hostname to ``hostname``."""

    def rename_host(self, hostname: str) -> None:
        argv = self.rename_command(hostname)
        try:
            result = self.executor.run(argv)
        except (OSError, ValueError) as exc:
            reason = getattr(exc, "strerror", None) or exc
            raise RenameFailed(f"could not run {argv[0]} on {self.name}: {reason}") from exc
        if not result.ok:
            raise RenameFailed(f"failed to rename computer on {self.name}: {result.failure_detail()}")


class PosixPlatform(HostPlatform):
    def has_elevated_privilege(self) -> bool:
        return os.geteuid() == 0


class LinuxPlatform(PosixPlatform):
    name = "Linux"

    def rename_command(self, hostname: str) -> list[str]:
        return ["hostnamectl", "set-hostname", hostname]


class MacOSPlatform(PosixPlatform):
    name = "macOS"

    def rename_command(self, hostname: str) -> list[str]:
        return ["scutil", "--set", "ComputerName", hostname]


class WindowsPlatform(HostPlatform):
    name = "Windows"

    def has_elevated_privilege(self) -> bool:
        # ``net session`` only succeeds from an elevated session.
        try:
            result = self.executor.run(["net", "session"], mutable=False)
        except OSError:
            logger.debug("Unable to run 'net session'", exc_info=True)
            return False
        return result.ok

    def rename_command(self, hostname: str) -> list[str]:
        quoted = hostname.replace("'", "''")
        return ["powershell", "-Command", f"Rename-Computer -NewName '{quoted}' -Force"]


PLATFORMS: dict[str, type[HostPlatform]] = {
    "Linux": LinuxPlatform,
    "Darwin": MacOSPlatform,
    "Windows": WindowsPlatform,
}


def detect_platform(executor: Optional[Executor] = None, system: Optional[str] = None) -> HostPlatform:
    system = system or platform_mod.system()
    platform_cls = PLATFORMS.get(system)
    if platform_cls is None:
        raise UnsupportedPlatformError(system)
    logger.debug("platform=%s", platform_cls.name)
    return platform_cls(executor)


def set_hostname(host: HostPlatform, hostname: str) -> None:
    """Apply ``hostname`` through ``host``.

    Elevated privilege is checked again before the command runs. The command
    runs every time; the current hostname is not compared first.
    """

    if not host.has_elevated_privilege():
        raise RenameFailed("This operation requires root or administrative privileges.")
    host.rename_host(hostname)
    logger.debug("hostname=%s applied on %s", hostname, host.name)
