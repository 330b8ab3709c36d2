from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable, Optional
import logging

from . import document
from .backends import create_backend
from .errors import InstallFailed, PrivilegeError, SetupSmithError
from .platforms import HostPlatform, set_hostname
from .types import DesiredState, InstallOutcome, ProvisionSummary

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    START = "start"
    LOADED = "loaded"
    AUTHORIZED = "authorized"
    HOST_RENAMED = "host-renamed"
    INSTALLING = "installing"
    REPORTED = "reported"
    DONE = "done"
    FAILED = "failed"


class Provisioner:
    """Brings one host to the state described by a provisioning file.

    Loading, the privilege check and the rename are fatal when they fail and
    leave ``phase`` at ``FAILED``. Package installs are best effort: each one
    is recorded as an :class:`InstallOutcome` and never stops the run.
    """

    def __init__(
        self,
        platform: HostPlatform,
        *,
        use_sudo: bool = False,
        loader: Callable[[Path], DesiredState] = document.load,
        progress_callback: Optional[Callable[[str, int, int], None]] = None,
    ):
        self.platform = platform
        self.executor = platform.executor
        self.use_sudo = use_sudo
        self.loader = loader
        self.progress_callback = progress_callback
        self.phase = Phase.START
        self.state: Optional[DesiredState] = None

    def run(self, source: Path) -> ProvisionSummary:
        self.phase = Phase.START
        try:
            self.state = self.loader(source)
            self.phase = Phase.LOADED

            if not self.platform.has_elevated_privilege():
                raise PrivilegeError()
            self.phase = Phase.AUTHORIZED

            set_hostname(self.platform, self.state.hostname)
            self.phase = Phase.HOST_RENAMED
        except SetupSmithError as exc:
            logger.debug("phase=%s failed: %s", self.phase.value, exc)
            self.phase = Phase.FAILED
            raise

        self.phase = Phase.INSTALLING
        outcomes = self.install_packages(self.state)

        summary = ProvisionSummary(
            hostname=self.state.hostname,
            package_manager=self.state.package_manager,
            outcomes=tuple(outcomes),
        )
        self.phase = Phase.REPORTED
        logger.debug(
            "hostname=%s installed=%d failed=%d", summary.hostname, summary.installed, summary.failures
        )
        self.phase = Phase.DONE
        return summary

    def install_packages(self, state: DesiredState) -> list[InstallOutcome]:
        if state.backend is None:
            logger.warning(
                "Unsupported package manager: %s; skipping %d package(s)",
                state.package_manager,
                len(state.packages),
            )
            return []

        backend = create_backend(state.backend, use_sudo=self.use_sudo)
        outcomes: list[InstallOutcome] = []
        total = len(state.packages)
        for index, package in enumerate(state.packages, start=1):
            if self.progress_callback:
                self.progress_callback(package, index, total)
            try:
                backend.install(self.executor, package)
            except InstallFailed as exc:
                logger.error("package=%s failed: %s", package, exc.detail)
                outcomes.append(InstallOutcome.failure(package, exc.detail))
                continue
            logger.debug("package=%s installed", package)
            outcomes.append(InstallOutcome.success(package))
        return outcomes
