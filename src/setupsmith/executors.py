from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence
import logging
import os
import shlex
import subprocess

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    command: list[str]
    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def failure_detail(self) -> str:
        output = self.stderr.strip() or self.stdout.strip()
        detail = f"command '{format_command(self.command)}' exited with status {self.returncode}"
        return f"{detail}: {output}" if output else detail


def format_command(command: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in command)


class Executor:
    """Runs external commands on the local host.

    Commands block until they exit; no timeout is applied. With ``dry_run``
    mutating commands are only logged and reported as successful.
    """

    def __init__(self, *, dry_run: bool = False):
        self.dry_run = dry_run

    def run(
        self,
        command: Sequence[str],
        *,
        mutable: bool = True,
        env: Optional[dict[str, str]] = None,
    ) -> CommandResult:
        """Run ``command`` and return its exit status and captured output.

        Raises ``OSError`` when the executable cannot be launched and
        ``ValueError`` when an argument contains a null byte.
        """

        cmd_list = list(command)
        logger.info("CMD %s", format_command(cmd_list))
        if self.dry_run and mutable:
            return CommandResult(cmd_list, "", "skipped (dry-run)", 0)

        exec_env = None
        if env:
            exec_env = os.environ.copy()
            exec_env.update(env)

        proc = subprocess.run(
            cmd_list,
            capture_output=True,
            text=True,
            check=False,
            env=exec_env,
        )
        if proc.stdout:
            logger.debug("STDOUT %s", proc.stdout.strip())
        if proc.stderr:
            logger.debug("STDERR %s", proc.stderr.strip())
        return CommandResult(cmd_list, proc.stdout, proc.stderr, proc.returncode)
