from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import DEFAULT_CONFIG, load_config
from .errors import PrivilegeError, SetupSmithError
from .executors import Executor
from .platforms import detect_platform
from .provisioner import Provisioner
from .summary import render_summary
from .types import ProvisionSummary


class Ansi:
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    RESET = "\033[0m"


def colorize(text: str, color: Optional[str]) -> str:
    if not color:
        return text
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        return text
    return f"{color}{text}{Ansi.RESET}"

_last_progress_len = 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="setupsmith",
        description="Set the hostname and install packages from a YAML or JSON file",
    )
    parser.add_argument(
        "source",
        nargs="?",
        default=None,
        type=Path,
        help="Path to the provisioning file (.yaml, .yml or .json)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Path to setupsmith config file (default: {DEFAULT_CONFIG})",
    )
    parser.add_argument("--dry-run", action="store_true", help="Log commands without executing them")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Python logging level (default from config, else INFO)",
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s %(name)s - %(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_config(args.config)
    except ValueError as exc:
        print(colorize(f"Config load failed: {exc}", Ansi.RED), file=sys.stderr)
        return 1
    configure_logging(args.log_level or cfg.log_level or "INFO")

    source = args.source or cfg.source
    if source is None:
        parser.print_usage(sys.stderr)
        print("setupsmith: error: a provisioning file is required", file=sys.stderr)
        return 2

    try:
        platform = detect_platform(Executor(dry_run=args.dry_run))
    except SetupSmithError as exc:
        print(colorize(str(exc), Ansi.RED), file=sys.stderr)
        return 1

    # Refuse before the provisioning file is read.
    if not platform.has_elevated_privilege():
        print(colorize(str(PrivilegeError()), Ansi.RED), file=sys.stderr)
        return 1

    provisioner = Provisioner(platform, use_sudo=cfg.use_sudo, progress_callback=print_progress)
    try:
        summary = provisioner.run(source)
    except SetupSmithError as exc:
        _clear_progress()
        if logging.getLogger().isEnabledFor(logging.DEBUG):
            raise
        print(colorize(str(exc), Ansi.RED), file=sys.stderr)
        return 1

    _clear_progress()
    print(colorize(f"Successfully renamed the computer to '{summary.hostname}'.", Ansi.GREEN))
    print(format_summary(summary))
    return 0


def format_summary(summary: ProvisionSummary) -> str:
    color = Ansi.GREEN if summary.failures == 0 else Ansi.RED
    return colorize(render_summary(summary), color)


def print_progress(package: str, index: int, total: int) -> None:
    global _last_progress_len
    line = f"installing {package} ({index}/{total}) pending..."
    _last_progress_len = len(line)
    print(colorize(line, Ansi.YELLOW), end="\r", flush=True)


def _clear_progress() -> None:
    global _last_progress_len
    if _last_progress_len:
        print(" " * _last_progress_len, end="\r", flush=True)
        _last_progress_len = 0


if __name__ == "__main__":
    raise SystemExit(main())
