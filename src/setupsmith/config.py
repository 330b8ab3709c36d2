from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

try:
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]


DEFAULT_CONFIG = Path("/etc/setupsmith/main.conf")


@dataclass
class SetupSmithConfig:
    source: Optional[Path] = None
    log_level: Optional[str] = None
    use_sudo: bool = False


def load_config(path: Path) -> SetupSmithConfig:
    if not path.exists():
        return SetupSmithConfig()
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"{path}: {exc}") from None
    defaults = data.get("defaults", {})
    if not isinstance(defaults, dict):
        raise ValueError(f"{path}: [defaults] must be a table")
    source = defaults.get("source")
    if source is not None and not isinstance(source, str):
        raise ValueError(f"{path}: source must be a string")
    log_level = defaults.get("log_level")
    if log_level is not None and not isinstance(log_level, str):
        raise ValueError(f"{path}: log_level must be a string")
    use_sudo = defaults.get("use_sudo", False)
    if not isinstance(use_sudo, bool):
        raise ValueError(f"{path}: use_sudo must be true or false")
    return SetupSmithConfig(
        source=Path(source) if source else None,
        log_level=log_level or None,
        use_sudo=use_sudo,
    )
