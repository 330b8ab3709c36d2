from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from collections.abc import Mapping
from typing import Any, Iterator, Optional
import json
import logging

import yaml

from .errors import MissingField, ParseFailed, SourceUnavailable, UnsupportedFormat
from .types import ConfigValue, DesiredState, SequenceValue, StringValue, wrap_value

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})
JSON_SUFFIXES = frozenset({".json"})


class ConfigDocument(Mapping):
    """Read-only view of a provisioning file, independent of its syntax."""

    def __init__(self, source: str, values: Mapping[str, ConfigValue]):
        self.source = source
        self._values = MappingProxyType(dict(values))

    @classmethod
    def from_data(cls, source: str, data: Mapping[str, Any]) -> "ConfigDocument":
        return cls(source, {str(key): wrap_value(value) for key, value in data.items()})

    def __getitem__(self, key: str) -> ConfigValue:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def string(self, key: str) -> Optional[str]:
        value = self._values.get(key)
        if isinstance(value, StringValue):
            return value.text
        return None

    def strings(self, key: str) -> Optional[tuple[str, ...]]:
        value = self._values.get(key)
        if not isinstance(value, SequenceValue):
            return None
        kept: list[str] = []
        for index, item in enumerate(value.items):
            if isinstance(item, StringValue):
                kept.append(item.text)
            else:
                logger.debug("%s: dropping non-string %s[%d]", self.source, key, index)
        return tuple(kept)


def load_document(path: Path) -> ConfigDocument:
    """Parse ``path`` as YAML or JSON, chosen by its suffix."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in YAML_SUFFIXES and suffix not in JSON_SUFFIXES:
        raise UnsupportedFormat(str(path), suffix)

    text = _read_source(path)
    if suffix in YAML_SUFFIXES:
        data = _parse_yaml(path, text)
    else:
        data = _parse_json(path, text)

    if not isinstance(data, dict):
        raise ParseFailed(str(path), f"top level must be a mapping, got {type(data).__name__}")
    return ConfigDocument.from_data(str(path), data)


def load(path: Path) -> DesiredState:
    """Load ``path`` and validate it into a :class:`DesiredState`."""

    document = load_document(path)
    state = desired_state(document)
    logger.debug(
        "source=%s hostname=%s package-manager=%s packages=%s",
        document.source,
        state.hostname,
        state.package_manager,
        list(state.packages),
    )
    if state.backend is None:
        logger.debug("%s: unrecognized package manager '%s'", document.source, state.package_manager)
    return state


def desired_state(document: ConfigDocument) -> DesiredState:
    hostname = _required_string(document, "hostname")
    package_manager = _required_string(document, "package_manager")
    packages = document.strings("packages")
    if packages is None:
        raise MissingField("packages")
    return DesiredState(hostname=hostname, package_manager=package_manager, packages=packages)


def _required_string(document: ConfigDocument, key: str) -> str:
    value = document.string(key)
    if value is None or not value.strip():
        raise MissingField(key)
    return value.strip()


def _read_source(path: Path) -> str:
    if not path.exists():
        raise SourceUnavailable(str(path), "does not exist")
    try:
        return path.read_text(encoding="utf-8")
    except IsADirectoryError:
        raise SourceUnavailable(str(path), "is a directory") from None
    except (PermissionError, UnicodeDecodeError):
        raise SourceUnavailable(str(path), "is not readable") from None
    except OSError as exc:
        raise SourceUnavailable(str(path), f"could not be read: {exc.strerror or exc}") from None


def _parse_yaml(path: Path, text: str) -> Any:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        problem = getattr(exc, "problem", None) or str(exc)
        if mark is not None:
            raise ParseFailed(str(path), f"{mark.line + 1}:{mark.column + 1} {problem}") from None
        raise ParseFailed(str(path), problem) from None
    return {} if data is None else data


def _parse_json(path: Path, text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseFailed(str(path), f"{exc.lineno}:{exc.colno} {exc.msg}") from None
