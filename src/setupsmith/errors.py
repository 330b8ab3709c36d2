from __future__ import annotations


class SetupSmithError(Exception):
    """Base class for every error raised by setupsmith."""


class ConfigError(SetupSmithError):
    """The provisioning file could not be turned into a desired state."""


class UnsupportedFormat(ConfigError):
    def __init__(self, source: str, suffix: str):
        self.source = source
        self.suffix = suffix
        shown = suffix or "<none>"
        super().__init__(f"{source}: unsupported file format '{shown}' (expected .yaml, .yml or .json)")


class SourceUnavailable(ConfigError):
    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"File {source} {reason}")


class ParseFailed(ConfigError):
    def __init__(self, source: str, detail: str):
        self.source = source
        self.detail = detail
        super().__init__(f"{source}: {detail}")


class MissingField(ConfigError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing or invalid '{field}'")


class PrivilegeError(SetupSmithError):
    def __init__(self) -> None:
        super().__init__("This operation requires root or administrative privileges.")


class UnsupportedPlatformError(SetupSmithError):
    def __init__(self, system: str):
        self.system = system
        super().__init__(f"Unsupported platform '{system}'")


class OperationError(SetupSmithError):
    """An external command reported failure."""


class RenameFailed(OperationError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Error renaming computer: {detail}")


class InstallFailed(OperationError):
    def __init__(self, package: str, detail: str):
        self.package = package
        self.detail = detail
        super().__init__(f"Failed to install '{package}': {detail}")
