"""Error taxonomy for snapshot loading and configuration."""

from dataclasses import dataclass


@dataclass(slots=True)
class SchemaDiffError(Exception):
    """Base class for schemadiff failures."""

    message: str
    code: str

    def __str__(self) -> str:
        return self.message


class SnapshotLoadError(SchemaDiffError):
    """Raised when a snapshot file is missing or malformed."""

    def __init__(self, message: str, code: str = "snapshot_load_failed") -> None:
        super().__init__(message, code)


class ConfigurationError(SchemaDiffError):
    """Raised for invalid settings files, profiles or option values."""

    def __init__(self, message: str, code: str = "invalid_configuration") -> None:
        super().__init__(message, code)
