"""
Diff settings and profile resolution

Settings live in a ``schemadiff.json`` file found in the working directory or
one of its parents:

    {
      "caseStrategy": "lower",
      "columnStrategy": "rename-aware",
      "failOnWarnings": false,
      "profiles": {
        "ci": {"failOnWarnings": true},
        "legacy": {"caseStrategy": "preserve", "columnStrategy": "simple"}
      }
    }

Top-level keys are the defaults; the active profile is merged over them.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .differs.column import ColumnStrategy
from .exceptions import ConfigurationError
from .naming import CaseStrategy

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "schemadiff.json"
PROFILE_ENV_VAR = "SCHEMADIFF_PROFILE"
DEFAULT_PROFILE = "default"


class DiffSettings(BaseModel):
    """Effective settings of one diff run"""

    case_strategy: CaseStrategy = Field(CaseStrategy.LOWER, alias="caseStrategy")
    column_strategy: ColumnStrategy = Field(ColumnStrategy.RENAME_AWARE, alias="columnStrategy")
    fail_on_warnings: bool = Field(False, alias="failOnWarnings")

    class Config:
        populate_by_name = True
        frozen = True
        extra = "forbid"

    def with_overrides(self, **overrides: Any) -> "DiffSettings":
        """Return a copy with every non-None override applied (CLI flags)"""
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return DiffSettings.model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid option value: {_first_error(e)}") from e


def find_settings_file(start_dir: Path) -> Path | None:
    """Search ``start_dir`` and its parents for the settings file"""
    current = start_dir.resolve()
    for directory in (current, *current.parents):
        candidate = directory / SETTINGS_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_profile(profile: str | None = None) -> str:
    """Active profile: explicit argument, then environment variable, then default"""
    if profile:
        return profile
    return os.environ.get(PROFILE_ENV_VAR) or DEFAULT_PROFILE


def load_settings(start_dir: Path | None = None, profile: str | None = None) -> DiffSettings:
    """Load settings for the active profile

    Args:
        start_dir: Directory to start the settings file search from (default: cwd)
        profile: Profile name overriding ``SCHEMADIFF_PROFILE``

    Returns:
        Effective settings; defaults when no settings file exists

    Raises:
        ConfigurationError: If the file is malformed, a value is invalid or the
            requested profile does not exist
    """
    active = resolve_profile(profile)
    settings_file = find_settings_file(start_dir or Path.cwd())

    if settings_file is None:
        if active != DEFAULT_PROFILE:
            raise ConfigurationError(
                f"Profile '{active}' requested but no {SETTINGS_FILENAME} was found"
            )
        logger.debug("No %s found; using default settings", SETTINGS_FILENAME)
        return DiffSettings()

    data = _read_settings_file(settings_file)
    profiles = data.pop("profiles", {}) or {}
    if not isinstance(profiles, dict):
        raise ConfigurationError(f"'profiles' must be an object in {settings_file}")

    if active in profiles:
        overrides = profiles[active]
        if not isinstance(overrides, dict):
            raise ConfigurationError(f"Profile '{active}' must be an object in {settings_file}")
        data.update(overrides)
    elif active != DEFAULT_PROFILE:
        available = ", ".join(sorted(profiles)) or "none"
        raise ConfigurationError(
            f"Unknown profile '{active}' in {settings_file} (available: {available})"
        )

    try:
        settings = DiffSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {settings_file}: {_first_error(e)}") from e

    logger.debug("Loaded settings from %s (profile %s): %s", settings_file, active, settings)
    return settings


def _read_settings_file(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Malformed JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a JSON object")
    return data


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]
