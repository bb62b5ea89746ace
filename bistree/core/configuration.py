"""
Settings loading for the self-test runner.

Settings come from an optional YAML file, either as top-level keys or under
a ``bistree:`` section, then command-line overrides, then the environment.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from bistree.utils.logging_config import env_flag

from .errors import ConfigurationError
from .models import RunnerSettings

logger = logging.getLogger(__name__)

SECTION = "bistree"


class SettingsLoader:
    """YAML settings file loader and validator."""

    def __init__(self, config_path: Union[str, Path]):
        self.config_path = Path(config_path)

    def load_raw(self) -> Dict[str, Any]:
        """Read the file and return the settings mapping."""
        logger.info(f"Loading settings from {self.config_path}")
        try:
            with open(self.config_path, "r") as f:
                raw = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"cannot read {self.config_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"invalid YAML in {self.config_path}: {e}") from e

        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigurationError(f"{self.config_path}: expected a mapping at top level")
        if SECTION in raw:
            section = raw[SECTION] or {}
            if not isinstance(section, dict):
                raise ConfigurationError(f"{self.config_path}: '{SECTION}' must be a mapping")
            return dict(section)
        return dict(raw)

    def load(self) -> RunnerSettings:
        return build_settings(self.load_raw(), source=str(self.config_path))


def build_settings(values: Dict[str, Any], source: str = "<settings>") -> RunnerSettings:
    try:
        return RunnerSettings.model_validate(values)
    except ValidationError as e:
        raise ConfigurationError(f"{source}: {e}") from e


def load_settings(path: Optional[Union[str, Path]] = None, **overrides: Any) -> RunnerSettings:
    """Merge file settings, non-None overrides and environment flags."""
    values: Dict[str, Any] = SettingsLoader(path).load_raw() if path else {}
    values.update({k: v for k, v in overrides.items() if v is not None})
    if env_flag("BIST_NO_LIVE"):
        values["live"] = "never"
    return build_settings(values, source=str(path) if path else "<settings>")
