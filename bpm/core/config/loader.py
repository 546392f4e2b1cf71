"""YAML configuration file reader."""

from pathlib import Path
from typing import Any

import yaml

from bpm.core.exceptions.errors import ConfigurationError


class ConfigLoader:
    """Reads a bpm YAML file and hands out its top-level sections."""

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._sections: dict[str, Any] = {}

    def load(self) -> dict[str, Any]:
        """Parse the file into a mapping of sections.

        Raises:
            ConfigurationError: If the file is missing, is not valid YAML or
                does not hold a mapping.
        """
        path = self.config_path
        try:
            with open(path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Configuration file not found: {path}",
                config_key=str(path),
                details={"path": str(path)},
            ) from e
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {path}",
                config_key=str(path),
                details={"error": str(e)},
            ) from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {path}",
                config_key=str(path),
            )

        self._sections = loaded
        return loaded

    def get_section(self, section: str) -> dict[str, Any]:
        """Return one section, empty when the file omits it.

        Raises:
            ConfigurationError: If the section is present but not a mapping.
        """
        value = self._sections.get(section)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ConfigurationError(
                f"Section '{section}' must be a mapping in {self.config_path}",
                config_key=section,
            )
        return value
