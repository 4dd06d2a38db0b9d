"""Load the sysreport YAML config file into an AppConfig."""

from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import AppConfig


class ConfigError(Exception):
    """Raised when the config file is unreadable or invalid."""


def load_yaml(path: Path) -> dict:
    """Read a YAML mapping from *path*.

    The path usually comes from ``--config`` or ``SYSREPORT_CONFIG``, so
    unreadable paths (missing, a directory, no permission) are reported as
    ConfigError rather than a traceback. An empty file is an empty mapping.
    """
    path = Path(path)
    try:
        text = path.read_text()
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {path}") from None
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e.strerror or e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}, got {type(data).__name__}")
    return data


def load_config(path: Path | None) -> AppConfig:
    """Build the AppConfig, from defaults when *path* is None.

    Raises:
        ConfigError: If the file cannot be loaded or a value is invalid,
            including an unknown ``timezone``.
    """
    if path is None:
        return AppConfig()
    data = load_yaml(path)
    try:
        return AppConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed for {path}: {e}") from e
