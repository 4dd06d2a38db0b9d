"""Application configuration."""

from .loader import ConfigError, load_config, load_yaml
from .models import AppConfig

__all__ = ["AppConfig", "ConfigError", "load_config", "load_yaml"]
