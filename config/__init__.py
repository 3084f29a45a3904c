"""Konfiguration (Pydantic-Schema + YAML via ruamel.yaml)."""

from config.manager import ConfigManager
from config.schema import AppConfig

__all__ = ["AppConfig", "ConfigManager"]
