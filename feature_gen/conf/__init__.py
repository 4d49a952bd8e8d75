"""Configuration for the feature generator."""

from .settings import Settings, settings, DEFAULT_CONFIG_PATH

__all__ = ["Settings", "settings", "DEFAULT_CONFIG_PATH"]
