"""Run configuration and host path layout."""

from gpu_bringup.core.config.paths import SystemPaths
from gpu_bringup.core.config.resolver import ConfigError, resolve_config

__all__ = ["ConfigError", "SystemPaths", "resolve_config"]
