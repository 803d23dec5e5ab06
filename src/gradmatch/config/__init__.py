"""Convenience exports for the configuration package."""

from .constants import *  # noqa: F401,F403
from .loader import ConfigError, load_config, save_config
from .logging_conf import JSONFormatter, RunContextFilter, configure_logging, run_context
from .schemas import RunConfig
from .settings import ENV_PREFIX, Settings, get_settings, reset_settings_cache

__all__ = [
    "ConfigError",
    "load_config",
    "save_config",
    "JSONFormatter",
    "configure_logging",
    "RunContextFilter",
    "run_context",
    "RunConfig",
    "ENV_PREFIX",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
