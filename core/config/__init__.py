"""
Runtime Configuration Module

Provides configuration loading and management for hash trees and the CLI.
"""

from .runtime import (
    ENV_PREFIX,
    TreeConfig,
    LoggingConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
    get_default_config_template,
)

__all__ = [
    "ENV_PREFIX",
    "TreeConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
    "get_default_config_template",
]
