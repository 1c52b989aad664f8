"""
Runtime Configuration

Central configuration for tree construction and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

from core.merkle.fbh_tree import DEFAULT_TREE_HEIGHT, MAX_TREE_HEIGHT, MIN_TREE_HEIGHT
from core.schemas.errors import ConfigurationException

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "FBHT_"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class TreeConfig:
    """Configuration for building an FBHTree."""
    height: int = DEFAULT_TREE_HEIGHT
    eager: bool = False
    max_height: int = MAX_TREE_HEIGHT

    def __post_init__(self):
        if isinstance(self.height, bool) or not isinstance(self.height, int):
            raise ConfigurationException(
                f"tree.height must be an integer, got {self.height!r}",
                setting="tree.height",
            )
        if not MIN_TREE_HEIGHT <= self.height <= self.max_height:
            raise ConfigurationException(
                f"tree.height must be between {MIN_TREE_HEIGHT} and {self.max_height}, "
                f"got {self.height}",
                setting="tree.height",
            )


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - FBHT_TREE_HEIGHT: Tree height (integer, >= 2)
        - FBHT_EAGER: Recompute digests on write (true/false)
        - FBHT_LOG_LEVEL: Log level
        - FBHT_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        # Tree settings
        if os.getenv(f"{ENV_PREFIX}TREE_HEIGHT"):
            raw = os.getenv(f"{ENV_PREFIX}TREE_HEIGHT", "")
            try:
                overrides.setdefault("tree", {})["height"] = int(raw)
            except ValueError as e:
                raise ConfigurationException(
                    f"{ENV_PREFIX}TREE_HEIGHT must be an integer, got {raw!r}",
                    setting="tree.height",
                ) from e
        if os.getenv(f"{ENV_PREFIX}EAGER"):
            overrides.setdefault("tree", {})["eager"] = _env_bool(f"{ENV_PREFIX}EAGER")

        # Logging settings
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        overrides = cls._get_env_overrides()
        return cls.from_dict(overrides)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {}) or {}
        logging_data = data.get("logging", {}) or {}

        try:
            tree = TreeConfig(**tree_data)
            log_config = LoggingConfig(**logging_data)
        except TypeError as e:
            raise ConfigurationException(f"Unknown configuration key: {e}") from e

        return cls(
            tree=tree,
            logging=log_config,
            extra=data.get("extra", {}) or {},
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "tree" in overrides:
            tree_data = {
                "height": new_config.tree.height,
                "eager": new_config.tree.eager,
                "max_height": new_config.tree.max_height,
            }
            tree_data.update(overrides["tree"])
            # Rebuild so the height is validated again
            new_config.tree = TreeConfig(**tree_data)

        if "logging" in overrides:
            for key, value in overrides["logging"].items():
                setattr(new_config.logging, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "height": self.tree.height,
                "eager": self.tree.eager,
                "max_height": self.tree.max_height,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


def get_default_config_template() -> str:
    """Get a template YAML configuration file."""
    return f"""# Full binary hash tree configuration
tree:
  height: {DEFAULT_TREE_HEIGHT}
  eager: false
logging:
  level: INFO
  file: null
"""


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
