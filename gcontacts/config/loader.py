"""
Configuration loader module for the Google Contacts client.

Provides YAML-based configuration file loading with support for:
- Loading configuration from default or custom paths
- Graceful handling of missing configuration files
- Validation of configuration keys, types and values
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from gcontacts.utils.logging import LEVEL_MAP
from gcontacts.utils.paths import resolve_config_dir

# Default configuration file name
DEFAULT_CONFIG_FILE = "config.yaml"

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


class ConfigLoader:
    """
    YAML configuration file loader.

    Attributes:
        config_dir: Directory containing the configuration file
        config_file: Name of the configuration file

    Usage:
        loader = ConfigLoader()
        config = loader.load()

        # With custom path
        loader = ConfigLoader(config_dir=Path("/custom/path"))
        config = loader.load_and_validate()

        # Load from specific file
        config = loader.load_from_file("/path/to/config.yaml")
    """

    # Recognized keys and their expected types
    VALID_KEYS: dict[str, type[Any] | tuple[type[Any], ...]] = {
        "token_file": str,
        "base_url": str,
        "timeout": (int, float),
        "log_level": str,
        "log_file": str,
        "verbose": bool,
    }

    def __init__(
        self, config_dir: Path | str | None = None, config_file: str = DEFAULT_CONFIG_FILE
    ):
        """
        Initialize the configuration loader.

        Args:
            config_dir: Directory containing the configuration file.
                       Defaults to ~/.gcontacts/ or $GCONTACTS_CONFIG_DIR
            config_file: Name of the configuration file (default: config.yaml)
        """
        self.config_dir = resolve_config_dir(config_dir)
        self.config_file = config_file

    @property
    def config_path(self) -> Path:
        """Full path to the configuration file."""
        return self.config_dir / self.config_file

    def load(self) -> dict[str, Any]:
        """
        Load configuration from the default configuration file.

        Returns:
            Dictionary containing configuration values, or empty dict if the
            file doesn't exist

        Raises:
            ConfigError: If the configuration file exists but cannot be parsed
        """
        return self.load_from_file(self.config_path)

    def load_from_file(self, path: Path | str) -> dict[str, Any]:
        """
        Load configuration from a specific file.

        Args:
            path: Path to the configuration file

        Returns:
            Dictionary containing configuration values, or empty dict if the
            file doesn't exist or is empty

        Raises:
            ConfigError: If the configuration file exists but cannot be parsed
        """
        path = Path(path)

        if not path.exists():
            logger.debug(f"Configuration file not found: {path}")
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML configuration file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read configuration file: {e}") from e

        if config is None:
            logger.debug(f"Configuration file is empty: {path}")
            return {}

        if not isinstance(config, dict):
            raise ConfigError(
                f"Configuration file must contain a YAML dictionary, "
                f"got {type(config).__name__}"
            )

        logger.debug(f"Loaded configuration from {path}")
        return config

    def validate(self, config: dict[str, Any]) -> None:
        """
        Validate configuration structure and values.

        Unknown keys are ignored with a debug message.

        Raises:
            ConfigError: If configuration is invalid
        """
        if not isinstance(config, dict):
            raise ConfigError(
                f"Configuration must be a dictionary, got {type(config).__name__}"
            )

        for key, value in config.items():
            expected_type = self.VALID_KEYS.get(key)
            if expected_type is None:
                logger.debug(f"Ignoring unknown configuration key: {key}")
                continue
            # bool is a subclass of int; a timeout of True is a mistake
            if isinstance(value, bool) and expected_type is not bool:
                raise ConfigError(
                    f"Invalid type for '{key}': expected number, got bool"
                )
            if not isinstance(value, expected_type):
                if isinstance(expected_type, tuple):
                    type_name = " or ".join(t.__name__ for t in expected_type)
                else:
                    type_name = expected_type.__name__
                raise ConfigError(
                    f"Invalid type for '{key}': expected {type_name}, "
                    f"got {type(value).__name__}"
                )

        if "timeout" in config and config["timeout"] <= 0:
            raise ConfigError(f"timeout must be > 0, got {config['timeout']}")

        if "base_url" in config:
            base_url = config["base_url"]
            if not base_url.startswith(("http://", "https://")):
                raise ConfigError(
                    f"base_url must be an http(s) URL, got '{base_url}'"
                )

        if "log_level" in config and config["log_level"].upper() not in LEVEL_MAP:
            raise ConfigError(
                f"Invalid log_level '{config['log_level']}'. "
                f"Must be one of: {', '.join(LEVEL_MAP)}"
            )

    def load_and_validate(self) -> dict[str, Any]:
        """
        Load configuration and validate it.

        Raises:
            ConfigError: If configuration cannot be loaded or is invalid
        """
        config = self.load()
        if config:
            self.validate(config)
        return config
