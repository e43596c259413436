"""
Path utilities for configuration directory resolution.

Provides consistent path resolution for the gcontacts configuration
directory across all modules.
"""

from __future__ import annotations

import os
from pathlib import Path

# Default configuration directory
DEFAULT_CONFIG_DIR = Path.home() / ".gcontacts"

# Environment variable for overriding config directory
CONFIG_DIR_ENV_VAR = "GCONTACTS_CONFIG_DIR"

# Default name of the stored OAuth token file inside the config directory
DEFAULT_TOKEN_FILE = "token.json"


def resolve_config_dir(config_dir: Path | str | None = None) -> Path:
    """
    Resolve the configuration directory path.

    Priority:
        1. Explicit config_dir parameter (if provided)
        2. GCONTACTS_CONFIG_DIR environment variable
        3. Default directory (~/.gcontacts)

    Args:
        config_dir: Optional explicit configuration directory path.
                   Can be a Path object or string.

    Returns:
        Resolved Path to the configuration directory (expanduser and resolve applied)
    """
    if config_dir is not None:
        return Path(config_dir).expanduser().resolve()

    env_dir = os.environ.get(CONFIG_DIR_ENV_VAR)
    if env_dir:
        return Path(env_dir).expanduser().resolve()

    return DEFAULT_CONFIG_DIR.expanduser().resolve()


def resolve_token_path(
    token_file: Path | str | None, config_dir: Path | str | None = None
) -> Path:
    """
    Resolve the token file location.

    Relative token paths are taken relative to the configuration directory.
    """
    base = resolve_config_dir(config_dir)
    if not token_file:
        return base / DEFAULT_TOKEN_FILE
    path = Path(token_file).expanduser()
    if not path.is_absolute():
        path = base / path
    return path
