"""
Logging configuration module for gcontacts.

Provides centralized logging configuration with support for:
- Console and file logging
- Configurable log levels via environment variables
- Verbose mode for detailed output (request lines, rendered payload sizes)
- Colored output for better readability (when supported)
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

# Root logger name for the package
LOGGER_NAME = "gcontacts"

# Default log format
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Simplified format for console (less verbose)
CONSOLE_FORMAT = "%(levelname)s: %(message)s"

# Verbose format (includes more details)
VERBOSE_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
)

# Date format for log timestamps
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Environment variable names
ENV_LOG_LEVEL = "GCONTACTS_LOG_LEVEL"
ENV_DEBUG = "GCONTACTS_DEBUG"
ENV_LOG_FILE = "GCONTACTS_LOG_FILE"

LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class ColoredFormatter(logging.Formatter):
    """
    A logging formatter that adds ANSI color codes to log messages.

    Colors are only applied when output is to a terminal that supports them.
    """

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        use_colors: bool = True,
    ):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and self._supports_color()

    def _supports_color(self) -> bool:
        """Check if the terminal supports colors."""
        if not hasattr(sys.stderr, "isatty") or not sys.stderr.isatty():
            return False

        # https://no-color.org/
        if os.environ.get("NO_COLOR"):
            return False

        return os.environ.get("TERM", "") != "dumb"

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional colors."""
        # Copy so other handlers see the uncolored record
        record = logging.makeLogRecord(record.__dict__)

        if self.use_colors and record.levelname in self.COLORS:
            color = self.COLORS[record.levelname]
            record.levelname = f"{color}{record.levelname}{self.RESET}"
            record.msg = f"{color}{record.msg}{self.RESET}"

        return super().format(record)


def parse_log_level(value: Optional[str], default: int = logging.INFO) -> int:
    """
    Convert a level name such as "debug" or "WARN" to a logging constant.

    Unknown names fall back to ``default``.
    """
    if not value:
        return default
    return LEVEL_MAP.get(value.upper(), default)


def get_log_level_from_env() -> int:
    """
    Get the logging level from environment variables.

    GCONTACTS_DEBUG takes precedence over GCONTACTS_LOG_LEVEL.

    Returns:
        Logging level constant (e.g., logging.DEBUG, logging.INFO)
    """
    if os.environ.get(ENV_DEBUG, "").lower() in ("1", "true", "yes"):
        return logging.DEBUG

    return parse_log_level(os.environ.get(ENV_LOG_LEVEL, "INFO"))


def get_log_file_path() -> Optional[Path]:
    """
    Get the log file path from the environment.

    Returns:
        Path to log file, or None if file logging is not requested
    """
    log_file = os.environ.get(ENV_LOG_FILE)
    if not log_file or log_file.lower() in ("none", "disabled"):
        return None
    return Path(log_file)


def setup_logging(
    level: Optional[int] = None,
    verbose: bool = False,
    log_file: Optional[Path] = None,
    enable_file_logging: bool = True,
    use_colors: bool = True,
) -> logging.Logger:
    """
    Configure logging for the gcontacts package.

    Sets up a console handler and, when a log file is known, a file handler
    that always records DEBUG output.

    Args:
        level: Logging level (e.g., logging.DEBUG). If None, determined from
               environment variables.
        verbose: If True, use verbose format and DEBUG level.
        log_file: Path to log file. If None, uses GCONTACTS_LOG_FILE if set.
        enable_file_logging: If False, disable file logging entirely.
        use_colors: If True, use colored output for console (when supported).

    Returns:
        The root logger for gcontacts

    Example:
        # Basic setup
        setup_logging()

        # Verbose mode for CLI
        setup_logging(verbose=True)

        # Also write a log file
        setup_logging(log_file=Path("/tmp/gcontacts.log"))
    """
    if level is None:
        level = get_log_level_from_env()
    if verbose:
        level = logging.DEBUG

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    console_format = VERBOSE_FORMAT if verbose else CONSOLE_FORMAT

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    console_formatter: logging.Formatter
    if use_colors:
        console_formatter = ColoredFormatter(console_format, DATE_FORMAT)
    else:
        console_formatter = logging.Formatter(console_format, DATE_FORMAT)

    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if enable_file_logging:
        file_path = log_file or get_log_file_path()
        if file_path:
            try:
                file_path.parent.mkdir(parents=True, exist_ok=True)

                file_handler = logging.FileHandler(file_path, encoding="utf-8")
                file_handler.setLevel(logging.DEBUG)  # Always capture debug in file
                file_handler.setFormatter(
                    logging.Formatter(VERBOSE_FORMAT, DATE_FORMAT)
                )
                logger.addHandler(file_handler)

                logger.debug(f"Log file: {file_path}")
            except (OSError, PermissionError) as e:
                logger.warning(f"Could not create log file {file_path}: {e}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Names outside the package hierarchy are placed under ``gcontacts``.

    Args:
        name: Name of the module (typically __name__)

    Returns:
        Logger instance for the module
    """
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)


def set_log_level(level: int) -> None:
    """
    Change the logging level at runtime.

    File handlers are left at DEBUG.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in logger.handlers:
        if not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)


def disable_logging() -> None:
    """Disable all logging output."""
    logging.getLogger(LOGGER_NAME).disabled = True


def enable_logging() -> None:
    """Re-enable logging output after it was disabled."""
    logging.getLogger(LOGGER_NAME).disabled = False


__all__ = [
    "setup_logging",
    "get_logger",
    "set_log_level",
    "disable_logging",
    "enable_logging",
    "parse_log_level",
    "ColoredFormatter",
    "get_log_level_from_env",
    "get_log_file_path",
    "LOGGER_NAME",
    "DEFAULT_FORMAT",
    "CONSOLE_FORMAT",
    "VERBOSE_FORMAT",
    "DATE_FORMAT",
]
