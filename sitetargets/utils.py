"""
Utility functions for the site targets toolkit.

This module provides helper functions used across the toolkit,
including logging setup, JSON file I/O and input validation.
"""

import json
import logging
import logging.handlers
import os
import sys
from typing import Any, Optional, Union

# Default log format
DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)8s] %(message)s (%(name)s:%(lineno)s)"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Environment variable consulted when no explicit level is given
LOG_LEVEL_ENV_VAR = "SITETARGETS_LOG_LEVEL"

# Log levels dictionary for easier configuration
LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def parse_log_level(level: Optional[Union[str, int]] = None, env_var: str = LOG_LEVEL_ENV_VAR) -> int:
    """
    Parse log level from various inputs with priority order:
    1. Explicit level parameter
    2. Environment variable
    3. Default (INFO)

    Args:
        level: Explicit log level (name or constant)
        env_var: Name of environment variable to check

    Returns:
        Log level as an integer constant

    Examples:
        >>> parse_log_level("debug")
        10
        >>> parse_log_level(None, "NONEXISTENT_VAR")
        20
    """
    if level is not None:
        if isinstance(level, str):
            level_str = level.lower()
            if level_str in LOG_LEVELS:
                return LOG_LEVELS[level_str]
            # Fall through to default if invalid level name
        elif isinstance(level, int):
            return level

    env_level = os.environ.get(env_var)
    if env_level:
        env_level = env_level.lower()
        if env_level in LOG_LEVELS:
            return LOG_LEVELS[env_level]

    return logging.INFO


def configure_logging(
    level: Union[str, int] = "info",
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    console: bool = True,
) -> None:
    """
    Configure the logging system for the application.

    This function sets up the root logger with handlers for console and/or
    file output. Existing handlers on the root logger are replaced, so it
    is safe to call more than once.

    Console output goes to stderr so that command output written to
    stdout stays machine readable.

    Args:
        level: Log level (debug, info, warning, error, critical) or logging constant
        log_file: Optional path to log file
        log_format: Optional custom log format
        date_format: Optional custom date format
        console: Whether to log to console
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:  # Use a copy to avoid modification during iteration
        root_logger.removeHandler(handler)

    log_level = parse_log_level(level)
    root_logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt=log_format or DEFAULT_LOG_FORMAT,
        datefmt=date_format or DEFAULT_DATE_FORMAT
    )

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(log_level)
        root_logger.addHandler(console_handler)

    if log_file:
        ensure_directory_exists(log_file)

        # Use a rotating file handler to prevent huge log files
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    level_name = logging.getLevelName(log_level)
    root_logger.debug(f"Logging configured: level={level_name}")
    if log_file:
        root_logger.debug(f"Log file: {log_file}")


def is_valid_file_path(file_path: str) -> bool:
    """
    Check if a file path is valid and writable.

    Args:
        file_path: Path to check

    Returns:
        True if valid and writable, False otherwise
    """
    if not file_path:
        return False

    directory = os.path.dirname(file_path)
    if not directory:  # If no directory was specified, use current directory
        directory = '.'

    return os.path.isdir(directory) and os.access(directory, os.W_OK)


def is_valid_hostname(hostname: str) -> bool:
    """
    Check if a hostname has a format usable in a certificate request.

    This is a basic validation that ensures:
    - Contains at least one period
    - Labels are 1-63 characters of letters, digits, hyphens or underscores
    - Labels do not start or end with a hyphen
    - Only the first label may be a '*' wildcard

    Internationalized labels are accepted in both Unicode and IDNA form.

    Args:
        hostname: Hostname to validate

    Returns:
        True if the hostname has a valid format, False otherwise

    Examples:
        >>> is_valid_hostname("*.example.com")
        True
        >>> is_valid_hostname("exa mple.com")
        False
    """
    if not hostname or '.' not in hostname:
        return False

    if hostname.endswith('.'):
        hostname = hostname[:-1]

    if len(hostname) > 253:
        return False

    parts = hostname.split('.')
    for index, part in enumerate(parts):
        if part == '*' and index == 0:
            continue
        if not part or len(part) > 63:
            return False
        if not all(c.isalnum() or c in '-_' for c in part):
            return False
        if part.startswith('-') or part.endswith('-'):
            return False

    return True


# File I/O Utilities

def ensure_directory_exists(file_path: str) -> None:
    """
    Ensure the directory for a file path exists, creating it if necessary.

    Args:
        file_path: Path to a file

    Raises:
        IOError: If the directory cannot be created
    """
    directory = os.path.dirname(file_path)
    if directory and not os.path.exists(directory):
        try:
            os.makedirs(directory, exist_ok=True)
        except (IOError, OSError) as e:
            raise IOError(f"Failed to create directory {directory}: {str(e)}")


def read_json_file(file_path: str) -> Any:
    """
    Read and parse a JSON file.

    Args:
        file_path: Path to the JSON file

    Returns:
        Parsed JSON content (typically a dict or list)

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file contains invalid JSON
        IOError: If there's an error reading the file
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"JSON file not found: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        # Re-raise with more context about which file failed
        raise json.JSONDecodeError(
            f"Invalid JSON in {file_path}: {e.msg}",
            e.doc,
            e.pos
        )
    except IOError as e:
        raise IOError(f"Error reading JSON file {file_path}: {str(e)}")


def write_json_file(data: Any, file_path: str, indent: int = 2) -> None:
    """
    Write data to a JSON file, creating the directory if necessary.

    Args:
        data: Data to serialize to JSON
        file_path: Path where the file should be written
        indent: Number of spaces for indentation

    Raises:
        IOError: If there's an error writing to the file
        TypeError: If the data cannot be serialized to JSON
    """
    ensure_directory_exists(file_path)

    try:
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
    except (IOError, OSError) as e:
        raise IOError(f"Error writing JSON file {file_path}: {str(e)}")
    except TypeError as e:
        raise TypeError(f"Cannot serialize data to JSON: {str(e)}")
