"""
Utility functions for home-ac-stats.
"""
import logging
from pathlib import Path
from typing import Any, Optional


def setup_logging(
    log_level: str = "INFO", log_file: Optional[str] = None, log_format: str = None
) -> None:
    """
    Setup logging configuration with a console handler and an optional file handler.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file, or None to log to the console only
        log_format: Log message format string
    """
    if log_format is None:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    level = getattr(logging, log_level.upper(), logging.INFO)

    # Configure root logger
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)


def sanitize_label(value: str) -> str:
    """
    Turn a free-text name into a metric label value.

    ASCII letters, digits and underscores are kept, each space becomes an
    underscore and every other character is dropped. Underscores pass through
    so that sanitizing a label twice gives the same label. Words joined by
    punctuation are merged: "Living-Room" becomes "LivingRoom".

    Args:
        value: Arbitrary string, e.g. a room name

    Returns:
        String containing only [A-Za-z0-9_]
    """
    chars = []
    for char in value:
        if (char.isascii() and char.isalnum()) or char == "_":
            chars.append(char)
        elif char == " ":
            chars.append("_")
    return "".join(chars)


def bool_to_int(value: bool) -> int:
    """Map True to 1 and False to 0."""
    return 1 if value else 0


def sanitize_for_logging(data: Any) -> Any:
    """
    Sanitize data for logging by redacting sensitive information.

    Args:
        data: Data to sanitize; only dicts are changed

    Returns:
        Sanitized data
    """
    if isinstance(data, dict):
        sanitized = {}
        sensitive_keys = {"api_key", "apikey", "password", "secret", "token"}

        for key, value in data.items():
            if key.lower() in sensitive_keys:
                sanitized[key] = "***REDACTED***"
            elif isinstance(value, dict):
                sanitized[key] = sanitize_for_logging(value)
            else:
                sanitized[key] = value

        return sanitized
    return data
