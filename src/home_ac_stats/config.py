"""
Configuration management for home-ac-stats.
Supports loading from environment variables and an optional YAML file.
"""
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_LATITUDE = 47.68
DEFAULT_LONGITUDE = -122.38
DEFAULT_METRIC_PREFIX = "custom.googleapis.com/opencensus"
DEFAULT_EXPORT_INTERVAL = 60
DEFAULT_HTTP_TIMEOUT = 10


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""
    pass


class Config:
    """Configuration manager for home-ac-stats."""

    def __init__(self, config_dict: Dict[str, Any]):
        """
        Initialize Config with a dictionary.

        Args:
            config_dict: Configuration dictionary
        """
        self._config = config_dict
        self.validate()

    @classmethod
    def load_from_file(cls, path: str = "config.yaml") -> "Config":
        """
        Load configuration from a YAML file.

        Environment variables take precedence over values from the file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            ConfigError: If file cannot be read or parsed
        """
        config_path = Path(path)

        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with open(config_path, 'r') as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML configuration: {e}")
        except IOError as e:
            raise ConfigError(f"Failed to read configuration file: {e}")

        if config_dict is None:
            raise ConfigError(f"Configuration file is empty: {path}")
        if not isinstance(config_dict, dict):
            raise ConfigError(f"Configuration file must contain a mapping: {path}")

        return cls(_merge(config_dict, _read_env()))

    @classmethod
    def load_from_env(cls) -> "Config":
        """
        Load configuration from environment variables.

        SENSIBO_API_KEY and GOOGLE_PROJECT are required. Optional settings
        are prefixed with HOME_AC_STATS_.

        Example:
            SENSIBO_API_KEY=abc123
            GOOGLE_PROJECT=my-project
            HOME_AC_STATS_LOGGING_LEVEL=DEBUG

        Returns:
            Config instance
        """
        return cls(_read_env())

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigError: If any required field is missing or invalid
        """
        if not self.get("sensibo.api_key"):
            raise ConfigError("SENSIBO_API_KEY not set")
        if not self.get("google.project"):
            raise ConfigError("GOOGLE_PROJECT not set")

        for key in ("weather.latitude", "weather.longitude"):
            value = self.get(key)
            if value is not None and not _is_number(value):
                raise ConfigError(f"{key} must be a number, got {value!r}")

        latitude = self.get("weather.latitude", DEFAULT_LATITUDE)
        if not -90 <= float(latitude) <= 90:
            raise ConfigError(f"weather.latitude out of range: {latitude}")
        longitude = self.get("weather.longitude", DEFAULT_LONGITUDE)
        if not -180 <= float(longitude) <= 180:
            raise ConfigError(f"weather.longitude out of range: {longitude}")

        interval = self.get("metrics.export_interval", DEFAULT_EXPORT_INTERVAL)
        if not isinstance(interval, int) or interval < 1:
            raise ConfigError("metrics.export_interval must be a positive integer (seconds)")

        timeout = self.get("http.timeout", DEFAULT_HTTP_TIMEOUT)
        if not _is_number(timeout) or timeout <= 0:
            raise ConfigError("http.timeout must be a positive number (seconds)")

        log_level = self.get("logging.level", "INFO")
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if str(log_level).upper() not in valid_levels:
            raise ConfigError(f"Invalid log level: {log_level}. Must be one of {valid_levels}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'sensibo.api_key')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @property
    def api_key(self) -> str:
        return self.get("sensibo.api_key")

    @property
    def project_id(self) -> str:
        return self.get("google.project")

    @property
    def latitude(self) -> float:
        return float(self.get("weather.latitude", DEFAULT_LATITUDE))

    @property
    def longitude(self) -> float:
        return float(self.get("weather.longitude", DEFAULT_LONGITUDE))

    @property
    def metric_prefix(self) -> str:
        return self.get("metrics.prefix", DEFAULT_METRIC_PREFIX)

    @property
    def export_interval_millis(self) -> int:
        return self.get("metrics.export_interval", DEFAULT_EXPORT_INTERVAL) * 1000

    @property
    def http_timeout(self) -> float:
        return float(self.get("http.timeout", DEFAULT_HTTP_TIMEOUT))

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration section with defaults."""
        defaults = {
            "level": "INFO",
            "file": None,
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        }
        config = self._config.get("logging") or {}
        return {**defaults, **config}

    def to_dict(self, sanitize: bool = True) -> Dict[str, Any]:
        """
        Export configuration as dictionary.

        Args:
            sanitize: If True, redact the Sensibo API key

        Returns:
            Configuration dictionary
        """
        if not sanitize:
            return self._config.copy()

        sanitized = self._config.copy()

        if "sensibo" in sanitized:
            sensibo = sanitized["sensibo"].copy()
            if "api_key" in sensibo:
                sensibo["api_key"] = "***REDACTED***"
            sanitized["sensibo"] = sensibo

        return sanitized


def _read_env() -> Dict[str, Any]:
    """Collect configuration values present in the environment."""
    config_dict: Dict[str, Any] = {
        "sensibo": {},
        "google": {},
        "weather": {},
        "metrics": {},
        "http": {},
        "logging": {}
    }

    if api_key := os.getenv("SENSIBO_API_KEY"):
        config_dict["sensibo"]["api_key"] = api_key
    if project := os.getenv("GOOGLE_PROJECT"):
        config_dict["google"]["project"] = project

    # Weather coordinate
    if latitude := os.getenv("HOME_AC_STATS_LATITUDE"):
        config_dict["weather"]["latitude"] = _parse_number("HOME_AC_STATS_LATITUDE", latitude)
    if longitude := os.getenv("HOME_AC_STATS_LONGITUDE"):
        config_dict["weather"]["longitude"] = _parse_number("HOME_AC_STATS_LONGITUDE", longitude)

    # Metrics export
    if prefix := os.getenv("HOME_AC_STATS_METRIC_PREFIX"):
        config_dict["metrics"]["prefix"] = prefix
    if interval := os.getenv("HOME_AC_STATS_EXPORT_INTERVAL"):
        try:
            config_dict["metrics"]["export_interval"] = int(interval)
        except ValueError:
            raise ConfigError(f"HOME_AC_STATS_EXPORT_INTERVAL must be an integer, got {interval!r}")

    if timeout := os.getenv("HOME_AC_STATS_HTTP_TIMEOUT"):
        config_dict["http"]["timeout"] = _parse_number("HOME_AC_STATS_HTTP_TIMEOUT", timeout)

    # Logging settings
    if log_level := os.getenv("HOME_AC_STATS_LOGGING_LEVEL"):
        config_dict["logging"]["level"] = log_level
    if log_file := os.getenv("HOME_AC_STATS_LOGGING_FILE"):
        config_dict["logging"]["file"] = log_file
    if log_format := os.getenv("HOME_AC_STATS_LOGGING_FORMAT"):
        config_dict["logging"]["format"] = log_format

    return {section: values for section, values in config_dict.items() if values}


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for section, values in overrides.items():
        current = merged.get(section)
        if isinstance(current, dict):
            merged[section] = {**current, **values}
        else:
            merged[section] = dict(values)
    return merged


def _parse_number(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def _is_number(value: Optional[Any]) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
