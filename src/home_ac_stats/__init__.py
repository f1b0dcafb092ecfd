"""
home-ac-stats - Sensibo AC metrics collection job.

Reads climate-control devices from the Sensibo API and the outside
temperature from Open-Meteo, and publishes both as Google Cloud Monitoring
time series in a single pass.
"""

__version__ = "0.1.0"

from .api_client import (
    APIError,
    DecodeError,
    NoDataError,
    OpenMeteoClient,
    RequestError,
    ResponseError,
    SensiboClient,
)
from .config import Config, ConfigError
from .exporter import ExporterError, ExporterLifecycle, ExporterState
from .metrics import MetricsError, MetricsRecorder, RecordError, RegistrationError
from .models import Device, WeatherReading

__all__ = [
    "APIError",
    "DecodeError",
    "NoDataError",
    "OpenMeteoClient",
    "RequestError",
    "ResponseError",
    "SensiboClient",
    "Config",
    "ConfigError",
    "ExporterError",
    "ExporterLifecycle",
    "ExporterState",
    "MetricsError",
    "MetricsRecorder",
    "RecordError",
    "RegistrationError",
    "Device",
    "WeatherReading",
]
