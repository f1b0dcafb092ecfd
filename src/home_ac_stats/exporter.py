"""
Metrics exporter lifecycle.

Owns the connection to Google Cloud Monitoring for one run:
UNINITIALIZED -> STARTED -> FLUSHED, with no way back to STARTED.
"""
import logging
from enum import Enum
from typing import List, Optional

from opentelemetry.exporter.cloud_monitoring import CloudMonitoringMetricsExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.metrics.view import View

from .config import DEFAULT_EXPORT_INTERVAL, DEFAULT_METRIC_PREFIX, ConfigError


logger = logging.getLogger(__name__)


class ExporterError(Exception):
    """Raised when the metrics backend cannot be reached or started."""
    pass


class ExporterState(Enum):
    UNINITIALIZED = "uninitialized"
    STARTED = "started"
    FLUSHED = "flushed"


class ExporterLifecycle:
    """
    Scoped handle on the metrics backend.

    Use as a context manager around the whole run so buffered metrics are
    flushed and the background export thread is stopped on every exit path:

        with ExporterLifecycle(project_id, MetricsRecorder.views()) as lifecycle:
            recorder = MetricsRecorder(lifecycle.meter_provider)
            ...
    """

    def __init__(
        self,
        project_id: str,
        views: List[View],
        exporter: Optional[MetricExporter] = None,
        export_interval_millis: int = DEFAULT_EXPORT_INTERVAL * 1000,
        metric_prefix: str = DEFAULT_METRIC_PREFIX,
    ):
        """
        Args:
            project_id: Google Cloud project receiving the time series
            views: Views to install on the meter provider
            exporter: Exporter to use instead of Cloud Monitoring
            export_interval_millis: Period of the background export
            metric_prefix: Cloud Monitoring metric type prefix
        """
        self.project_id = project_id
        self.views = views
        self.export_interval_millis = export_interval_millis
        self.metric_prefix = metric_prefix
        self.state = ExporterState.UNINITIALIZED
        self._exporter = exporter
        self._meter_provider: Optional[MeterProvider] = None

    @property
    def meter_provider(self) -> MeterProvider:
        if self.state is not ExporterState.STARTED:
            raise ExporterError(f"meter provider unavailable in state {self.state.value}")
        return self._meter_provider

    def start(self) -> "ExporterLifecycle":
        """
        Connect to the backend and begin periodic export.

        Raises:
            ConfigError: If no project id is configured
            ExporterError: If the exporter cannot be created or started
        """
        if self.state is not ExporterState.UNINITIALIZED:
            raise ExporterError(f"cannot start exporter in state {self.state.value}")
        if not self.project_id:
            raise ConfigError("GOOGLE_PROJECT not set")

        try:
            if self._exporter is None:
                self._exporter = CloudMonitoringMetricsExporter(
                    project_id=self.project_id, prefix=self.metric_prefix
                )
            reader = PeriodicExportingMetricReader(
                self._exporter, export_interval_millis=self.export_interval_millis
            )
            self._meter_provider = MeterProvider(
                metric_readers=[reader], views=self.views, shutdown_on_exit=False
            )
        except Exception as e:
            raise ExporterError(f"error starting metric exporter: {e}") from e

        self.state = ExporterState.STARTED
        logger.info(
            f"Started metrics exporter for project {self.project_id} "
            f"(interval={self.export_interval_millis}ms)"
        )
        return self

    def close(self) -> None:
        """
        Flush buffered metrics, then stop the background exporter.

        Safe to call more than once. Does nothing if the exporter never started.
        """
        if self.state is not ExporterState.STARTED:
            return

        try:
            if not self._meter_provider.force_flush():
                logger.warning("Metrics flush did not complete before timeout")
        except Exception as e:
            logger.error(f"Failed to flush metrics: {e}")
        finally:
            self.state = ExporterState.FLUSHED
            try:
                self._meter_provider.shutdown()
            except Exception as e:
                logger.error(f"Failed to stop metrics exporter: {e}")

        logger.info("Flushed metrics and stopped exporter")

    def __enter__(self) -> "ExporterLifecycle":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ExporterLifecycle(project_id={self.project_id}, state={self.state.value})"
