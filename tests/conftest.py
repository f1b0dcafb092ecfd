"""
Shared fixtures for home-ac-stats tests.
"""
from typing import Dict, Tuple

import pytest
from opentelemetry.sdk.metrics.export import MetricExporter, MetricExportResult

from home_ac_stats.config import Config


class RecordingExporter(MetricExporter):
    """Metric exporter that keeps every batch in memory."""

    def __init__(self):
        super().__init__()
        self.batches = []
        self.calls = []

    def export(self, metrics_data, timeout_millis: float = 10_000, **kwargs) -> MetricExportResult:
        self.calls.append("export")
        self.batches.append(metrics_data)
        return MetricExportResult.SUCCESS

    def force_flush(self, timeout_millis: float = 10_000) -> bool:
        self.calls.append("force_flush")
        return True

    def shutdown(self, timeout_millis: float = 30_000, **kwargs) -> None:
        self.calls.append("shutdown")

    def points(self) -> Dict[Tuple[str, Tuple], float]:
        """Latest exported value per (metric name, sorted attributes)."""
        return collect_points(self.batches)


def collect_points(batches) -> Dict[Tuple[str, Tuple], float]:
    latest = {}
    for metrics_data in batches:
        if metrics_data is None:
            continue
        for resource_metrics in metrics_data.resource_metrics:
            for scope_metrics in resource_metrics.scope_metrics:
                for metric in scope_metrics.metrics:
                    for point in metric.data.data_points:
                        key = (metric.name, tuple(sorted(dict(point.attributes or {}).items())))
                        latest[key] = point.value
    return latest


@pytest.fixture
def recording_exporter():
    return RecordingExporter()


@pytest.fixture
def config():
    return Config({
        "sensibo": {"api_key": "test_api_key"},
        "google": {"project": "test-project"},
    })


@pytest.fixture
def pods_payload():
    """Sensibo /users/me/pods response with two devices."""
    return {
        "status": "success",
        "result": [
            {
                "id": "d1",
                "room": {"name": "Living Room"},
                "acState": {"on": True},
                "measurements": {"temperature": 21.5},
            },
            {
                "id": "d2",
                "room": {"name": "Kid's Bedroom-2"},
                "acState": {"on": False},
                "measurements": {"temperature": 19},
            },
        ],
    }


@pytest.fixture
def weather_payload():
    return {"hourly": {"temperature_2m": [12.3, 12.9, 13.4]}}


@pytest.fixture
def read_points():
    """Flatten exported metrics data into {(name, attributes): value}."""
    return collect_points
