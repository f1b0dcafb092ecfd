"""
Measurement definitions and recording.

Every metric is a point-in-time gauge: the value exported is the last one
set, so views use last-value aggregation rather than sums or histograms.
"""
import logging
from typing import Dict, Iterable, List

from opentelemetry.metrics import MeterProvider
from opentelemetry.sdk.metrics.view import LastValueAggregation, View

from .models import Device, WeatherReading
from .utils import bool_to_int, sanitize_label


logger = logging.getLogger(__name__)

METER_NAME = "home_ac_stats"

OUTSIDE_TEMP = "outside_temp"
ROOM_TEMP = "room_temp"
AC_STATE = "ac_state"

ROOM_KEY = "room"


class MetricsError(Exception):
    """Base exception for metric registration and recording errors."""
    pass


class RegistrationError(MetricsError):
    """Raised when views or instruments cannot be set up."""
    pass


class RecordError(MetricsError):
    """Raised when a measurement cannot be recorded for a device."""

    def __init__(self, device_id: str, cause: Exception):
        super().__init__(f"failed to record measurement for device {device_id}: {cause}")
        self.device_id = device_id


class MetricsRecorder:
    """
    Registry of the job's instruments.

    Built once per run against a started meter provider and passed to
    whatever records measurements.
    """

    def __init__(self, meter_provider: MeterProvider):
        """
        Create the outside_temp, room_temp and ac_state instruments.

        Args:
            meter_provider: Provider configured with ``MetricsRecorder.views()``

        Raises:
            RegistrationError: If an instrument cannot be created
        """
        try:
            meter = meter_provider.get_meter(METER_NAME)
            self.outside_temp = meter.create_gauge(
                OUTSIDE_TEMP, unit="C", description="Outside temperature in Celsius"
            )
            self.room_temp = meter.create_gauge(
                ROOM_TEMP, unit="C", description="The room temperature in Celsius"
            )
            self.ac_state = meter.create_gauge(
                AC_STATE, unit="state", description="AC state (on=1, off=0)"
            )
        except Exception as e:
            raise RegistrationError(f"failed to create instruments: {e}") from e

    @staticmethod
    def views() -> List[View]:
        """
        Views for the three gauges, to be installed on the meter provider.

        room_temp and ac_state keep only the room label; outside_temp keeps none.

        Raises:
            RegistrationError: If a view cannot be built
        """
        try:
            return [
                View(
                    instrument_name=OUTSIDE_TEMP,
                    aggregation=LastValueAggregation(),
                    attribute_keys=set(),
                ),
                View(
                    instrument_name=ROOM_TEMP,
                    aggregation=LastValueAggregation(),
                    attribute_keys={ROOM_KEY},
                ),
                View(
                    instrument_name=AC_STATE,
                    aggregation=LastValueAggregation(),
                    attribute_keys={ROOM_KEY},
                ),
            ]
        except Exception as e:
            raise RegistrationError(f"failed to register views: {e}") from e

    def record_outside_temperature(self, reading: WeatherReading) -> None:
        logger.info(f"outside_temp {reading.temperature}")
        self.outside_temp.set(reading.temperature)

    def record_device(self, device: Device) -> Dict[str, str]:
        """
        Record room temperature and AC state for one device.

        Both values share a single label set derived from the device's
        room name.

        Args:
            device: Device to record

        Returns:
            The label set the values were recorded under

        Raises:
            RecordError: If either value cannot be recorded
        """
        room = sanitize_label(device.room_name)
        attributes = upsert({}, ROOM_KEY, room)

        logger.info(
            f"recording {device.id} room={room} "
            f"temp={device.temperature:f} ac={str(device.ac_on).lower()}"
        )

        try:
            self.room_temp.set(device.temperature, attributes)
            self.ac_state.set(bool_to_int(device.ac_on), attributes)
        except Exception as e:
            raise RecordError(device.id, e) from e

        return attributes

    def record_devices(self, devices: Iterable[Device]) -> int:
        """
        Record every device in order, stopping at the first failure.

        Returns:
            Number of devices recorded

        Raises:
            RecordError: On the first device that cannot be recorded
        """
        count = 0
        for device in devices:
            self.record_device(device)
            count += 1
        return count


def upsert(attributes: Dict[str, str], key: str, value: str) -> Dict[str, str]:
    """Return a copy of attributes with key set to value, replacing any existing value."""
    updated = dict(attributes)
    updated[key] = value
    return updated
