"""
Data models for home-ac-stats.
"""
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class Device:
    """
    Represents the current state of a single Sensibo climate-control unit.

    Created fresh from every device listing and discarded at exit.
    """

    # Unique pod identifier
    id: str

    # Free-text room name as entered in the Sensibo app
    room_name: str = ""

    # AC power state
    ac_on: bool = False

    # Measured room temperature (Celsius)
    temperature: float = 0.0

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "Device":
        """
        Create a Device from a Sensibo pod object.

        Missing nested objects decode to zero values. Fields of the wrong
        JSON type are rejected.

        Args:
            data: Pod dictionary from the ``result`` list

        Returns:
            Device instance

        Raises:
            ValueError: If the pod object has the wrong shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"device entry must be an object, got {type(data).__name__}")

        device_id = data.get("id") or ""
        if not isinstance(device_id, str):
            raise ValueError(f"device id must be a string, got {device_id!r}")

        room_name = _nested(data, "room", "name", "")
        if not isinstance(room_name, str):
            raise ValueError(f"room.name must be a string for device {device_id}")

        ac_on = _nested(data, "acState", "on", False)
        if not isinstance(ac_on, bool):
            raise ValueError(f"acState.on must be a boolean for device {device_id}")

        temperature = _nested(data, "measurements", "temperature", 0.0)
        if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
            raise ValueError(f"measurements.temperature must be a number for device {device_id}")

        return cls(
            id=device_id,
            room_name=room_name,
            ac_on=ac_on,
            temperature=float(temperature),
        )


@dataclass
class WeatherReading:
    """Outside temperature (Celsius) for a fixed coordinate, valid for the current hour."""

    temperature: float
    latitude: float
    longitude: float


def _nested(data: Dict[str, Any], section: str, key: str, default: Any) -> Any:
    """Read data[section][key], treating a missing or null value as the default."""
    inner = data.get(section)
    if inner is None:
        return default
    if not isinstance(inner, dict):
        raise ValueError(f"{section} must be an object, got {type(inner).__name__}")
    value = inner.get(key)
    return default if value is None else value
