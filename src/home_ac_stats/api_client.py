"""
HTTP clients for the Sensibo device API and the Open-Meteo weather API.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from .config import DEFAULT_HTTP_TIMEOUT, DEFAULT_LATITUDE, DEFAULT_LONGITUDE
from .models import Device, WeatherReading
from .utils import sanitize_for_logging


logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for remote API errors."""
    pass


class RequestError(APIError):
    """Raised when the request could not be sent or no response arrived."""
    pass


class ResponseError(APIError):
    """Raised when the API answers with a non-success status code."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"request failed code={status_code} error={body}")
        self.status_code = status_code
        self.body = body


class DecodeError(APIError):
    """Raised when the response payload cannot be decoded."""
    pass


class NoDataError(APIError):
    """Raised when the response decodes but carries no usable value."""
    pass


class _JSONClient:
    """Shared GET-and-decode plumbing. One request per call, no retries."""

    BASE_URL = ""

    def __init__(self, timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.session = requests.Session()
        self.timeout = timeout

    def _make_request(self, endpoint: str, params: Optional[Dict] = None) -> Any:
        """
        Issue a GET request and decode the JSON body.

        Args:
            endpoint: API endpoint appended to BASE_URL
            params: Query parameters (optional)

        Returns:
            Decoded JSON payload

        Raises:
            RequestError: If the request fails in transport
            ResponseError: If the status code is not 200
            DecodeError: If the body is not valid JSON
        """
        url = f"{self.BASE_URL}{endpoint}"

        logger.debug(f"Making request to {url} params={sanitize_for_logging(params)}")

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout:
            raise RequestError(f"Request to {url} timed out after {self.timeout}s")
        except requests.RequestException as e:
            raise RequestError(f"request error: {e}")

        if response.status_code != 200:
            raise ResponseError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Failed to decode response from {url}: {e}")

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()


class SensiboClient(_JSONClient):
    """
    Client for the Sensibo API.

    API Documentation: https://sensibo.github.io/
    """

    BASE_URL = "https://home.sensibo.com/api/v2"

    def __init__(self, api_key: str, timeout: float = DEFAULT_HTTP_TIMEOUT):
        """
        Initialize Sensibo API client.

        Args:
            api_key: Your Sensibo API key
            timeout: Request timeout in seconds
        """
        if not api_key:
            raise ValueError("api_key must not be empty")
        super().__init__(timeout)
        self.api_key = api_key

        logger.info("Initialized Sensibo API client")

    def get_devices(self) -> List[Device]:
        """
        Get the current state of every device on the account.

        The full list comes back in a single response.

        Returns:
            List of Device instances

        Raises:
            RequestError: If the request fails in transport
            ResponseError: If the API returns a non-200 status
            DecodeError: If the payload is malformed
        """
        logger.debug("Fetching device list")
        payload = self._make_request(
            "/users/me/pods", {"apiKey": self.api_key, "fields": "*"}
        )

        if not isinstance(payload, dict):
            raise DecodeError(f"Expected a JSON object, got {type(payload).__name__}")

        result = payload.get("result")
        if result is None:
            result = []
        if not isinstance(result, list):
            raise DecodeError(f"Expected 'result' to be a list, got {type(result).__name__}")

        try:
            devices = [Device.from_api_response(item) for item in result]
        except ValueError as e:
            raise DecodeError(f"Failed to decode device: {e}")

        logger.info(f"Retrieved {len(devices)} device(s), status={payload.get('status')}")

        return devices

    def __repr__(self) -> str:
        """String representation for debugging."""
        return "SensiboClient(api_key=***REDACTED***)"


class OpenMeteoClient(_JSONClient):
    """
    Client for the public Open-Meteo forecast API.

    API Documentation: https://open-meteo.com/en/docs
    """

    BASE_URL = "https://api.open-meteo.com/v1"

    def __init__(
        self,
        latitude: float = DEFAULT_LATITUDE,
        longitude: float = DEFAULT_LONGITUDE,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        super().__init__(timeout)
        self.latitude = latitude
        self.longitude = longitude

    def get_current_temperature(self) -> WeatherReading:
        """
        Get the current outside temperature.

        The first entry of the hourly temperature_2m series is taken as
        the current value.

        Returns:
            WeatherReading instance

        Raises:
            RequestError: If the request fails in transport
            ResponseError: If the API returns a non-200 status
            DecodeError: If the payload is malformed
            NoDataError: If the hourly series is empty
        """
        params = {
            "latitude": f"{self.latitude:g}",
            "longitude": f"{self.longitude:g}",
            "hourly": "temperature_2m",
        }
        payload = self._make_request("/forecast", params)

        if not isinstance(payload, dict):
            raise DecodeError(f"failed to decode weather response: expected an object, got {type(payload).__name__}")

        hourly = payload.get("hourly")
        if hourly is None:
            hourly = {}
        if not isinstance(hourly, dict):
            raise DecodeError("failed to decode weather response: 'hourly' is not an object")

        series = hourly.get("temperature_2m") or []
        if not isinstance(series, list):
            raise DecodeError("failed to decode weather response: 'temperature_2m' is not a list")
        if not series:
            raise NoDataError("no temperature data found")

        current = series[0]
        if isinstance(current, bool) or not isinstance(current, (int, float)):
            raise DecodeError(f"failed to decode weather response: bad temperature {current!r}")

        return WeatherReading(
            temperature=float(current),
            latitude=self.latitude,
            longitude=self.longitude,
        )

    def __repr__(self) -> str:
        return f"OpenMeteoClient(latitude={self.latitude}, longitude={self.longitude})"
