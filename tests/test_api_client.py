"""
Tests for API client module.
"""
import pytest
import requests
from unittest.mock import Mock, patch

from home_ac_stats.api_client import (
    DecodeError,
    NoDataError,
    OpenMeteoClient,
    RequestError,
    ResponseError,
    SensiboClient,
)


def make_response(status_code=200, payload=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.text = text
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


class TestSensiboClient:
    """Tests for SensiboClient class."""

    @pytest.fixture
    def client(self):
        """Create a test client."""
        return SensiboClient(api_key="test_api_key")

    def test_empty_api_key_rejected(self):
        with pytest.raises(ValueError):
            SensiboClient(api_key="")

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_get_devices_success(self, mock_get, client, pods_payload):
        """Test successful device list retrieval."""
        mock_get.return_value = make_response(payload=pods_payload)

        devices = client.get_devices()

        assert len(devices) == 2
        assert devices[0].id == "d1"
        assert devices[0].room_name == "Living Room"
        assert devices[0].ac_on is True
        assert devices[0].temperature == 21.5
        assert devices[1].ac_on is False
        assert devices[1].temperature == 19.0

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_get_devices_request_parameters(self, mock_get, client):
        mock_get.return_value = make_response(payload={"status": "success", "result": []})

        client.get_devices()

        mock_get.assert_called_once()
        args, kwargs = mock_get.call_args
        assert args[0] == "https://home.sensibo.com/api/v2/users/me/pods"
        assert kwargs["params"] == {"apiKey": "test_api_key", "fields": "*"}
        assert kwargs["timeout"] == 10

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_server_error_carries_body(self, mock_get, client):
        """Test that a 500 surfaces the response body verbatim."""
        mock_get.return_value = make_response(
            status_code=500, text='{"reason": "internal failure"}'
        )

        with pytest.raises(ResponseError) as excinfo:
            client.get_devices()

        assert excinfo.value.status_code == 500
        assert excinfo.value.body == '{"reason": "internal failure"}'
        assert str(excinfo.value) == 'request failed code=500 error={"reason": "internal failure"}'

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_authentication_error(self, mock_get, client):
        mock_get.return_value = make_response(status_code=401, text="bad key")

        with pytest.raises(ResponseError, match="code=401"):
            client.get_devices()

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_connection_error(self, mock_get, client):
        mock_get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(RequestError, match="connection refused"):
            client.get_devices()

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_timeout(self, mock_get, client):
        mock_get.side_effect = requests.Timeout()

        with pytest.raises(RequestError, match="timed out"):
            client.get_devices()

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_invalid_json(self, mock_get, client):
        mock_get.return_value = make_response(payload=ValueError("Expecting value"))

        with pytest.raises(DecodeError):
            client.get_devices()

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_result_not_a_list(self, mock_get, client):
        mock_get.return_value = make_response(payload={"status": "success", "result": {}})

        with pytest.raises(DecodeError, match="result"):
            client.get_devices()

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_malformed_device(self, mock_get, client):
        mock_get.return_value = make_response(payload={
            "status": "success",
            "result": [{"id": "d1", "acState": {"on": "yes"}}],
        })

        with pytest.raises(DecodeError, match="acState.on"):
            client.get_devices()

    def test_repr_redacts_key(self, client):
        assert "test_api_key" not in repr(client)


class TestOpenMeteoClient:
    """Tests for OpenMeteoClient class."""

    @pytest.fixture
    def client(self):
        return OpenMeteoClient()

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_first_hourly_value_is_current(self, mock_get, client, weather_payload):
        mock_get.return_value = make_response(payload=weather_payload)

        reading = client.get_current_temperature()

        assert reading.temperature == 12.3
        assert reading.latitude == 47.68
        assert reading.longitude == -122.38

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_request_parameters(self, mock_get, client, weather_payload):
        mock_get.return_value = make_response(payload=weather_payload)

        client.get_current_temperature()

        args, kwargs = mock_get.call_args
        assert args[0] == "https://api.open-meteo.com/v1/forecast"
        assert kwargs["params"] == {
            "latitude": "47.68",
            "longitude": "-122.38",
            "hourly": "temperature_2m",
        }

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_empty_series(self, mock_get, client):
        mock_get.return_value = make_response(payload={"hourly": {"temperature_2m": []}})

        with pytest.raises(NoDataError, match="no temperature data found"):
            client.get_current_temperature()

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_missing_hourly(self, mock_get, client):
        mock_get.return_value = make_response(payload={})

        with pytest.raises(NoDataError):
            client.get_current_temperature()

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_non_numeric_temperature(self, mock_get, client):
        mock_get.return_value = make_response(payload={"hourly": {"temperature_2m": ["warm"]}})

        with pytest.raises(DecodeError):
            client.get_current_temperature()

    @patch('home_ac_stats.api_client.requests.Session.get')
    def test_connection_error(self, mock_get, client):
        mock_get.side_effect = requests.ConnectionError("dns failure")

        with pytest.raises(RequestError):
            client.get_current_temperature()
