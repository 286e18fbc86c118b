"""
External user API client tests - requests is mocked throughout.
"""

import pytest
import requests
from unittest.mock import patch, MagicMock

from usersync.core.external import fetch_external_users, ExternalAPIError


@pytest.fixture
def external_env(monkeypatch):
    monkeypatch.setenv("EXTERNAL_API_BASE_URL", "https://platform.example.com/api/users")
    monkeypatch.setenv("API_KEY", "secret-key")


def _response(body=None, status_error=None, json_error=None):
    response = MagicMock()
    if status_error:
        response.raise_for_status.side_effect = status_error
    if json_error:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body
    return response


class TestFetchExternalUsers:

    def test_not_configured(self, monkeypatch):
        monkeypatch.setenv("EXTERNAL_API_BASE_URL", "")
        with pytest.raises(ExternalAPIError, match="not configured"):
            fetch_external_users()

    @patch("usersync.core.external.requests.get")
    def test_sends_bearer_token(self, mock_get, external_env):
        mock_get.return_value = _response([{"userID": 1}])

        records = fetch_external_users(timeout=5)

        assert records == [{"userID": 1}]
        args, kwargs = mock_get.call_args
        assert args[0] == "https://platform.example.com/api/users"
        assert kwargs["headers"]["Authorization"] == "Bearer secret-key"
        assert kwargs["timeout"] == 5

    @patch("usersync.core.external.requests.get")
    def test_wrapped_body(self, mock_get, external_env):
        mock_get.return_value = _response({"data": [{"userID": 1}, {"userID": 2}]})
        assert len(fetch_external_users()) == 2

    @patch("usersync.core.external.requests.get")
    def test_connection_error(self, mock_get, external_env):
        mock_get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(ExternalAPIError, match="request failed"):
            fetch_external_users()

    @patch("usersync.core.external.requests.get")
    def test_http_error_status(self, mock_get, external_env):
        mock_get.return_value = _response(status_error=requests.HTTPError("503 Server Error"))
        with pytest.raises(ExternalAPIError):
            fetch_external_users()

    @patch("usersync.core.external.requests.get")
    def test_invalid_json(self, mock_get, external_env):
        mock_get.return_value = _response(json_error=ValueError("no json"))
        with pytest.raises(ExternalAPIError, match="invalid JSON"):
            fetch_external_users()

    @patch("usersync.core.external.requests.get")
    def test_unexpected_shape(self, mock_get, external_env):
        mock_get.return_value = _response({"users": []})
        with pytest.raises(ExternalAPIError, match="unexpected shape"):
            fetch_external_users()
