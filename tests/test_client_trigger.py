"""
Dashboard HTTP client and refresh triggers - the requests session is mocked.
"""

import pytest
import requests
from unittest.mock import MagicMock

from tui.client import DashboardClient, DashboardClientError
from tui.trigger import reload_users, refresh_from_external


def _response(body, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return DashboardClient("http://api.test/api/", timeout=3, session=session)


def _placeholders():
    return [{"userID": 1000, "firstName": "John"}]


class TestDashboardClient:

    def test_load_users(self, client, session):
        session.request.return_value = _response({"status": "success", "users": [{"userID": 1}]})

        assert client.load_users(limit=50) == [{"userID": 1}]
        session.request.assert_called_once_with(
            "GET", "http://api.test/api/users", timeout=3, params={"limit": 50}
        )

    def test_error_status_raises(self, client, session):
        session.request.return_value = _response({"status": "error", "message": "Database down"}, 500)
        with pytest.raises(DashboardClientError, match="Database down"):
            client.load_users()

    def test_missing_users_list(self, client, session):
        session.request.return_value = _response({"status": "success"})
        with pytest.raises(DashboardClientError):
            client.load_users()

    def test_connection_error(self, client, session):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(DashboardClientError, match="failed"):
            client.load_users()

    def test_invalid_json(self, client, session):
        response = _response(None)
        response.json.side_effect = ValueError("no json")
        session.request.return_value = response
        with pytest.raises(DashboardClientError, match="Invalid JSON"):
            client.load_users()

    def test_fetch_external_data(self, client, session):
        summary = {"totalReceived": 2, "newUsers": 1, "updatedUsers": 1, "skipped": 0, "errors": 0}
        session.request.return_value = _response({"status": "success", "summary": summary})

        assert client.fetch_external_data() == summary
        assert session.request.call_args[0] == ("POST", "http://api.test/api/fetch-external-data")


class TestTriggers:

    def test_reload_success(self, client, session):
        session.request.return_value = _response({"status": "success", "users": [{"userID": 1}]})

        result = reload_users(client, _placeholders)

        assert result["success"] is True
        assert result["placeholder"] is False
        assert result["users"] == [{"userID": 1}]
        assert result["notices"] == []

    def test_reload_falls_back_to_placeholders(self, client, session):
        session.request.side_effect = requests.ConnectionError("refused")

        result = reload_users(client, _placeholders)

        assert result["success"] is False
        assert result["placeholder"] is True
        assert result["users"] == _placeholders()
        severities = [severity for _, severity in result["notices"]]
        assert severities == ["error", "information"]
        assert result["notices"][1][0] == "Loaded sample data for demonstration"

    def test_refresh_pulls_then_reloads(self, client, session):
        session.request.side_effect = [
            _response({"status": "success", "summary": {"newUsers": 2, "updatedUsers": 3}}),
            _response({"status": "success", "users": [{"userID": 1}, {"userID": 2}]}),
        ]

        result = refresh_from_external(client, _placeholders)

        methods = [call[0][0] for call in session.request.call_args_list]
        assert methods == ["POST", "GET"]
        assert len(result["users"]) == 2
        assert result["notices"] == [("Synced 2 new and 3 updated users", "information")]

    def test_refresh_reloads_even_when_pull_fails(self, client, session):
        session.request.side_effect = [
            _response({"status": "error", "message": "Failed to fetch data from external API"}, 500),
            _response({"status": "success", "users": [{"userID": 1}]}),
        ]

        result = refresh_from_external(client, _placeholders)

        assert result["placeholder"] is False
        assert result["users"] == [{"userID": 1}]
        assert result["notices"][0] == ("Error fetching data: Failed to fetch data from external API", "error")
