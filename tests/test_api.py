"""
REST API tests - every endpoint through the FastAPI test client.
"""

import sqlite3

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from usersync.api.main import app
from usersync.core.external import ExternalAPIError


@pytest.fixture
def client(temp_db):
    with TestClient(app) as test_client:
        yield test_client


def _save(client, body):
    return client.post("/api/saveUsers", json=body)


class TestHealth:

    def test_health_ok(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["totalUsers"] == 0
        assert "timestamp" in data
        assert "version" in data

    def test_health_database_failure(self, client):
        with patch("usersync.api.main.health_check", return_value=False):
            response = client.get("/api/health")
        assert response.status_code == 500
        data = response.json()
        assert data["status"] == "error"
        assert data["message"] == "Database connection failed"


class TestSaveUsers:

    def test_wrapped_batch(self, client):
        response = _save(client, {"data": [{"userID": 1, "firstName": "A"}, {"userID": 2}]})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "success"
        assert data["message"] == "Processed 2 users successfully"
        assert data["summary"] == {
            "totalReceived": 2, "newUsers": 2, "updatedUsers": 0, "skipped": 0, "errors": 0,
        }

    def test_bare_list_updates_existing(self, client):
        _save(client, [{"userID": 1001, "firstName": "John"}])
        response = _save(client, [{"userID": 1001, "firstName": "Jonathan"}])
        assert response.json()["summary"]["updatedUsers"] == 1

        detail = client.get("/api/users/1001").json()["user"]
        assert detail["firstName"] == "Jonathan"

    def test_empty_batch(self, client):
        response = _save(client, [])
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "No users to save"
        assert data["summary"]["totalReceived"] == 0

    def test_invalid_shape(self, client):
        response = _save(client, {"users": []})
        assert response.status_code == 400
        data = response.json()
        assert data["status"] == "error"
        assert "Expected" in data["message"]

    def test_missing_body(self, client):
        response = client.post("/api/saveUsers")
        assert response.status_code == 400
        assert response.json()["status"] == "error"

    def test_null_body(self, client):
        response = client.post(
            "/api/saveUsers", content="null", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        data = response.json()
        assert data["status"] == "error"
        assert "Expected" in data["message"]

    def test_skips_records_without_id(self, client):
        response = _save(client, [{"firstName": "Nobody"}, {"userID": 3}])
        summary = response.json()["summary"]
        assert summary["skipped"] == 1
        assert summary["newUsers"] == 1


class TestUsers:

    def test_list_users(self, client):
        _save(client, [
            {"userID": 1, "openDate": "2024-01-01T08:00:00"},
            {"userID": 2, "openDate": "2024-02-01T08:00:00", "secret": "x"},
        ])
        response = client.get("/api/users")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["showing"] == 2
        assert [user["userID"] for user in data["users"]] == [2, 1]
        assert "fullData" not in data["users"][0]
        assert "full_data" not in data["users"][0]

    def test_list_users_limit(self, client):
        _save(client, [{"userID": i} for i in range(1, 6)])
        data = client.get("/api/users", params={"limit": 2}).json()
        assert data["total"] == 5
        assert data["showing"] == 2

    @pytest.mark.parametrize("limit", ["0", "-1", "abc"])
    def test_list_users_bad_limit(self, client, limit):
        response = client.get("/api/users", params={"limit": limit})
        assert response.status_code == 422
        data = response.json()
        assert data["status"] == "error"
        assert data["message"] == "Invalid request"
        assert "limit" in data["error"]
        assert "detail" not in data

    def test_user_detail(self, client):
        _save(client, [{"userID": 77, "firstName": "Ann", "currenciesPoliciesID": 3}])
        response = client.get("/api/users/77")
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["userID"] == 77
        assert user["fullData"]["currenciesPoliciesID"] == 3
        assert "updated_at" in user

    def test_user_not_found(self, client):
        response = client.get("/api/users/999")
        assert response.status_code == 404
        assert response.json() == {"status": "error", "message": "User not found"}

    def test_list_users_database_error(self, client):
        with patch("usersync.api.main.dao.list_users", side_effect=sqlite3.OperationalError("locked")):
            response = client.get("/api/users")
        assert response.status_code == 500
        assert response.json()["message"] == "Error fetching users"


class TestStats:

    def test_stats(self, client):
        _save(client, [
            {"userID": 1, "country": "Canada"},
            {"userID": 2, "country": "Canada"},
            {"userID": 3, "country": "Japan"},
            {"userID": 4},
        ])
        response = client.get("/api/stats")
        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["totalUsers"] == 4
        assert stats["countries"] == 2
        assert stats["todayUsers"] == 0


class TestFetchExternal:

    def test_fetch_and_reconcile(self, client):
        records = [{"userID": 10, "firstName": "Ext"}, {"userID": 11}]
        with patch("usersync.api.main.fetch_external_users", return_value=records):
            response = client.post("/api/fetch-external-data")
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Data fetched and saved successfully"
        assert data["summary"]["newUsers"] == 2
        assert client.get("/api/users/10").json()["user"]["firstName"] == "Ext"

    def test_fetch_failure(self, client):
        with patch("usersync.api.main.fetch_external_users", side_effect=ExternalAPIError("timeout")):
            response = client.post("/api/fetch-external-data")
        assert response.status_code == 500
        data = response.json()
        assert data["status"] == "error"
        assert data["message"] == "Failed to fetch data from external API"
        assert data["error"] == "timeout"


class TestSeedData:

    def test_seed_is_idempotent(self, client):
        first = client.post("/api/test-data").json()
        assert first["message"] == "Created 3 test users"
        assert len(first["data"]) == 3

        second = client.post("/api/test-data").json()
        assert second["message"] == "Created 0 test users"
        assert client.get("/api/health").json()["totalUsers"] == 3


def test_unhandled_error_returns_500(temp_db):
    with TestClient(app, raise_server_exceptions=False) as test_client:
        with patch("usersync.api.main.dao.get_stats", side_effect=RuntimeError("kaboom")):
            response = test_client.get("/api/stats")
    assert response.status_code == 500
    data = response.json()
    assert data["status"] == "error"
    assert data["message"] == "Internal server error"
