"""
Tests for the session and data point endpoints.

Run with: pytest backend/tests/test_sessions_api.py -v
"""
from datetime import datetime

import pytest
import pytest_asyncio

from dialtester.core.database import Base, engine


def parse(ts: str) -> datetime:
    return datetime.fromisoformat(ts.replace("Z", "+00:00"))


class TestCreateSession:

    @pytest.mark.asyncio
    async def test_create_session(self, client):
        response = await client.post("/api/sessions", json={"email": "  someone@example.com "})
        assert response.status_code == 200

        session = response.json()["session"]
        assert session["id"]
        assert session["email"] == "someone@example.com"
        assert session["start_time"]
        assert session["end_time"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"email": ""}, {"email": "   "}, {}])
    async def test_blank_email_rejected(self, client, body):
        response = await client.post("/api/sessions", json=body)
        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_same_email_may_record_twice(self, client):
        first = await client.post("/api/sessions", json={"email": "repeat@example.com"})
        second = await client.post("/api/sessions", json={"email": "repeat@example.com"})
        assert first.json()["session"]["id"] != second.json()["session"]["id"]


class TestSessionLifecycle:

    @pytest.mark.asyncio
    async def test_end_time_absent_until_complete(self, client, session_id):
        fetched = await client.get(f"/api/sessions/{session_id}")
        assert fetched.status_code == 200
        assert fetched.json()["session"]["end_time"] is None

        completed = await client.patch(f"/api/sessions/{session_id}", json={"action": "complete"})
        assert completed.status_code == 200
        session = completed.json()["session"]
        assert session["end_time"] is not None
        assert parse(session["end_time"]) >= parse(session["start_time"])

        fetched = await client.get(f"/api/sessions/{session_id}")
        session = fetched.json()["session"]
        assert session["end_time"] is not None
        assert parse(session["end_time"]) >= parse(session["start_time"])

    @pytest.mark.asyncio
    async def test_completing_twice_keeps_first_end_time(self, client, session_id):
        first = await client.patch(f"/api/sessions/{session_id}", json={"action": "complete"})
        second = await client.patch(f"/api/sessions/{session_id}", json={"action": "complete"})
        assert second.status_code == 200
        assert second.json()["session"]["end_time"] == first.json()["session"]["end_time"]

    @pytest.mark.asyncio
    async def test_unknown_action_rejected(self, client, session_id):
        response = await client.patch(f"/api/sessions/{session_id}", json={"action": "explode"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_blank_id_rejected(self, client):
        response = await client.patch("/api/sessions/%20", json={"action": "complete"})
        assert response.status_code == 400
        assert response.json()["error"] == "Session ID is required"

    @pytest.mark.asyncio
    async def test_unknown_session_is_store_error(self, client):
        response = await client.patch("/api/sessions/does-not-exist", json={"action": "complete"})
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to update session"

        response = await client.get("/api/sessions/does-not-exist")
        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_get_session_nests_data_points_in_time_order(self, client, session_id):
        for value, ts in [(10, "2026-10-19T12:00:02+00:00"), (-20, "2026-10-19T12:00:01+00:00")]:
            await client.post("/api/data-points", json={"session_id": session_id, "value": value, "timestamp": ts})

        response = await client.get(f"/api/sessions/{session_id}")
        points = response.json()["session"]["data_points"]
        assert [p["value"] for p in points] == [-20, 10]


class TestDataPoints:

    @pytest.mark.asyncio
    async def test_store_data_point(self, client, session_id):
        response = await client.post(
            "/api/data-points",
            json={"session_id": session_id, "value": -100, "timestamp": "2026-10-19T12:00:00Z"},
        )
        assert response.status_code == 200
        point = response.json()["dataPoint"]
        assert point["value"] == -100
        assert point["session_id"] == session_id
        assert parse(point["timestamp"]) == parse("2026-10-19T12:00:00+00:00")

    @pytest.mark.asyncio
    async def test_timestamp_defaults_to_now(self, client, session_id):
        response = await client.post("/api/data-points", json={"session_id": session_id, "value": 0})
        assert response.status_code == 200
        assert response.json()["dataPoint"]["timestamp"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["abc", 150, -101, 12.5, None, True, "NaN", 10 ** 400, -(10 ** 400), "1e400"])
    async def test_invalid_values_rejected(self, client, session_id, value):
        response = await client.post("/api/data-points", json={"session_id": session_id, "value": value})
        assert response.status_code == 400
        assert response.json()["error"]

    @pytest.mark.asyncio
    async def test_out_of_range_message(self, client, session_id):
        response = await client.post("/api/data-points", json={"session_id": session_id, "value": 150})
        assert response.json()["error"] == "Value must be a number between -100 and 100"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value,stored", [("42", 42), (100, 100), (-7.0, -7), (" -3 ", -3)])
    async def test_numeric_values_coerced(self, client, session_id, value, stored):
        response = await client.post("/api/data-points", json={"session_id": session_id, "value": value})
        assert response.status_code == 200
        assert response.json()["dataPoint"]["value"] == stored

    @pytest.mark.asyncio
    async def test_missing_value_rejected(self, client, session_id):
        response = await client.post("/api/data-points", json={"session_id": session_id})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_session_id_rejected(self, client):
        response = await client.post("/api/data-points", json={"value": 3})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_session_is_write_failure(self, client):
        response = await client.post("/api/data-points", json={"session_id": "nope", "value": 3})
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to save data point"


@pytest_asyncio.fixture
async def missing_tables(client, session_id):
    """The store is reachable but every query fails."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    return session_id


class TestStoreFailures:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,path,body,error", [
        ("POST", "/api/sessions", {"email": "a@example.com"}, "Failed to create session"),
        ("POST", "/api/data-points", {"session_id": "{id}", "value": 3}, "Failed to save data point"),
        ("PATCH", "/api/sessions/{id}", {"action": "complete"}, "Failed to update session"),
        ("GET", "/api/sessions/{id}", None, "Failed to fetch session"),
        ("GET", "/api/admin/sessions", None, "Failed to fetch sessions"),
        ("GET", "/api/export/all", None, "Export failed"),
    ])
    async def test_store_error_body(self, client, missing_tables, method, path, body, error):
        if body is not None and body.get("session_id") == "{id}":
            body = {**body, "session_id": missing_tables}
        response = await client.request(method, path.replace("{id}", missing_tables), json=body)

        assert response.status_code == 500
        payload = response.json()
        assert payload["error"] == error
        assert payload["details"]
