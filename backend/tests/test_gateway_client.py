"""
Tests for the gateway HTTP client against mocked transports.
"""
import json

import httpx
import pytest

from dialtester.core.exceptions import ValidationError
from dialtester.recorder.gateway_client import GatewayClient, GatewayError, GatewayValidationError

SESSION = {
    "id": "0b1c5a4e-0000-4000-8000-000000000001",
    "email": "p@example.com",
    "start_time": "2026-10-19T12:00:00+00:00",
    "end_time": None,
    "created_at": "2026-10-19T12:00:00+00:00",
    "updated_at": "2026-10-19T12:00:00+00:00",
}


def gateway_for(handler):
    return GatewayClient(base_url="http://gateway/api", transport=httpx.MockTransport(handler))


class TestGatewayClient:

    @pytest.mark.asyncio
    async def test_create_session_posts_email(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"session": SESSION})

        async with gateway_for(handler) as gateway:
            session = await gateway.create_session("p@example.com")

        assert seen == {"path": "/api/sessions", "body": {"email": "p@example.com"}}
        assert session.id == SESSION["id"]
        assert session.end_time is None

    @pytest.mark.asyncio
    async def test_complete_session_patches(self):
        def handler(request):
            assert request.method == "PATCH"
            assert json.loads(request.content) == {"action": "complete"}
            return httpx.Response(200, json={"session": {**SESSION, "end_time": "2026-10-19T12:05:00+00:00"}})

        async with gateway_for(handler) as gateway:
            session = await gateway.complete_session(SESSION["id"])

        assert session.end_time is not None

    @pytest.mark.asyncio
    async def test_insert_data_point_reads_camel_case_envelope(self):
        def handler(request):
            body = json.loads(request.content)
            return httpx.Response(200, json={"dataPoint": {
                "id": "dp-1", "session_id": body["session_id"], "value": body["value"],
                "timestamp": "2026-10-19T12:00:01+00:00",
            }})

        async with gateway_for(handler) as gateway:
            point = await gateway.insert_data_point(SESSION["id"], 42)

        assert point.value == 42

    @pytest.mark.asyncio
    async def test_400_raises_validation_error(self):
        def handler(request):
            return httpx.Response(400, json={"error": "Email is required"})

        async with gateway_for(handler) as gateway:
            with pytest.raises(GatewayValidationError) as exc_info:
                await gateway.create_session(" ")

        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.message == "Email is required"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_500_raises_gateway_error(self):
        def handler(request):
            return httpx.Response(500, json={"error": "Failed to update session", "details": "gone"})

        async with gateway_for(handler) as gateway:
            with pytest.raises(GatewayError) as exc_info:
                await gateway.complete_session("x")

        assert exc_info.value.status_code == 500
        assert exc_info.value.details == "gone"

    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        async with gateway_for(handler) as gateway:
            with pytest.raises(GatewayError) as exc_info:
                await gateway.list_sessions()

        assert exc_info.value.message == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_transport_failure_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with gateway_for(handler) as gateway:
            with pytest.raises(GatewayError) as exc_info:
                await gateway.get_session("x")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_non_json_success_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>proxy page</html>")

        async with gateway_for(handler) as gateway:
            with pytest.raises(GatewayError) as exc_info:
                await gateway.insert_data_point(SESSION["id"], 3)

        assert exc_info.value.status_code == 200
        assert "proxy page" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_success_body_missing_envelope(self):
        def handler(request):
            return httpx.Response(200, json={"data_point": {"value": 3}})

        async with gateway_for(handler) as gateway:
            with pytest.raises(GatewayError) as exc_info:
                await gateway.insert_data_point(SESSION["id"], 3)

        assert exc_info.value.message == "Malformed response: dataPoint"

    @pytest.mark.asyncio
    async def test_success_body_with_invalid_row(self):
        def handler(request):
            return httpx.Response(200, json={"session": {"id": "x"}})

        async with gateway_for(handler) as gateway:
            with pytest.raises(GatewayError):
                await gateway.create_session("p@example.com")
