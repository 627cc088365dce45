"""
HTTP client for the persistence gateway API.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from dialtester.core.config import settings
from dialtester.core.exceptions import DialTesterError, ValidationError
from dialtester.core.logging import get_logger
from dialtester.models.schemas.data_points import DataPointResponse
from dialtester.models.schemas.sessions import SessionResponse, SessionDetailResponse

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class GatewayError(DialTesterError):
    """A gateway call failed; ``status_code`` is None for transport failures."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.status_code = status_code


class GatewayValidationError(GatewayError, ValidationError):
    """The gateway rejected the request body (HTTP 400)."""


def _unwrap(body: Dict[str, Any], key: str, model: Type[ModelT]) -> ModelT:
    """Validate the enveloped row under ``key``, raising GatewayError if it is missing or invalid."""
    try:
        return model.model_validate(body[key])
    except (KeyError, PydanticValidationError) as e:
        raise GatewayError(f"Malformed response: {key}", details=str(e)) from e


class GatewayClient:
    """
    Async client for the sessions, data-points and admin endpoints.

    Each method is a single request; nothing is retried.
    """

    def __init__(
        self,
        base_url: str = settings.GATEWAY_URL,
        timeout: float = settings.GATEWAY_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_session(self, email: str) -> SessionResponse:
        body = await self._request("POST", "/sessions", json={"email": email})
        return _unwrap(body, "session", SessionResponse)

    async def insert_data_point(
        self,
        session_id: str,
        value: int,
        timestamp: Optional[datetime] = None
    ) -> DataPointResponse:
        payload: Dict[str, Any] = {"session_id": session_id, "value": value}
        if timestamp is not None:
            payload["timestamp"] = timestamp.isoformat()
        body = await self._request("POST", "/data-points", json=payload)
        return _unwrap(body, "dataPoint", DataPointResponse)

    async def complete_session(self, session_id: str) -> SessionResponse:
        body = await self._request("PATCH", f"/sessions/{session_id}", json={"action": "complete"})
        return _unwrap(body, "session", SessionResponse)

    async def get_session(self, session_id: str) -> SessionDetailResponse:
        body = await self._request("GET", f"/sessions/{session_id}")
        return _unwrap(body, "session", SessionDetailResponse)

    async def list_sessions(self) -> List[SessionDetailResponse]:
        body = await self._request("GET", "/admin/sessions")
        try:
            return [SessionDetailResponse.model_validate(s) for s in body.get("sessions", [])]
        except (TypeError, PydanticValidationError) as e:
            raise GatewayError("Malformed response: sessions", details=str(e)) from e

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise GatewayError(f"Request to {path} failed", details=str(e)) from e

        if response.is_success:
            try:
                body = response.json()
            except ValueError as e:
                raise GatewayError(
                    f"Malformed response from {path}", status_code=response.status_code, details=response.text[:200]
                ) from e
            if not isinstance(body, dict):
                raise GatewayError(f"Malformed response from {path}", status_code=response.status_code)
            return body

        try:
            error_body = response.json()
        except ValueError:
            error_body = None
        if not isinstance(error_body, dict):
            error_body = {"error": response.text}
        message = error_body.get("error") or f"HTTP {response.status_code}"
        details = error_body.get("details")

        if response.status_code == 400:
            raise GatewayValidationError(message, status_code=400, details=details)
        raise GatewayError(message, status_code=response.status_code, details=details)
