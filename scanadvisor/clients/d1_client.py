import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from ..constants import DEFAULT_REQUEST_TIMEOUT
from ..core.exceptions import APIError, AuthenticationError, NetworkError

logger = logging.getLogger(__name__)


class D1Meta(BaseModel):
    changes: int = 0
    rows_read: int | None = None
    rows_written: int | None = None


class D1QueryResult(BaseModel):
    results: list[dict[str, Any]] = Field(default_factory=list)
    success: bool = True
    meta: D1Meta = Field(default_factory=D1Meta)


class D1Client:
    """Minimal client for the Cloudflare D1 HTTP query endpoint."""

    def __init__(self, endpoint: str, api_key: str, timeout: float = DEFAULT_REQUEST_TIMEOUT) -> None:
        self.endpoint = endpoint
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        self.client = httpx.Client(timeout=timeout, headers=self.headers)

    def __enter__(self) -> "D1Client":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    def execute(self, sql: str, params: list[Any] | None = None) -> D1QueryResult:
        """Run one parameterized statement.

        Raises:
            AuthenticationError: On HTTP 401/403
            APIError: On any other non-success response
            NetworkError: If the endpoint cannot be reached
        """
        logger.debug(f"D1 query: {' '.join(sql.split())[:80]}")
        try:
            response = self.client.post(self.endpoint, json={"sql": sql, "params": params or []})
        except httpx.RequestError as e:
            raise NetworkError(f"D1 request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.status_code in (401, 403):
            raise AuthenticationError(f"D1 authentication failed: {_error_message(data, response)}")
        if response.is_error or not data.get("success", False):
            raise APIError(
                f"D1 error: {_error_message(data, response)}",
                status_code=response.status_code,
                response_body=response.text,
            )

        results = data.get("result") or []
        if not results:
            return D1QueryResult()
        return D1QueryResult(**results[0])

    def query(self, sql: str, params: list[Any] | None = None) -> list[dict[str, Any]]:
        """Run a statement and return its rows."""
        return self.execute(sql, params).results


def _error_message(data: dict[str, Any], response: httpx.Response) -> str:
    errors = data.get("errors") or []
    if errors and isinstance(errors[0], dict) and errors[0].get("message"):
        return str(errors[0]["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"
