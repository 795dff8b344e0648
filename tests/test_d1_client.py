from unittest.mock import patch

import httpx
import pytest

from scanadvisor.clients.d1_client import D1Client
from scanadvisor.core.exceptions import APIError, AuthenticationError, NetworkError

ENDPOINT = "https://api.cloudflare.com/client/v4/accounts/acc/d1/database/db/query"


@pytest.fixture
def client():
    with D1Client(ENDPOINT, "token", timeout=5) as d1:
        yield d1


def _ok(results=None, changes=0):
    return httpx.Response(
        200,
        json={
            "success": True,
            "errors": [],
            "result": [{"results": results or [], "success": True, "meta": {"changes": changes}}],
        },
    )


class TestD1Client:
    def test_headers(self, client):
        assert client.headers["Authorization"] == "Bearer token"

    def test_query_returns_rows(self, client):
        with patch.object(client.client, "post", return_value=_ok([{"recommendation": "x"}])) as post:
            rows = client.query("SELECT recommendation FROM recommendations WHERE cache_key = ?", ["k"])

        assert rows == [{"recommendation": "x"}]
        post.assert_called_once_with(
            ENDPOINT,
            json={"sql": "SELECT recommendation FROM recommendations WHERE cache_key = ?", "params": ["k"]},
        )

    def test_execute_reports_changes(self, client):
        with patch.object(client.client, "post", return_value=_ok(changes=1)):
            assert client.execute("INSERT ...", ["k", "v"]).meta.changes == 1

    def test_empty_result(self, client):
        response = httpx.Response(200, json={"success": True, "result": []})
        with patch.object(client.client, "post", return_value=response):
            assert client.query("CREATE TABLE ...") == []

    def test_unauthorized(self, client):
        response = httpx.Response(
            401, json={"success": False, "errors": [{"code": 10000, "message": "Authentication error"}]}
        )
        with patch.object(client.client, "post", return_value=response):
            with pytest.raises(AuthenticationError, match="Authentication error"):
                client.query("SELECT 1")

    def test_api_error_message(self, client):
        response = httpx.Response(
            400, json={"success": False, "errors": [{"code": 7500, "message": "near SELEC: syntax error"}]}
        )
        with patch.object(client.client, "post", return_value=response):
            with pytest.raises(APIError) as exc_info:
                client.query("SELEC 1")

        assert exc_info.value.status_code == 400
        assert "syntax error" in str(exc_info.value)

    def test_non_json_error(self, client):
        with patch.object(client.client, "post", return_value=httpx.Response(502, text="Bad gateway")):
            with pytest.raises(APIError, match="Bad Gateway"):
                client.query("SELECT 1")

    def test_connection_error(self, client):
        with patch.object(client.client, "post", side_effect=httpx.ConnectError("refused")):
            with pytest.raises(NetworkError):
                client.query("SELECT 1")
