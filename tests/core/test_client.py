"""Unit tests for the GraphQL transport (httpx MockTransport, no network)."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from linear_cli.core.client import GraphQLError, LinearClient, TransportError
from linear_cli.core.managers.workspaces import NoWorkspaceSelectedError, WorkspaceManager
from linear_cli.core.settings import DEFAULT_API_URL, LinearSettings


def _client(handler, api_key: str = "lin_api_test") -> LinearClient:
    return LinearClient(api_key, transport=httpx.MockTransport(handler))


def test_query_posts_body_and_auth_header() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"viewer": {"id": "u1"}}})

    with _client(handler) as client:
        result = client.query("query($id: String!) { team(id: $id) { id } }", {"id": "ENG"})

    assert result == {"data": {"viewer": {"id": "u1"}}}
    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == DEFAULT_API_URL
    assert request.headers["Authorization"] == "lin_api_test"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {
        "query": "query($id: String!) { team(id: $id) { id } }",
        "variables": {"id": "ENG"},
    }


def test_query_without_variables_omits_them() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"data": {}})

    with _client(handler) as client:
        client.query("query { viewer { id } }")

    assert bodies == [{"query": "query { viewer { id } }"}]


def test_graphql_errors_raise() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": None, "errors": [{"message": "Entity not found"}]})

    with _client(handler) as client, pytest.raises(GraphQLError) as exc_info:
        client.query("query { team(id: \"X\") { id } }")

    assert exc_info.value.messages == ["Entity not found"]
    assert "Entity not found" in str(exc_info.value)


def test_graphql_errors_on_http_error_status() -> None:
    """Linear answers bad queries with HTTP 400 plus an errors body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"errors": [{"message": "Syntax Error"}]})

    with _client(handler) as client, pytest.raises(GraphQLError):
        client.query("query {")


def test_empty_errors_list_is_success() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"ok": True}, "errors": []})

    with _client(handler) as client:
        assert client.query("query { ok }")["data"] == {"ok": True}


def test_http_error_without_body_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    with _client(handler) as client, pytest.raises(TransportError, match="HTTP 502"):
        client.query("query { viewer { id } }")


def test_http_error_with_json_body_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Unauthorized"})

    with _client(handler) as client, pytest.raises(TransportError, match="HTTP 401"):
        client.query("query { viewer { id } }")


def test_connection_failure_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client, pytest.raises(TransportError, match="connection refused"):
        client.query("query { viewer { id } }")


def test_non_object_body_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[1, 2, 3])

    with _client(handler) as client, pytest.raises(TransportError):
        client.query("query { viewer { id } }")


def test_mutate_is_query() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"issueCreate": {"success": True}}})

    with _client(handler) as client:
        result = client.mutate("mutation { issueCreate(input: {}) { success } }")
    assert result["data"]["issueCreate"]["success"] is True


# ---------------------------------------------------------------------------
# from_settings
# ---------------------------------------------------------------------------


def test_from_settings_uses_resolved_key(config_dir: Path) -> None:
    manager = WorkspaceManager(config_dir)
    manager.add_workspace("work", "lin_api_workspace_key")
    settings = LinearSettings(api_url="https://linear.test/graphql")

    headers: list[str] = []
    urls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        headers.append(request.headers["Authorization"])
        urls.append(str(request.url))
        return httpx.Response(200, json={"data": {}})

    with LinearClient.from_settings(settings, manager, transport=httpx.MockTransport(handler)) as client:
        client.query("query { viewer { id } }")

    assert headers == ["lin_api_workspace_key"]
    assert urls == ["https://linear.test/graphql"]


def test_from_settings_without_credentials(config_dir: Path) -> None:
    with pytest.raises(NoWorkspaceSelectedError):
        LinearClient.from_settings(LinearSettings(), WorkspaceManager(config_dir))
