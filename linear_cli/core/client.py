"""GraphQL transport for the Linear API.

Every request is a POST of ``{"query": ..., "variables": ...}`` with the raw
API key in the ``Authorization`` header.  Two failure kinds are kept apart:

- ``TransportError``: the request never produced a usable JSON body
  (connection failure, timeout, non-JSON or HTTP error response).
- ``GraphQLError``: the server answered, but the body carries ``errors``.
"""

from __future__ import annotations

import json
from types import TracebackType
from typing import TYPE_CHECKING, Any

import httpx
from loguru import logger

from linear_cli.core.settings import DEFAULT_API_URL

if TYPE_CHECKING:
    from linear_cli.core.managers.workspaces import WorkspaceManager
    from linear_cli.core.settings import LinearSettings


class TransportError(RuntimeError):
    """Raised when the API cannot be reached or returns an unusable response."""


class GraphQLError(RuntimeError):
    """Raised when the response body contains a non-empty ``errors`` list."""

    def __init__(self, errors: list[Any]) -> None:
        self.errors = errors
        super().__init__(f"GraphQL error: {json.dumps(errors)}")

    @property
    def messages(self) -> list[str]:
        return [e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in self.errors]


class LinearClient:
    """Synchronous Linear GraphQL client.

    Usable as a context manager; ``close`` releases the connection pool.
    ``transport`` is passed straight to ``httpx.Client`` (tests use
    ``httpx.MockTransport``).
    """

    def __init__(
        self,
        api_key: str,
        *,
        url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._url = url
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"Authorization": api_key, "Content-Type": "application/json"},
        )

    @classmethod
    def from_settings(
        cls,
        settings: LinearSettings,
        manager: WorkspaceManager,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> LinearClient:
        """Build a client using the credential resolved by ``manager``."""
        return cls(manager.get_api_key(), url=settings.api_url, timeout=settings.timeout, transport=transport)

    # -- Requests --------------------------------------------------------------

    def query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a query and return the full response body."""
        body: dict[str, Any] = {"query": query}
        if variables is not None:
            body["variables"] = variables

        logger.debug("GraphQL POST {} (variables={})", self._url, variables)
        try:
            response = self._client.post(self._url, json=body)
        except httpx.HTTPError as exc:
            msg = f"Request to {self._url} failed: {exc}"
            raise TransportError(msg) from exc

        try:
            result = response.json()
        except ValueError as exc:
            msg = f"Invalid response from {self._url} (HTTP {response.status_code})"
            raise TransportError(msg) from exc

        if not isinstance(result, dict):
            msg = f"Unexpected response shape from {self._url}"
            raise TransportError(msg)

        errors = result.get("errors")
        if errors:
            raise GraphQLError(errors if isinstance(errors, list) else [errors])

        if response.is_error:
            msg = f"HTTP {response.status_code} from {self._url}"
            raise TransportError(msg)

        return result

    def mutate(self, mutation: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        return self.query(mutation, variables)

    # -- Lifecycle -------------------------------------------------------------

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> LinearClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
