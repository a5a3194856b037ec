"""Read-through access to cached reference data.

Teams, users, labels and workflow statuses change rarely and are needed by
many commands, so they are served from the cache store when possible and
fetched from the API otherwise.  Per-team statuses and per-kind labels are
stored as keyed sub-entries of their cache type.

The API client is created lazily: a cache hit never needs a credential.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from loguru import logger

from linear_cli.core.client import LinearClient
from linear_cli.core.models.enums import CacheType, LabelKind
from linear_cli.core.store.base import CacheStore

TEAMS_QUERY = """
query {
    teams(first: 100) {
        nodes { id name key }
    }
}
"""

USERS_QUERY = """
query {
    users(first: 100) {
        nodes { id name displayName email active }
    }
}
"""

TEAM_STATUSES_QUERY = """
query($teamId: String!) {
    team(id: $teamId) {
        id
        name
        states {
            nodes { id name type color position description }
        }
    }
}
"""

ISSUE_LABELS_QUERY = """
query {
    issueLabels(first: 100) {
        nodes { id name color parent { name } }
    }
}
"""

PROJECT_LABELS_QUERY = """
query {
    projectLabels(first: 100) {
        nodes { id name color parent { name } }
    }
}
"""


def extract_nodes(result: dict[str, Any], *path: str) -> list[Any]:
    """Follow ``data.<path...>.nodes`` in a GraphQL response; ``[]`` if absent."""
    node: Any = result.get("data")
    for key in (*path, "nodes"):
        if not isinstance(node, dict):
            return []
        node = node.get(key)
    return node if isinstance(node, list) else []


class ReferenceData:
    """Cached lookups of teams, users, statuses and labels.

    ``client_factory`` is called at most once, on the first cache miss.
    With ``use_cache=False`` the cache is neither read nor written.
    """

    def __init__(
        self,
        store: CacheStore,
        client_factory: Callable[[], LinearClient],
        *,
        use_cache: bool = True,
    ) -> None:
        self._store = store
        self._client_factory = client_factory
        self._client: LinearClient | None = None
        self._use_cache = use_cache

    @property
    def client(self) -> LinearClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    # -- Whole-type lookups ----------------------------------------------------

    def teams(self) -> list[Any]:
        return self._whole(CacheType.TEAMS, TEAMS_QUERY, "teams")

    def users(self) -> list[Any]:
        return self._whole(CacheType.USERS, USERS_QUERY, "users")

    # -- Keyed lookups ---------------------------------------------------------

    def statuses(self, team: str) -> list[Any]:
        """Workflow states of ``team`` (key or ID), cached per team."""
        return self._keyed(CacheType.STATUSES, team, TEAM_STATUSES_QUERY, {"teamId": team}, ("team", "states"))

    def labels(self, kind: LabelKind | str = LabelKind.ISSUE) -> list[Any]:
        kind = LabelKind(kind)
        if kind is LabelKind.PROJECT:
            return self._keyed(CacheType.LABELS, kind.value, PROJECT_LABELS_QUERY, None, ("projectLabels",))
        return self._keyed(CacheType.LABELS, kind.value, ISSUE_LABELS_QUERY, None, ("issueLabels",))

    # -- Internals -------------------------------------------------------------

    def _whole(self, cache_type: CacheType, query: str, field: str) -> list[Any]:
        if self._use_cache:
            cached = self._store.get(cache_type)
            if isinstance(cached, list):
                return cached

        nodes = extract_nodes(self.client.query(query), field)
        logger.debug("Fetched {} {} from API", len(nodes), cache_type)
        if self._use_cache:
            self._store.set(cache_type, nodes)
        return nodes

    def _keyed(
        self,
        cache_type: CacheType,
        key: str,
        query: str,
        variables: dict[str, Any] | None,
        path: tuple[str, ...],
    ) -> list[Any]:
        if self._use_cache:
            cached = self._store.get_keyed(cache_type, key)
            if isinstance(cached, list):
                return cached

        nodes = extract_nodes(self.client.query(query, variables), *path)
        logger.debug("Fetched {} {} for '{}' from API", len(nodes), cache_type, key)
        if self._use_cache:
            self._store.set_keyed(cache_type, key, nodes)
        return nodes
