"""Local state and API access behind the ``linear`` command.

- **models**: Pydantic models for cache entries and the workspace registry
- **store**: TTL-expiring per-type cache store
- **managers.workspaces**: Workspace registry and credential resolution
- **client**: GraphQL transport (httpx)
- **lookups**: Read-through cached reference data
- **settings** / **log**: Environment configuration and loguru setup
"""
