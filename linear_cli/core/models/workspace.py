"""Workspace registry models.

A workspace is a named API credential.  The registry file holds all of them
plus the name of the current one.  Older config files carried a single
top-level ``api_key``; that field is only read, never written, see
``linear_cli.core.managers.workspaces.migrate_legacy``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Workspace(BaseModel):
    api_key: str


class WorkspaceConfig(BaseModel):
    """Persisted workspace registry."""

    current: str | None = None
    workspaces: dict[str, Workspace] = Field(default_factory=dict)
    api_key: str | None = Field(default=None, description="Legacy single-key field")

    def to_json(self) -> str:
        return self.model_dump_json(indent=2, exclude={"api_key"})


class WorkspaceInfo(BaseModel):
    """Display view of a workspace with the credential masked."""

    name: str
    masked_key: str
    is_current: bool = False
