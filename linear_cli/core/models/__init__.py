"""Data models for the CLI core."""

from linear_cli.core.models.cache import (
    DEFAULT_TTL_SECONDS,
    CacheEntry,
    CacheStatus,
    count_items,
    format_age,
    format_size,
)
from linear_cli.core.models.enums import CacheType, LabelKind, OutputFormat
from linear_cli.core.models.workspace import Workspace, WorkspaceConfig, WorkspaceInfo

__all__ = [
    "DEFAULT_TTL_SECONDS",
    # Cache
    "CacheEntry",
    "CacheStatus",
    # Enums
    "CacheType",
    "LabelKind",
    "OutputFormat",
    # Workspace
    "Workspace",
    "WorkspaceConfig",
    "WorkspaceInfo",
    "count_items",
    "format_age",
    "format_size",
]
