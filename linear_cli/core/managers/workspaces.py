"""Workspace registry and credential resolution.

Encapsulates all workspace data access: load, save, add, switch, remove,
list, and resolving the API key for the current invocation.

Nothing is cached between calls.  Every operation re-reads the registry
file, and every mutation follows load -> validate -> mutate -> save, so a
failed validation never reaches the disk.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from linear_cli.core.files import atomic_write
from linear_cli.core.models.workspace import Workspace, WorkspaceConfig, WorkspaceInfo

CONFIG_FILENAME = "config.json"
LEGACY_WORKSPACE_NAME = "default"


class ConfigError(RuntimeError):
    """Raised when the registry file cannot be read, parsed or written."""


class DuplicateWorkspaceError(ValueError):
    """Raised when adding a workspace whose name is already registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Workspace '{name}' already exists. Use 'workspace remove' first to replace it.")


class WorkspaceNotFoundError(LookupError):
    """Raised when a workspace name is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Workspace '{name}' not found. Use 'workspace list' to see available workspaces.")


class NoWorkspaceSelectedError(LookupError):
    """Raised when no override is set and no workspace is current."""

    def __init__(self) -> None:
        super().__init__("No workspace selected. Run: linear workspace add <name>")


def mask_api_key(api_key: str) -> str:
    """Mask a credential for display.

    Keys longer than 12 characters show the first 8 and last 4; shorter
    keys are shown as-is.
    """
    if len(api_key) > 12:
        return f"{api_key[:8]}...{api_key[-4:]}"
    return api_key


def migrate_legacy(config: WorkspaceConfig) -> bool:
    """Upgrade a single-key config in place.  Returns ``True`` if it changed.

    The legacy ``api_key`` becomes a workspace named ``default`` (unless one
    already exists), which is made current if nothing else is.  The legacy
    field is always dropped.
    """
    legacy_key = config.api_key
    if legacy_key is None:
        return False

    config.api_key = None
    if LEGACY_WORKSPACE_NAME not in config.workspaces:
        config.workspaces[LEGACY_WORKSPACE_NAME] = Workspace(api_key=legacy_key)
        if config.current is None:
            config.current = LEGACY_WORKSPACE_NAME
    return True


class WorkspaceManager:
    """Named-workspace registry stored as ``{config_dir}/config.json``.

    ``env_api_key`` is the value of the override environment variable (if
    any).  When non-empty it wins over the registry in ``get_api_key``.
    """

    def __init__(self, config_dir: str | Path, *, env_api_key: str | None = None) -> None:
        self._config_dir = Path(config_dir)
        self._env_api_key = env_api_key

    @property
    def config_path(self) -> Path:
        return self._config_dir / CONFIG_FILENAME

    # -- Persistence -----------------------------------------------------------

    def load(self) -> WorkspaceConfig:
        """Load the registry, migrating a legacy single-key file on the way.

        A missing file is an empty registry.
        """
        config = self._read()
        if migrate_legacy(config):
            logger.info("Migrated legacy API key to workspace '{}'", LEGACY_WORKSPACE_NAME)
            self.save(config)
        return config

    def _read(self) -> WorkspaceConfig:
        path = self.config_path
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return WorkspaceConfig()
        except OSError as exc:
            msg = f"Failed to read config file {path}: {exc}"
            raise ConfigError(msg) from exc

        try:
            return WorkspaceConfig.model_validate_json(raw)
        except ValidationError as exc:
            msg = f"Invalid config file {path}: {exc}"
            raise ConfigError(msg) from exc

    def save(self, config: WorkspaceConfig) -> None:
        path = self.config_path
        try:
            atomic_write(path, config.to_json())
        except OSError as exc:
            msg = f"Failed to write config file {path}: {exc}"
            raise ConfigError(msg) from exc

    # -- Credential resolution -------------------------------------------------

    def get_api_key(self) -> str:
        """Return the API key for this invocation.

        Priority: the environment override (when non-empty), then the
        current workspace.  Raises ``NoWorkspaceSelectedError`` or
        ``WorkspaceNotFoundError`` when the registry cannot supply one.
        """
        if self._env_api_key:
            logger.debug("Using API key from environment")
            return self._env_api_key

        config = self.load()
        if config.current is None:
            raise NoWorkspaceSelectedError
        workspace = config.workspaces.get(config.current)
        if workspace is None:
            raise WorkspaceNotFoundError(config.current)
        logger.debug("Using API key from workspace '{}'", config.current)
        return workspace.api_key

    # -- Mutation --------------------------------------------------------------

    def add_workspace(self, name: str, api_key: str) -> WorkspaceConfig:
        """Register a workspace.  The first one added becomes current."""
        if not api_key:
            msg = "API key cannot be empty"
            raise ValueError(msg)

        config = self.load()
        if name in config.workspaces:
            raise DuplicateWorkspaceError(name)

        config.workspaces[name] = Workspace(api_key=api_key)
        if config.current is None:
            config.current = name
        self.save(config)
        logger.debug("Workspace '{}' added (current={})", name, config.current)
        return config

    def switch_workspace(self, name: str) -> WorkspaceConfig:
        config = self.load()
        if name not in config.workspaces:
            raise WorkspaceNotFoundError(name)

        config.current = name
        self.save(config)
        return config

    def remove_workspace(self, name: str) -> WorkspaceConfig:
        """Remove a workspace.

        Removing the current workspace makes the first remaining one (in
        registry order) current, or clears ``current`` if none remain.
        """
        config = self.load()
        if name not in config.workspaces:
            raise WorkspaceNotFoundError(name)

        del config.workspaces[name]
        if config.current == name:
            config.current = next(iter(config.workspaces), None)
        self.save(config)
        logger.debug("Workspace '{}' removed (current={})", name, config.current)
        return config

    def set_api_key(self, api_key: str) -> WorkspaceConfig:
        """Store a key on the current workspace, creating ``default`` if none is current."""
        if not api_key:
            msg = "API key cannot be empty"
            raise ValueError(msg)

        config = self.load()
        name = config.current or LEGACY_WORKSPACE_NAME
        config.workspaces[name] = Workspace(api_key=api_key)
        config.current = name
        self.save(config)
        return config

    # -- Query -----------------------------------------------------------------

    def list_workspaces(self) -> list[WorkspaceInfo]:
        config = self.load()
        return [
            WorkspaceInfo(
                name=name,
                masked_key=mask_api_key(workspace.api_key),
                is_current=name == config.current,
            )
            for name, workspace in config.workspaces.items()
        ]

    def current_workspace(self) -> WorkspaceInfo | None:
        """Return the current workspace, or ``None`` if unset or dangling."""
        config = self.load()
        if config.current is None:
            return None
        workspace = config.workspaces.get(config.current)
        if workspace is None:
            return None
        return WorkspaceInfo(name=config.current, masked_key=mask_api_key(workspace.api_key), is_current=True)
