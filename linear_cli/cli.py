import json
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from linear_cli.core.client import GraphQLError, LinearClient, TransportError
from linear_cli.core.log import setup_logging
from linear_cli.core.lookups import ReferenceData
from linear_cli.core.managers.workspaces import ConfigError, WorkspaceManager
from linear_cli.core.models.cache import format_size
from linear_cli.core.models.enums import CacheType, LabelKind, OutputFormat
from linear_cli.core.settings import LinearSettings, get_settings
from linear_cli.core.store.base import CacheWriteError
from linear_cli.core.store.local import LocalCacheStore


@dataclass
class CliContext:
    """Per-invocation state shared by all commands."""

    settings: LinearSettings
    output: OutputFormat = OutputFormat.TABLE
    use_cache: bool = True

    def workspaces(self) -> WorkspaceManager:
        return WorkspaceManager(self.settings.config_dir, env_api_key=self.settings.env_api_key())

    def cache(self) -> LocalCacheStore:
        return LocalCacheStore(self.settings.resolve_cache_dir(), ttl_seconds=self.settings.cache_ttl)

    def reference_data(self) -> ReferenceData:
        return ReferenceData(
            self.cache(),
            lambda: LinearClient.from_settings(self.settings, self.workspaces()),
            use_cache=self.use_cache,
        )


pass_cli = click.make_pass_decorator(CliContext)

console = Console(highlight=False)


@contextmanager
def _domain_errors() -> Iterator[None]:
    """Translate domain exceptions into a one-line error and exit code 1."""
    try:
        yield
    except (
        LookupError,
        ValueError,
        ConfigError,
        CacheWriteError,
        TransportError,
        GraphQLError,
    ) as exc:
        raise click.ClickException(str(exc)) from exc


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


def _print_table(headers: Sequence[str], rows: Sequence[Sequence[Any]], *, right: Sequence[str] = ()) -> None:
    table = Table(show_edge=False, pad_edge=False)
    for header in headers:
        table.add_column(header, justify="right" if header in right else "left")
    for row in rows:
        table.add_row(*(escape(str(c)) for c in row))
    console.print(table)


def _render_nodes(ctx: CliContext, nodes: list[Any], columns: Sequence[tuple[str, str]], noun: str) -> None:
    """Render GraphQL nodes as JSON or as a table of ``(header, field)`` columns."""
    if ctx.output is OutputFormat.JSON:
        _echo_json(nodes)
        return
    if not nodes:
        click.echo(f"No {noun} found.")
        return

    rows = [[_field(node, key) for _, key in columns] for node in nodes]
    _print_table([header for header, _ in columns], rows)
    click.echo(f"\n{len(nodes)} {noun}")


def _field(node: Any, dotted: str) -> str:
    value = node
    for part in dotted.split("."):
        value = value.get(part) if isinstance(value, dict) else None
    return "" if value is None else str(value)


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="linear-cli")
@click.option(
    "-o",
    "--output",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TABLE.value,
    help="Output format (table or json).",
)
@click.option("--no-cache", is_flag=True, default=False, help="Bypass the local cache for reference data.")
@click.pass_context
def main(ctx: click.Context, output: str, no_cache: bool) -> None:
    """Linear CLI - manage Linear.app from your terminal.

    Credentials come from LINEAR_API_KEY when set, otherwise from the
    current workspace (see 'linear workspace --help').
    """
    with _domain_errors():
        settings = get_settings()
    setup_logging(settings.log_level)
    ctx.obj = CliContext(settings=settings, output=OutputFormat(output), use_cache=not no_cache)


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------


@main.group()
def workspace() -> None:
    """Manage workspaces (one API key per workspace)."""


@workspace.command("add")
@click.argument("name")
@click.option("-k", "--key", default=None, help="API key (prompted for if omitted).")
@pass_cli
def workspace_add(ctx: CliContext, name: str, key: str | None) -> None:
    """Add a new workspace with its API key."""
    if key is None:
        key = click.prompt(f"Enter API key for workspace '{name}'", hide_input=True)

    with _domain_errors():
        config = ctx.workspaces().add_workspace(name, key)

    click.echo(f"Workspace '{name}' added successfully!")
    if config.current == name:
        click.echo(f"Switched to workspace '{name}'")


@workspace.command("list")
@pass_cli
def workspace_list(ctx: CliContext) -> None:
    """List all configured workspaces."""
    with _domain_errors():
        infos = ctx.workspaces().list_workspaces()

    if ctx.output is OutputFormat.JSON:
        _echo_json([info.model_dump() for info in infos])
        return
    if not infos:
        click.echo("No workspaces configured. Run: linear workspace add <name>")
        return

    click.echo("Configured workspaces:\n")
    for info in infos:
        marker = "*" if info.is_current else " "
        click.echo(f"{marker} {info.name} ({info.masked_key})")
    click.echo("\n* = current workspace")


@workspace.command("switch")
@click.argument("name")
@pass_cli
def workspace_switch(ctx: CliContext, name: str) -> None:
    """Switch to a different workspace."""
    with _domain_errors():
        ctx.workspaces().switch_workspace(name)
    click.echo(f"Switched to workspace '{name}'")


@workspace.command("current")
@pass_cli
def workspace_current(ctx: CliContext) -> None:
    """Show the current workspace."""
    with _domain_errors():
        info = ctx.workspaces().current_workspace()

    if ctx.output is OutputFormat.JSON:
        _echo_json(info.model_dump() if info else None)
        return
    if info is None:
        click.echo("No workspace selected. Run: linear workspace add <name>")
        return
    click.echo(f"Current workspace: {info.name}")
    click.echo(f"API Key: {info.masked_key}")


@workspace.command("remove")
@click.argument("name")
@pass_cli
def workspace_remove(ctx: CliContext, name: str) -> None:
    """Remove a workspace."""
    with _domain_errors():
        manager = ctx.workspaces()
        previous = manager.load().current
        config = manager.remove_workspace(name)

    if previous == name and config.current is not None:
        click.echo(f"Switched to workspace '{config.current}'")
    click.echo(f"Workspace '{name}' removed.")


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@main.group()
def config() -> None:
    """Configure CLI settings - API keys and workspaces."""


@config.command("set-key")
@click.argument("key")
@pass_cli
def config_set_key(ctx: CliContext, key: str) -> None:
    """Save an API key on the current workspace."""
    with _domain_errors():
        ctx.workspaces().set_api_key(key)
    click.echo("API key saved successfully!")


@config.command("show")
@pass_cli
def config_show(ctx: CliContext) -> None:
    """Show the config file location and current workspace."""
    with _domain_errors():
        manager = ctx.workspaces()
        info = manager.current_workspace()

    click.echo(f"Config file: {manager.config_path}")
    click.echo(f"Cache directory: {ctx.settings.resolve_cache_dir()}")
    click.echo()
    if ctx.settings.env_api_key():
        click.echo("Using API key from LINEAR_API_KEY")
    if info is None:
        click.echo("No workspace configured. Run: linear workspace add <name>")
        return
    click.echo(f"Current workspace: {info.name}")
    click.echo(f"API Key: {info.masked_key}")


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


@main.group()
def cache() -> None:
    """Manage the local cache - clear cached data or view status."""


@cache.command("clear")
@click.option("-t", "--type", "type_", default=None, help="Only clear one type (teams, users, statuses, labels).")
@pass_cli
def cache_clear(ctx: CliContext, type_: str | None) -> None:
    """Clear cached data."""
    with _domain_errors():
        store = ctx.cache()
        if type_ is None:
            store.clear_all()
            click.echo("+ Cleared all caches")
            return
        cache_type = CacheType.parse(type_)
        store.clear_type(cache_type)
    click.echo(f"+ Cleared {cache_type.display_name} cache")


@cache.command("status")
@pass_cli
def cache_status(ctx: CliContext) -> None:
    """Show cache validity, age, size and item counts."""
    statuses = ctx.cache().status()

    if ctx.output is OutputFormat.JSON:
        _echo_json([s.model_dump(mode="json") for s in statuses])
        return

    click.echo("Cache Status")
    click.echo("-" * 50)
    _print_table(
        ["Type", "Valid", "Age", "Size", "Items"],
        [
            [
                s.cache_type.display_name,
                "Yes" if s.valid else "No",
                s.age_display,
                s.size_display,
                "-" if s.item_count is None else s.item_count,
            ]
            for s in statuses
        ],
        right=("Size", "Items"),
    )

    valid_count = sum(1 for s in statuses if s.valid)
    total_size = sum(s.size_bytes or 0 for s in statuses)
    click.echo()
    click.echo(f"{valid_count} of {len(CacheType)} caches valid")
    if total_size > 0:
        click.echo(f"Total cache size: {format_size(total_size)}")


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


@main.group()
def teams() -> None:
    """List teams."""


@teams.command("list")
@pass_cli
def teams_list(ctx: CliContext) -> None:
    """List all teams."""
    ref = ctx.reference_data()
    try:
        with _domain_errors():
            nodes = ref.teams()
    finally:
        ref.close()
    _render_nodes(ctx, nodes, [("Key", "key"), ("Name", "name"), ("ID", "id")], "teams")


@main.group()
def users() -> None:
    """List workspace users."""


@users.command("list")
@pass_cli
def users_list(ctx: CliContext) -> None:
    """List all users in the workspace."""
    ref = ctx.reference_data()
    try:
        with _domain_errors():
            nodes = ref.users()
    finally:
        ref.close()
    _render_nodes(ctx, nodes, [("Name", "name"), ("Email", "email"), ("ID", "id")], "users")


@main.group()
def statuses() -> None:
    """View workflow states."""


@statuses.command("list")
@click.option("-t", "--team", required=True, help="Team key or ID.")
@pass_cli
def statuses_list(ctx: CliContext, team: str) -> None:
    """List the workflow states of a team."""
    ref = ctx.reference_data()
    try:
        with _domain_errors():
            nodes = ref.statuses(team)
    finally:
        ref.close()
    _render_nodes(
        ctx,
        nodes,
        [("Name", "name"), ("Type", "type"), ("Color", "color"), ("ID", "id")],
        "statuses",
    )


@main.group()
def labels() -> None:
    """List issue and project labels."""


@labels.command("list")
@click.option(
    "-t",
    "--type",
    "kind",
    type=click.Choice([k.value for k in LabelKind]),
    default=LabelKind.PROJECT.value,
    help="Label type: issue or project.",
)
@pass_cli
def labels_list(ctx: CliContext, kind: str) -> None:
    """List labels."""
    ref = ctx.reference_data()
    try:
        with _domain_errors():
            nodes = ref.labels(LabelKind(kind))
    finally:
        ref.close()
    _render_nodes(
        ctx,
        nodes,
        [("Name", "name"), ("Group", "parent.name"), ("Color", "color"), ("ID", "id")],
        f"{kind} labels",
    )


if __name__ == "__main__":
    main()
