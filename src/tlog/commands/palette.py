"""Command palette wiring.

Provides:
    - build_registry(): the default palette bound to the running app state
    - `commands`: list the registered palette commands
    - `run`: execute a palette command by id
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer
from rich import box
from rich.markup import escape
from rich.table import Table

from tlog.commands import notes
from tlog.commands.ui import emit_json, fail
from tlog.core.console import console
from tlog.core.models import Command
from tlog.core.registry import CommandRegistry
from tlog.core.result import TLogError, UsageError
from tlog.core.search import search_notes

if TYPE_CHECKING:
    from tlog.main import AppState


OPEN_DATE = Command(
    id="cmd:open-date",
    title="Open Date...",
    description="Open the note of a specific date",
    usage="open-date <YYYY-MM-DD>",
)
TODAY = Command(
    id="cmd:today",
    title="Open Today",
    description="Open today's note in the editor",
)
FIND = Command(
    id="cmd:find",
    title="Find / Search",
    description="Search notes by keyword",
    usage="find <keyword>",
)
SETTINGS = Command(
    id="cmd:settings",
    title="Settings",
    description="Show the active configuration",
)
HELP = Command(
    id="cmd:help",
    title="Help",
    description="List the available commands",
)


def render_commands(registry: CommandRegistry) -> None:
    table = Table(title="Commands", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Description", style="white")
    table.add_column("Usage", style="dim")
    for command in sorted(registry.list_commands(), key=lambda item: item.id):
        table.add_row(
            command.id,
            escape(command.title),
            escape(command.description),
            escape(command.usage),
        )
    console.print(table)


def render_settings(state: AppState) -> None:
    table = Table(title="Config", box=box.SIMPLE, expand=True)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for key, value in state.config.model_dump().items():
        table.add_row(key, escape(str(value)))
    console.print(table)


def build_registry(state: AppState) -> CommandRegistry:
    """Register the default palette against ``state``."""
    registry = CommandRegistry()

    def _open_date(args: list[str]) -> None:
        if not args:
            raise UsageError(f"Usage: {OPEN_DATE.usage}", context={"id": OPEN_DATE.id})
        notes.open_date(state, args[0])

    def _today(args: list[str]) -> None:
        notes.open_today(state)

    def _find(args: list[str]) -> None:
        query = " ".join(args)
        notes.render_search_results(search_notes(state.store.root, query), query)

    def _settings(args: list[str]) -> None:
        render_settings(state)

    def _help(args: list[str]) -> None:
        render_commands(registry)

    registry.register(OPEN_DATE, _open_date)
    registry.register(TODAY, _today)
    registry.register(FIND, _find)
    registry.register(SETTINGS, _settings)
    registry.register(HELP, _help)
    return registry


def list_palette(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Emit JSON."),
) -> None:
    """List the commands available in the palette."""
    state: AppState = ctx.obj
    if as_json:
        commands = sorted(state.registry.list_commands(), key=lambda item: item.id)
        emit_json([command.to_dict() for command in commands])
        return
    render_commands(state.registry)


def run_command(
    ctx: typer.Context,
    command_id: str = typer.Argument(..., help="Palette command id, e.g. cmd:find."),
    args: list[str] | None = typer.Argument(None, help="Arguments passed to the command."),
) -> None:
    """Execute a palette command by id."""
    state: AppState = ctx.obj
    try:
        state.registry.execute(command_id, args or [])
    except TLogError as exc:
        fail(exc)
