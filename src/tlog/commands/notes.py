"""Daily note commands.

Provides CLI commands for:
    - Appending quick notes to today's file
    - Opening a day's file in the configured editor
    - Reading recent days, date ranges and single days
    - Listing dates that have notes
    - Searching the note tree
"""

from __future__ import annotations

import asyncio
import datetime as dt
import shlex
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich import box
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tlog.commands.ui import emit_json, fail, fzf_select
from tlog.core.console import console
from tlog.core.models import SearchResult
from tlog.core.result import Err, Ok, TLogError
from tlog.core.search import search_notes

if TYPE_CHECKING:
    from tlog.core.config import AppConfig
    from tlog.main import AppState


def _editor_command(editor: str | None, path: Path, line: int | None) -> list[str] | None:
    """Build the editor invocation, or None to fall back to the OS opener."""
    if editor:
        return [*shlex.split(editor), str(path)]
    code = shutil.which("code")
    if code:
        target = f"{path}:{line}" if line else str(path)
        return [code, "-g", target]
    return None


async def _launch_editor(editor_cmd: list[str]) -> int:
    """Launch the configured editor asynchronously."""
    proc = await asyncio.create_subprocess_exec(*editor_cmd)
    return await proc.wait()


def open_in_editor(config: AppConfig, path: Path, line: int | None = None) -> None:
    """Open ``path`` (optionally at ``line``) in the editor or the OS default app."""
    editor_cmd = _editor_command(config.editor, path, line)
    if editor_cmd is None:
        typer.launch(str(path))
        return

    try:
        exit_code = asyncio.run(_launch_editor(editor_cmd))
    except FileNotFoundError:
        console.print(f"[red]Editor not found:[/red] {escape(editor_cmd[0])}")
        raise typer.Exit(code=1)
    if exit_code != 0:
        console.print(f"[red]Editor exited with code {exit_code}[/red]")


def open_today(state: AppState) -> Path:
    path = state.store.ensure_today_file()
    open_in_editor(state.config, path)
    return path


def open_date(state: AppState, date: str, line: int | None = None) -> Path:
    path = state.store.ensure_date_file(date)
    open_in_editor(state.config, path, line)
    return path


def render_search_results(results: list[SearchResult], query: str) -> None:
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(title=f"Matches for '{escape(query)}'", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Time", style="magenta", no_wrap=True)
    table.add_column("Content", style="white")
    table.add_column("Line", style="dim", no_wrap=True)
    for result in results:
        table.add_row(result.date, result.time, escape(result.content), str(result.line_no))
    console.print(table)


def note(
    ctx: typer.Context,
    message: str = typer.Option(
        "", "--message", "-m", help="Message to append. If empty, opens today's note."
    ),
) -> None:
    """Append to today's note or open it in the configured editor."""
    state: AppState = ctx.obj

    if not message:
        try:
            open_today(state)
        except TLogError as exc:
            fail(exc)
        return

    async def _run() -> Path | None:
        return await asyncio.to_thread(state.store.append_note, message)

    try:
        note_path = asyncio.run(_run())
    except TLogError as exc:
        fail(exc)
    console.print(f"[green]Appended to[/green] {escape(str(note_path))}", soft_wrap=True)


def today(ctx: typer.Context) -> None:
    """Create today's note if needed and open it."""
    state: AppState = ctx.obj
    try:
        path = open_today(state)
    except TLogError as exc:
        fail(exc)
    state.logger.debug("Opened %s", path)


def open_date_note(
    ctx: typer.Context,
    date: str = typer.Argument(..., help="Date to open (YYYY-MM-DD)."),
    line: int | None = typer.Option(None, "--line", "-l", help="Jump to this line."),
) -> None:
    """Create the note for DATE if needed and open it."""
    state: AppState = ctx.obj
    try:
        open_date(state, date, line)
    except TLogError as exc:
        fail(exc)


def recent(
    ctx: typer.Context,
    days: int | None = typer.Option(
        None, "--days", "-d", help="Number of days to show (defaults to history_days)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of panels."),
) -> None:
    """Show the notes of the last few days, newest first."""
    state: AppState = ctx.obj
    window = days if days is not None else state.config.history_days

    try:
        notes = state.store.read_recent(window)
    except TLogError as exc:
        fail(exc, as_json=as_json)

    if as_json:
        emit_json([daily.to_dict() for daily in notes])
        return

    if not notes:
        console.print(f"[yellow]No notes in the last {window} days.[/yellow]")
        return

    for daily in notes:
        console.print(Panel(escape(daily.content.rstrip("\n")), title=daily.date, box=box.ROUNDED))


def note_range(
    ctx: typer.Context,
    start: str = typer.Argument(..., help="First day (YYYY-MM-DD)."),
    end: str = typer.Argument(..., help="Last day (YYYY-MM-DD)."),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a table."),
) -> None:
    """List entries between START and END, newest first."""
    state: AppState = ctx.obj

    try:
        entries = state.store.read_range(start, end)
    except TLogError as exc:
        fail(exc, as_json=as_json)

    if as_json:
        emit_json([entry.to_dict() for entry in entries])
        return

    if not entries:
        console.print(f"[yellow]No entries between {start} and {end}.[/yellow]")
        return

    table = Table(title=f"Entries {start} .. {end}", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Time", style="magenta", no_wrap=True)
    table.add_column("Content", style="white")
    for entry in entries:
        table.add_row(entry.date, entry.timestamp, escape(entry.content))
    console.print(table)


def day(
    ctx: typer.Context,
    date: str = typer.Argument(..., help="Day to print (YYYY-MM-DD)."),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON."),
) -> None:
    """Print the whole note file of one day."""
    state: AppState = ctx.obj

    try:
        result = state.store.read_daily(date)
    except TLogError as exc:
        fail(exc, as_json=as_json)

    match result:
        case Err(err):
            if as_json:
                fail(err, as_json=True)
            console.print(f"[yellow]No note for {escape(str(err.context['date']))}.[/yellow]")
            raise typer.Exit(code=1)
        case Ok(daily):
            if as_json:
                emit_json(daily.to_dict())
            else:
                console.print(Panel(escape(daily.content.rstrip("\n")), title=daily.date))


def dates(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Emit JSON."),
) -> None:
    """List every date that has a note, most recent first."""
    state: AppState = ctx.obj
    available = state.store.list_dates()

    if as_json:
        emit_json(available)
        return

    if not available:
        console.print(f"[yellow]No notes under {escape(str(state.store.root))}.[/yellow]")
        return
    for value in available:
        console.print(value)


def note_search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Case-insensitive text to look for."),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON."),
    pick: bool = typer.Option(
        False, "--pick", help="Choose a match with fzf and open it at its line."
    ),
) -> None:
    """Search every note for QUERY (at most 100 matches)."""
    state: AppState = ctx.obj
    started = dt.datetime.now()

    results = search_notes(state.store.root, query)
    state.logger.debug(
        "Search for %r returned %d results in %s",
        query,
        len(results),
        dt.datetime.now() - started,
    )

    if as_json:
        emit_json([result.to_dict() for result in results])
        return

    if not pick or not results:
        render_search_results(results, query)
        return

    lines = [
        f"{index}\t{result.date} {result.time}\t{result.content}"
        for index, result in enumerate(results)
    ]
    selection = fzf_select(
        lines, prompt="note-search> ", extra_args=["--delimiter", "\t", "--with-nth", "2.."]
    )
    if selection is None:
        return
    chosen = results[int(selection.split("\t", 1)[0])]
    open_in_editor(state.config, chosen.file_path, chosen.line_no)
