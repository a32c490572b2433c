"""Attachment commands.

Provides CLI commands for:
    - Copying a file into this month's attachment folder
    - Resolving an access path back to the stored file
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.markup import escape

from tlog.commands.ui import emit_json, fail
from tlog.core.console import console
from tlog.core.result import StorageError, TLogError

if TYPE_CHECKING:
    from tlog.main import AppState


def attach(
    ctx: typer.Context,
    source: Path = typer.Argument(..., help="File to store as an attachment."),
    name: str | None = typer.Option(
        None, "--name", "-n", help="Original name to record (defaults to the file name)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON."),
) -> None:
    """Store SOURCE under this month's Attachment folder and print its access path."""
    state: AppState = ctx.obj

    try:
        data = source.expanduser().read_bytes()
    except OSError as exc:
        fail(
            StorageError(f"Cannot read {source}: {exc}", context={"operation": "read"}),
            as_json=as_json,
        )

    async def _run() -> str:
        return await asyncio.to_thread(state.attachments.save, data, name or source.name)

    try:
        access_path = asyncio.run(_run())
    except TLogError as exc:
        fail(exc, as_json=as_json)

    if as_json:
        emit_json({"path": access_path})
    else:
        console.print(access_path, markup=False, highlight=False, soft_wrap=True)


def attachment_path(
    ctx: typer.Context,
    access_path: str = typer.Argument(..., help="Access path returned by `attach`."),
) -> None:
    """Print the file an access path refers to."""
    state: AppState = ctx.obj
    try:
        target = state.attachments.resolve_access_path(access_path)
    except TLogError as exc:
        fail(exc)

    if not target.exists():
        console.print(f"[yellow]No attachment stored at {escape(str(target))}[/yellow]")
        raise typer.Exit(code=1)
    console.print(str(target), markup=False, highlight=False, soft_wrap=True)
