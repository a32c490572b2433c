from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from time import perf_counter

import typer
from rich import box
from rich.markup import escape
from rich.panel import Panel

from . import __version__
from .commands import attachments, notes, palette
from .core.attachments import AttachmentManager
from .core.config import AppConfig, ConfigError, ConfigLoadResult, load_config, save_config
from .core.console import console, setup_logging
from .core.registry import CommandRegistry
from .core.store import NoteStore

app = typer.Typer(help="tlog: quick-capture daily notes in a plain-text log.")
logger = logging.getLogger(__name__)


@dataclass
class AppState:
    config: AppConfig
    config_meta: ConfigLoadResult
    logger: logging.Logger
    store: NoteStore
    attachments: AttachmentManager
    registry: CommandRegistry = field(default_factory=CommandRegistry)


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a tlog config file (TOML or JSON)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    # load_config never raises; errors come back in meta.error.
    loaded_config, meta = load_config(config_path=config)
    app_logger = setup_logging(level=loaded_config.log_level, verbose=verbose)

    state = AppState(
        config=loaded_config,
        config_meta=meta,
        logger=app_logger,
        store=NoteStore(loaded_config.root_path),
        attachments=AttachmentManager(loaded_config.root_path),
    )

    start = perf_counter()
    state.registry = palette.build_registry(state)
    app_logger.debug(
        "Command registry initialized with %d commands in %.3f seconds",
        len(state.registry),
        perf_counter() - start,
    )
    ctx.obj = state

    if meta.error:
        # Display "Safe Mode" Warning
        console.print(
            Panel(
                f"[bold red]Configuration Error - Safe Mode Active[/bold red]\n\n"
                f"Failed to load {escape(str(meta.path))}:\n{escape(meta.error)}\n\n"
                f"[yellow]Using default settings.[/yellow]",
                border_style="red",
            )
        )
    else:
        app_logger.debug(
            "Loaded configuration from %s (env overrides: %s, root: %s)",
            meta.path,
            sorted(meta.env_overrides),
            loaded_config.root_path,
        )


@app.command("config")
def show_config(
    ctx: typer.Context,
    save: bool = typer.Option(
        False, "--save", help="Write the active configuration to the config file."
    ),
) -> None:
    """Show the active configuration and where it came from."""
    state: AppState = ctx.obj
    meta = state.config_meta

    if save:
        try:
            written = save_config(state.config, meta.path)
        except ConfigError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green]Saved configuration to[/green] {written}", soft_wrap=True)
        return

    palette.render_settings(state)

    meta_lines = [
        f"Path: {meta.path}",
        "File loaded: yes" if meta.file_loaded else "File loaded: no (using defaults + env)",
    ]

    if meta.env_overrides:
        meta_lines.append("Env overrides: " + ", ".join(sorted(meta.env_overrides)))

    console.print(Panel("\n".join(meta_lines), title="Config source", box=box.SIMPLE))


@app.command("version")
def show_version() -> None:
    """Print the tlog version."""
    console.print(__version__)


app.command("note")(notes.note)
app.command("today")(notes.today)
app.command("open-date")(notes.open_date_note)
app.command("recent")(notes.recent)
app.command("range")(notes.note_range)
app.command("day")(notes.day)
app.command("dates")(notes.dates)
app.command("search")(notes.note_search)
app.command("attach")(attachments.attach)
app.command("attachment-path")(attachments.attachment_path)
app.command("commands")(palette.list_palette)
app.command("run")(palette.run_command)


def cli() -> None:
    app()


if __name__ == "__main__":
    cli()
