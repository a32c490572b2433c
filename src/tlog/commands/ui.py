from __future__ import annotations

import json
import shutil
import subprocess
from typing import Any, NoReturn

import typer

from tlog.core.console import console
from tlog.core.error_middleware import format_error, format_for_cli, format_for_json


def fail(exc: Exception, as_json: bool = False) -> NoReturn:
    """Print a formatted error and exit the command with status 1.

    With ``as_json`` the error goes to stdout as a JSON object so that
    `--json` consumers can parse failures as well as results.
    """
    formatted = format_error(exc)
    if as_json:
        typer.echo(format_for_json(formatted))
    else:
        console.print(format_for_cli(formatted))
    raise typer.Exit(code=1)


def emit_json(payload: Any) -> None:
    """Write machine-readable output without Rich styling."""
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def fzf_select(
    lines: list[str],
    prompt: str = "> ",
    extra_args: list[str] | None = None,
) -> str | None:
    """
    Run fzf interactively. Returns the selected line or None if cancelled.
    """
    if not shutil.which("fzf"):
        console.print("[yellow]fzf not found. Please install it for interactive selection.[/yellow]")
        return None

    cmd = ["fzf", "--prompt", prompt]
    if extra_args:
        cmd.extend(extra_args)

    proc = subprocess.run(
        cmd,
        input="\n".join(lines),
        text=True,
        capture_output=True,
    )

    if proc.returncode != 0:
        return None

    output = proc.stdout.strip()
    return output or None
