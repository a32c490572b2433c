from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console
from typer.testing import CliRunner

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def notes_root(tmp_path: Path) -> Path:
    return tmp_path / "QuickNotes"


@pytest.fixture(autouse=True)
def isolate_config(tmp_path: Path, notes_root: Path, monkeypatch: Any) -> Path:
    """Point config and the note tree to temp paths so tests don't touch user state."""
    cfg_path = tmp_path / "config.toml"
    monkeypatch.setenv("TLOG_CONFIG", str(cfg_path))
    monkeypatch.setenv("TLOG_ROOT_PATH", str(notes_root))
    for name in ("TLOG_HISTORY_DAYS", "TLOG_EDITOR", "TLOG_LOG_LEVEL", "TLOG_HOTKEY"):
        monkeypatch.delenv(name, raising=False)
    return cfg_path


@pytest.fixture(autouse=True)
def capture_console(monkeypatch: Any) -> Console:
    """Use an in-memory Rich console during tests."""
    test_console = Console(record=True, width=200)
    import tlog.commands.attachments as attachments_cmd
    import tlog.commands.notes as notes_cmd
    import tlog.commands.palette as palette_cmd
    import tlog.commands.ui as ui_cmd
    import tlog.core.console as core_console
    import tlog.main as tlog_main

    for module in (core_console, tlog_main, notes_cmd, attachments_cmd, palette_cmd, ui_cmd):
        monkeypatch.setattr(module, "console", test_console)
    return test_console
