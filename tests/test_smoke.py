from __future__ import annotations

import tomllib
from pathlib import Path

from typer.testing import CliRunner

from tlog import __version__
from tlog.main import app

runner = CliRunner()


def test_app_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_all_commands_have_help() -> None:
    """
    Critical Smoke Test: Iterate over EVERY registered command and ensure
    it accepts --help. This catches import errors, syntax errors in decorators,
    and missing dependencies in the command modules.
    """
    names = [info.name for info in app.registered_commands]
    assert "note" in names
    for name in names:
        result = runner.invoke(app, [name, "--help"])
        assert result.exit_code == 0, f"Command 'tlog {name} --help' failed!"
        assert "Usage:" in result.stdout


def test_config_command_shows_settings(notes_root: Path) -> None:
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0, result.output
    assert "root_path" in result.stdout
    assert str(notes_root) in result.stdout
    assert "File loaded: no" in result.stdout


def test_config_save_writes_file(isolate_config: Path, notes_root: Path) -> None:
    result = runner.invoke(app, ["config", "--save"])

    assert result.exit_code == 0, result.output
    data = tomllib.loads(isolate_config.read_text(encoding="utf-8"))
    assert data["root_path"] == str(notes_root)
    assert data["history_days"] == 3


def test_broken_config_enters_safe_mode(isolate_config: Path) -> None:
    isolate_config.write_text("history_days = [\n", encoding="utf-8")

    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "Safe Mode Active" in result.stdout
    assert __version__ in result.stdout


def test_verbose_flag_is_accepted() -> None:
    result = runner.invoke(app, ["--verbose", "dates", "--json"])
    assert result.exit_code == 0, result.output
