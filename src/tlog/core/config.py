"""Application configuration management.

Handles loading and validating configuration from multiple sources:
    - TOML/JSON config files
    - Environment variables (TLOG_* prefix)
    - Default values

Key components:
    - AppConfig: Main configuration model
    - load_config(): Safe config loading with fallback
    - save_config(): Persist the active configuration
    - ConfigLoadResult: Metadata about config source
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from textwrap import dedent
from typing import Any
from unittest.mock import patch

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from tlog.core.result import ConfigurationError

CONFIG_ENV_VAR = "TLOG_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "tlog" / "config.toml"


class ConfigError(ConfigurationError):
    """Raised when configuration cannot be loaded or validated."""


class AppConfig(BaseSettings):
    """Settings shared by the note store, search and the CLI shell."""

    model_config = SettingsConfigDict(
        env_prefix="TLOG_",
        extra="ignore",
    )

    root_path: Path = Field(
        default=Path("QuickNotes"),
        description="Root of the note tree; relative paths live under the home directory.",
    )
    history_days: int = Field(
        default=3, ge=1, description="Number of days shown as recent notes."
    )
    hotkey: str = Field(
        default="Ctrl+Alt+Space", description="Global hotkey used by the desktop shell."
    )
    editor: str | None = Field(
        default=None,
        description="Editor command for opening note files. Empty uses code or the OS opener.",
    )
    log_level: str = Field(default="INFO", description="Log level for tlog output.")

    @field_validator("root_path", mode="after")
    @classmethod
    def resolve_root_path(cls, v: Path) -> Path:
        expanded = v.expanduser()
        if not expanded.is_absolute():
            expanded = Path.home() / expanded
        return expanded

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        # Environment variables override config file entries.
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)


@dataclass
class ConfigLoadResult:
    path: Path
    file_loaded: bool
    env_overrides: set[str]
    error: str | None = None


def _resolve_config_path(config_path: Path | None, env_vars: Mapping[str, str]) -> Path:
    candidate = config_path or env_vars.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    return Path(candidate).expanduser()


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc

    suffix = path.suffix.lower()
    parser = json.loads if suffix == ".json" else tomllib.loads

    try:
        data = parser(raw)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Syntax error in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config root in {path} must be a mapping.")

    return data


def _detect_env_overrides(env_vars: Mapping[str, str]) -> set[str]:
    """Detect which fields are overridden by environment variables."""
    prefix = AppConfig.model_config.get("env_prefix", "")
    return {
        field for field in AppConfig.model_fields if f"{prefix}{field}".upper() in env_vars
    }


def load_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[AppConfig, ConfigLoadResult]:
    """
    Load configuration with Safe Mode fallback.
    If the file is invalid, returns default config + error message.
    """
    env_vars: Mapping[str, str] = os.environ if env is None else {**os.environ, **env}
    resolved_path = _resolve_config_path(config_path, env_vars)
    env_overrides = _detect_env_overrides(env_vars)

    error: str | None = None
    file_loaded = False
    file_data: dict[str, Any] = {}

    try:
        file_data = _read_config_file(resolved_path)
        file_loaded = resolved_path.exists()
    except ConfigError as exc:
        error = str(exc)

    context_manager = (
        patch.dict(os.environ, env_vars, clear=False) if env is not None else nullcontext()
    )

    try:
        with context_manager:
            config = AppConfig(**file_data)
    except ValidationError as exc:
        error = str(exc)
        config = AppConfig()

    load_result = ConfigLoadResult(
        path=resolved_path,
        file_loaded=file_loaded,
        env_overrides=env_overrides,
        error=error,
    )

    return config, load_result


def _render_toml(config: AppConfig) -> str:
    # json.dumps yields valid TOML basic strings for these scalar values.
    editor_line = f"editor = {json.dumps(config.editor)}" if config.editor else "# editor = \"code -w\""
    return dedent(
        f"""
        # t-log configuration (TOML)
        root_path = {json.dumps(str(config.root_path))}
        history_days = {config.history_days}
        hotkey = {json.dumps(config.hotkey)}
        log_level = {json.dumps(config.log_level)}
        {editor_line}
        """
    ).strip()


def save_config(config: AppConfig, path: Path) -> Path:
    """Write the configuration to ``path`` as JSON or TOML (by suffix)."""
    target = path.expanduser()
    if target.suffix.lower() == ".json":
        content = json.dumps(config.model_dump(mode="json"), indent=2)
    else:
        content = _render_toml(config)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot write config {target}: {exc}") from exc
    return target
