"""
Centralized error formatting for the CLI and JSON consumers.

This module turns exceptions raised by the store, search, attachment and
command layers into a consistent structure, then renders that structure
as Rich markup or as a JSON payload.
"""

from __future__ import annotations

import json
import traceback
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from rich.markup import escape

from tlog.core.result import (
    AttachmentPathError,
    CommandNotFoundError,
    ConfigurationError,
    EntryFormatError,
    InvalidDateError,
    NotFoundError,
    StorageError,
    TLogError,
    UsageError,
)


class ErrorSeverity(Enum):
    """Severity levels for error display."""

    INFO = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()


@dataclass(frozen=True, slots=True)
class FormattedError:
    """A formatted error ready for display."""

    message: str
    severity: ErrorSeverity
    code: str
    details: dict[str, Any]
    traceback: str | None = None


def _error_code(exc: Exception) -> str:
    """Derive an error code from exception type."""
    if isinstance(exc, InvalidDateError):
        return "INVALID_DATE"
    if isinstance(exc, CommandNotFoundError):
        return "COMMAND_NOT_FOUND"
    if isinstance(exc, NotFoundError):
        return "NOT_FOUND"
    if isinstance(exc, StorageError):
        return "IO_FAILURE"
    if isinstance(exc, EntryFormatError):
        return "INVALID_ENTRY"
    if isinstance(exc, AttachmentPathError):
        return "INVALID_ATTACHMENT_PATH"
    if isinstance(exc, UsageError):
        return "USAGE_ERROR"
    if isinstance(exc, ConfigurationError):
        return "CONFIG_ERROR"
    if isinstance(exc, TLogError):
        return "TLOG_ERROR"
    if isinstance(exc, FileNotFoundError):
        return "FILE_NOT_FOUND"
    if isinstance(exc, PermissionError):
        return "PERMISSION_DENIED"
    return "UNEXPECTED_ERROR"


def _severity(exc: Exception) -> ErrorSeverity:
    """Determine severity based on exception type."""
    if isinstance(exc, NotFoundError):
        return ErrorSeverity.INFO
    if isinstance(exc, (InvalidDateError, EntryFormatError, AttachmentPathError, UsageError)):
        return ErrorSeverity.WARNING
    if isinstance(exc, (StorageError, ConfigurationError)):
        return ErrorSeverity.ERROR
    return ErrorSeverity.CRITICAL


def format_error(
    exc: Exception,
    *,
    include_traceback: bool = False,
) -> FormattedError:
    """Format an exception into a structured error.

    Args:
        exc: The exception to format
        include_traceback: Whether to include full traceback (for debugging)

    Returns:
        FormattedError ready for display
    """
    details: dict[str, Any] = {}
    message = str(exc)
    if isinstance(exc, TLogError):
        details = {key: str(value) for key, value in exc.context.items()}
        message = exc.message

    if isinstance(exc, OSError):
        if exc.filename:
            details["path"] = str(exc.filename)
        if exc.errno:
            details["errno"] = exc.errno

    tb = None
    if include_traceback:
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return FormattedError(
        message=message,
        severity=_severity(exc),
        code=_error_code(exc),
        details=details,
        traceback=tb,
    )


def format_for_cli(error: FormattedError) -> str:
    """Format error for CLI display with Rich markup."""
    color_map = {
        ErrorSeverity.INFO: "blue",
        ErrorSeverity.WARNING: "yellow",
        ErrorSeverity.ERROR: "red",
        ErrorSeverity.CRITICAL: "bold red",
    }
    color = color_map.get(error.severity, "red")

    parts = [f"[{color}]{error.code}[/{color}]: {escape(error.message)}"]

    if error.details:
        detail_lines = [f"  {k}: {escape(str(v))}" for k, v in error.details.items()]
        parts.append("\n".join(detail_lines))

    if error.traceback:
        parts.append(f"\n[dim]{escape(error.traceback)}[/dim]")

    return "\n".join(parts)


def format_for_json(error: FormattedError) -> str:
    """Format error as a JSON payload for machine consumers."""
    payload: dict[str, Any] = {
        "error": error.code,
        "message": error.message,
    }

    if error.details:
        payload["details"] = error.details

    return json.dumps(payload)


__all__ = [
    "ErrorSeverity",
    "FormattedError",
    "format_error",
    "format_for_cli",
    "format_for_json",
]
