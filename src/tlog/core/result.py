"""
Result types and error hierarchy for t-log.

This module provides:
1. Result[T, E] type for explicit error handling
2. Domain-specific exception hierarchy

Usage:
    from tlog.core.result import Ok, Err, Result, NoteNotFoundError

    def read_day(path: Path) -> Result[str, NoteNotFoundError]:
        if not path.exists():
            return Err(NoteNotFoundError("No note for this day"))
        return Ok(path.read_text())

    match read_day(path):
        case Ok(text):
            print(text)
        case Err(err):
            print(err.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True


# Type alias for Result
Result = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Domain-specific error hierarchy
# ---------------------------------------------------------------------------


class TLogError(Exception):
    """Base exception for all t-log errors.

    Carries a human readable message plus a context mapping (operation,
    path, identifiers) that callers can log or display.
    """

    def __init__(self, message: str, *, context: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class InvalidDateError(TLogError, ValueError):
    """Raised when a date string is not a valid ``YYYY-MM-DD`` calendar date."""


class NotFoundError(TLogError):
    """Raised (or returned) when a note file or a command does not exist."""


class NoteNotFoundError(NotFoundError):
    """No daily note file exists for the requested date."""


class CommandNotFoundError(NotFoundError):
    """No command is registered under the requested id."""


class StorageError(TLogError):
    """Raised when the filesystem refuses a read or write.

    Examples:
    - Permission denied while creating a month directory
    - Disk full while appending an entry
    - A path component that is a file instead of a directory
    """


class EntryFormatError(TLogError, ValueError):
    """Raised when content cannot be stored as a single entry line."""


class AttachmentPathError(TLogError, ValueError):
    """Raised when an access path does not map inside the attachment tree."""


class UsageError(TLogError, ValueError):
    """Raised when a command is invoked with missing or malformed arguments."""


class ConfigurationError(TLogError):
    """Raised for configuration issues.

    Examples:
    - Invalid config values
    - Config file parse errors
    """


__all__ = [
    # Result types
    "Ok",
    "Err",
    "Result",
    # Error hierarchy
    "TLogError",
    "InvalidDateError",
    "NotFoundError",
    "NoteNotFoundError",
    "CommandNotFoundError",
    "StorageError",
    "EntryFormatError",
    "AttachmentPathError",
    "UsageError",
    "ConfigurationError",
]
