"""Value types returned by the note store, search and command registry.

All of these are transient query results. Nothing here is cached; the
note tree on disk is the only durable state.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class NoteEntry:
    """One timestamped line parsed out of a daily file."""

    content: str
    timestamp: str
    date: str
    raw_line: str

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.content, "timestamp": self.timestamp, "date": self.date}


@dataclass(frozen=True, slots=True)
class DailyNote:
    """The whole text of one day's file."""

    date: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "content": self.content}


@dataclass(frozen=True, slots=True)
class SearchResult:
    content: str
    date: str
    time: str
    file_path: Path
    line_no: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "date": self.date,
            "time": self.time,
            "filePath": str(self.file_path),
            "lineNo": self.line_no,
        }


@dataclass(frozen=True, slots=True)
class Command:
    """Descriptor shown in the command palette."""

    id: str
    title: str
    description: str = ""
    usage: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "usage": self.usage,
        }


__all__ = ["Command", "DailyNote", "NoteEntry", "SearchResult"]
