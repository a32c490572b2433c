"""Date-sharded note store.

Entries for a calendar day live in ``root/YYYY/MM/YYYY-MM-DD.md``, one
``- [HH:MM] content`` line per entry. Directories are created on demand.
The store keeps nothing in memory between calls: every read goes back to
the filesystem.

A day without a file is a normal state ("no notes yet"), so range, recent
and listing reads treat missing files as empty. Any other filesystem
failure is raised as ``StorageError`` with the operation and path attached.
"""

from __future__ import annotations

import datetime as dt
import os
import re
from collections.abc import Collection, Iterator
from pathlib import Path

from tlog.core.codec import decode_line, encode_line
from tlog.core.console import get_logger
from tlog.core.models import DailyNote, NoteEntry
from tlog.core.result import (
    Err,
    InvalidDateError,
    NoteNotFoundError,
    Ok,
    Result,
    StorageError,
)

logger = get_logger(__name__)

DATE_FORMAT = "%Y-%m-%d"
NOTE_SUFFIX = ".md"
ATTACHMENT_DIR_NAME = "Attachment"

_DATE_SHAPE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

DateLike = str | dt.date


def parse_date(value: DateLike) -> dt.date:
    """Parse a strict ``YYYY-MM-DD`` string (dates pass through unchanged)."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not _DATE_SHAPE.fullmatch(value):
        raise InvalidDateError("Invalid date, use YYYY-MM-DD", context={"date": value})
    try:
        return dt.datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date: {exc}", context={"date": value}) from exc


def is_note_filename(name: str) -> bool:
    """True for ``YYYY-MM-DD.md`` names whose stem is a real calendar date."""
    if not name.endswith(NOTE_SUFFIX):
        return False
    try:
        parse_date(name[: -len(NOTE_SUFFIX)])
    except InvalidDateError:
        return False
    return True


def days_newest_first(start: dt.date, end: dt.date) -> Iterator[dt.date]:
    """Yield every day from ``end`` down to ``start``; nothing when start > end."""
    current = end
    while current >= start:
        yield current
        if current == start:
            return
        current -= dt.timedelta(days=1)


def walk_files(root: Path, *, skip_dirs: Collection[str] = ()) -> Iterator[Path]:
    """Yield files under ``root`` depth-first in lexical order.

    Directories whose name is in ``skip_dirs`` are pruned with their whole
    subtree. Directories that cannot be listed are skipped.
    """
    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except FileNotFoundError:
        return
    except OSError as exc:
        logger.debug("Skipping unreadable directory %s: %s", root, exc)
        return

    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            if entry.name in skip_dirs:
                continue
            yield from walk_files(Path(entry.path), skip_dirs=skip_dirs)
        else:
            yield Path(entry.path)


def parse_note_file(path: Path, date: str) -> list[NoteEntry]:
    """Return the entries of one daily file in line order.

    Lines are stripped before decoding so indented or CRLF lines still count;
    lines that are not entries are left out.
    """
    entries: list[NoteEntry] = []
    with path.open(encoding="utf-8", errors="replace", newline="\n") as handle:
        for line in handle:
            raw = line.strip()
            decoded = decode_line(raw)
            if decoded is None:
                continue
            entries.append(
                NoteEntry(
                    content=decoded.content,
                    timestamp=decoded.timestamp,
                    date=date,
                    raw_line=raw,
                )
            )
    return entries


class NoteStore:
    """Filesystem-backed store of daily note files under ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def month_dir(self, day: dt.date) -> Path:
        return self.root / f"{day.year:04d}" / f"{day.month:02d}"

    def note_path(self, day: DateLike) -> Path:
        parsed = parse_date(day)
        return self.month_dir(parsed) / f"{parsed.isoformat()}{NOTE_SUFFIX}"

    def _ensure_month_dir(self, day: dt.date) -> Path:
        path = self.month_dir(day)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"Failed to create directory: {exc}",
                context={"operation": "mkdir", "path": path},
            ) from exc
        return path

    def append_note(self, content: str, now: dt.datetime | None = None) -> Path | None:
        """Append one entry to the file of ``now``'s day.

        Empty content is ignored and returns ``None``. The line is written
        with a single unbuffered append so readers never see half a line.
        """
        if not content:
            return None

        now = now or dt.datetime.now()
        line = encode_line(now, content).encode("utf-8")
        self._ensure_month_dir(now.date())
        path = self.note_path(now.date())

        try:
            with path.open("ab", buffering=0) as handle:
                handle.write(line)
        except OSError as exc:
            raise StorageError(
                f"Failed to write note: {exc}",
                context={"operation": "append", "path": path},
            ) from exc

        logger.debug("Appended %d bytes to %s", len(line), path)
        return path

    def _read_text(self, path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(
                f"Failed to read note: {exc}",
                context={"operation": "read", "path": path},
            ) from exc

    def _read_entries(self, path: Path, date: str) -> list[NoteEntry]:
        try:
            return parse_note_file(path, date)
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(
                f"Failed to read note: {exc}",
                context={"operation": "read", "path": path},
            ) from exc

    def read_daily_range(self, start: DateLike, end: DateLike) -> list[DailyNote]:
        """Whole-day contents for an inclusive range, newest day first."""
        start_day = parse_date(start)
        end_day = parse_date(end)

        notes: list[DailyNote] = []
        for day in days_newest_first(start_day, end_day):
            content = self._read_text(self.note_path(day))
            if content is not None:
                notes.append(DailyNote(date=day.isoformat(), content=content))
        return notes

    def read_recent(self, n_days: int, today: dt.date | None = None) -> list[DailyNote]:
        """Daily notes for the last ``n_days`` days ending at ``today``."""
        if n_days < 1:
            return []
        today = parse_date(today or dt.date.today())
        start = today - dt.timedelta(days=n_days - 1)
        return self.read_daily_range(start, today)

    def read_range(self, start: DateLike, end: DateLike) -> list[NoteEntry]:
        """Entries for an inclusive date range in reverse-chronological order.

        Days are visited newest first and each day's entries are reversed,
        so the last line written comes first.
        """
        start_day = parse_date(start)
        end_day = parse_date(end)

        entries: list[NoteEntry] = []
        for day in days_newest_first(start_day, end_day):
            day_entries = self._read_entries(self.note_path(day), day.isoformat())
            entries.extend(reversed(day_entries))
        return entries

    def read_daily(self, date: DateLike) -> Result[DailyNote, NoteNotFoundError]:
        """Raw content of one day's file, or ``Err`` when there is none yet."""
        day = parse_date(date)
        path = self.note_path(day)
        content = self._read_text(path)
        if content is None:
            return Err(
                NoteNotFoundError(
                    "No note for this date",
                    context={"date": day.isoformat(), "path": path},
                )
            )
        return Ok(DailyNote(date=day.isoformat(), content=content))

    def list_dates(self) -> list[str]:
        """All dates with a daily file, most recent first."""
        dates = [
            path.name[: -len(NOTE_SUFFIX)]
            for path in walk_files(self.root, skip_dirs={ATTACHMENT_DIR_NAME})
            if is_note_filename(path.name)
        ]
        return sorted(dates, reverse=True)

    def ensure_date_file(self, date: DateLike) -> Path:
        """Create the file for ``date`` (and its month directory) if missing."""
        day = parse_date(date)
        self._ensure_month_dir(day)
        path = self.note_path(day)
        try:
            # Append mode creates the file without touching existing content.
            with path.open("a", encoding="utf-8"):
                pass
        except OSError as exc:
            raise StorageError(
                f"Failed to create note file: {exc}",
                context={"operation": "create", "path": path},
            ) from exc
        return path

    def ensure_today_file(self, now: dt.datetime | None = None) -> Path:
        now = now or dt.datetime.now()
        return self.ensure_date_file(now.date())


__all__ = [
    "ATTACHMENT_DIR_NAME",
    "DATE_FORMAT",
    "NOTE_SUFFIX",
    "NoteStore",
    "days_newest_first",
    "is_note_filename",
    "parse_date",
    "parse_note_file",
    "walk_files",
]
