"""Encoding and decoding of single entry lines.

An entry is stored as ``- [HH:MM] content`` followed by a newline. Daily
files may also hold headings or hand-written text, so decoding is a
best-effort recognizer: anything that does not have the exact entry shape
decodes to ``None``.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import NamedTuple

from tlog.core.result import EntryFormatError

ENTRY_PATTERN = re.compile(r"- \[([0-9]{2}:[0-9]{2})\] (.*)")
TIME_FORMAT = "%H:%M"
_TIME_MARKER = re.compile(r"[0-9]{2}:[0-9]{2}")


class DecodedLine(NamedTuple):
    timestamp: str
    content: str


def format_timestamp(value: dt.datetime | dt.time | str) -> str:
    """Render a clock value as the ``HH:MM`` marker used in entry lines."""
    if isinstance(value, (dt.datetime, dt.time)):
        return value.strftime(TIME_FORMAT)
    if not _TIME_MARKER.fullmatch(value):
        raise EntryFormatError("Timestamp must look like HH:MM", context={"timestamp": value})
    return value


def encode_line(timestamp: dt.datetime | dt.time | str, content: str) -> str:
    """Return the on-disk line for one entry, newline included."""
    if "\n" in content or "\r" in content:
        raise EntryFormatError("Entry content must be a single line")
    return f"- [{format_timestamp(timestamp)}] {content}\n"


def decode_line(text: str) -> DecodedLine | None:
    """Recover ``(timestamp, content)`` from a line, or ``None`` if it is not an entry."""
    if text.endswith("\n"):
        text = text[:-1]
        if text.endswith("\r"):
            text = text[:-1]
    match = ENTRY_PATTERN.fullmatch(text)
    if match is None:
        return None
    return DecodedLine(timestamp=match.group(1), content=match.group(2))


__all__ = ["DecodedLine", "decode_line", "encode_line", "format_timestamp"]
