from __future__ import annotations

from pathlib import Path

from tlog.core.codec import decode_line
from tlog.core.console import get_logger
from tlog.core.models import SearchResult
from tlog.core.store import NOTE_SUFFIX, walk_files

logger = get_logger(__name__)

# Upper bound on matches returned by one search, across all files.
MAX_SEARCH_RESULTS = 100


def _match_file(
    path: Path,
    needle: str,
    results: list[SearchResult],
    limit: int,
) -> None:
    date = path.name[: -len(NOTE_SUFFIX)]
    # Only "\n" ends a line; a lone "\r" stays part of the line text.
    with path.open(encoding="utf-8", errors="replace", newline="\n") as handle:
        for line_no, line in enumerate(handle, start=1):
            if len(results) >= limit:
                return
            text = line.rstrip("\r\n")
            if needle not in text.lower():
                continue

            decoded = decode_line(text)
            if decoded is None:
                time_marker, content = "", text
            else:
                time_marker, content = decoded.timestamp, decoded.content

            results.append(
                SearchResult(
                    content=content,
                    date=date,
                    time=time_marker,
                    file_path=path.absolute(),
                    line_no=line_no,
                )
            )


def search_notes(root: Path, query: str, limit: int = MAX_SEARCH_RESULTS) -> list[SearchResult]:
    """
    Case-insensitive substring search over every ``.md`` file under ``root``.

    Files are scanned in lexical walk order and lines are numbered from 1.
    Scanning stops across the whole tree once ``limit`` results are found.
    An empty query matches every line. Files that cannot be read are skipped.
    """
    needle = query.lower()
    results: list[SearchResult] = []
    if limit < 1:
        return results

    for path in walk_files(root):
        if path.suffix != NOTE_SUFFIX:
            continue
        try:
            _match_file(path, needle, results, limit)
        except OSError as exc:
            logger.debug("Skipping unreadable note %s: %s", path, exc)
            continue
        if len(results) >= limit:
            break

    return results


__all__ = ["MAX_SEARCH_RESULTS", "search_notes"]
