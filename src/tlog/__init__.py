"""tlog - quick-capture daily notes kept as a date-sharded plain-text log.

This package provides the note store, line codec, full-text search,
attachment manager and command registry behind the `tlog` command-line tool.

Exports:
    __version__: Package version string.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.3.0"
