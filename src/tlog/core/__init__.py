"""Core note-keeping infrastructure for tlog.

This package contains:
    - codec: Entry line encoding and decoding
    - store: Date-sharded note store
    - search: Linear full-text search over the note tree
    - attachments: Month-sharded attachment storage
    - registry: Command palette registry
    - config, console, result: Configuration, logging and error handling
"""

from __future__ import annotations

from . import config, console

__all__ = ["config", "console"]
