"""Attachment storage next to the daily notes.

Uploads are written to ``root/YYYY/MM/Attachment/<millis>_<name>`` and
identified afterwards only by a logical access path of the form
``/attachments/YYYY/MM/Attachment/<percent-encoded name>``. The access path
never exposes where the note tree lives on disk; an HTTP collaborator maps
the prefix back with :meth:`AttachmentManager.resolve_access_path`.
"""

from __future__ import annotations

import datetime as dt
import re
from pathlib import Path, PurePosixPath
from urllib.parse import quote, unquote

from tlog.core.console import get_logger
from tlog.core.result import AttachmentPathError, StorageError
from tlog.core.store import ATTACHMENT_DIR_NAME

logger = get_logger(__name__)

ACCESS_PREFIX = "/attachments"

_ILLEGAL_CHARS = re.compile(r'[\\/:*?"<>|]')
# Characters a URL path segment may carry unescaped besides the unreserved set.
_SEGMENT_SAFE = "$&+:=@"


def sanitize_filename(name: str) -> str:
    """Replace characters that are illegal in file names with ``_``."""
    return _ILLEGAL_CHARS.sub("_", name)


def unix_millis(moment: dt.datetime) -> int:
    seconds = int(moment.replace(microsecond=0).timestamp())
    return seconds * 1000 + moment.microsecond // 1000


class AttachmentManager:
    def __init__(self, root: Path) -> None:
        self.root = root

    def attachment_dir(self, moment: dt.datetime) -> Path:
        return self.root / f"{moment.year:04d}" / f"{moment.month:02d}" / ATTACHMENT_DIR_NAME

    def ensure_dir(self, moment: dt.datetime) -> Path:
        """Create the attachment directory for ``moment``'s month if missing."""
        path = self.attachment_dir(moment)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"Failed to create attachment directory: {exc}",
                context={"operation": "mkdir", "path": path},
            ) from exc
        return path

    def _create_exclusive(self, directory: Path, millis: int, name: str, data: bytes) -> str:
        # Two uploads of the same name in the same millisecond would collide;
        # the prefix moves forward until the exclusive create succeeds.
        while True:
            filename = f"{millis}_{name}"
            target = directory / filename
            try:
                with target.open("xb") as handle:
                    handle.write(data)
            except FileExistsError:
                logger.debug("Attachment name %s taken, retrying", filename)
                millis += 1
                continue
            except OSError as exc:
                raise StorageError(
                    f"Failed to write attachment: {exc}",
                    context={"operation": "write", "path": target},
                ) from exc
            return filename

    def save(self, data: bytes, original_name: str, now: dt.datetime | None = None) -> str:
        """Store ``data`` and return its logical access path."""
        now = now or dt.datetime.now()
        directory = self.ensure_dir(now)
        filename = self._create_exclusive(
            directory, unix_millis(now), sanitize_filename(original_name), data
        )
        logger.debug("Saved attachment %s (%d bytes)", directory / filename, len(data))
        return (
            f"{ACCESS_PREFIX}/{now.year:04d}/{now.month:02d}/{ATTACHMENT_DIR_NAME}/"
            f"{quote(filename, safe=_SEGMENT_SAFE)}"
        )

    def resolve_access_path(self, access_path: str) -> Path:
        """Map a logical access path back onto the file under ``root``.

        Raises AttachmentPathError for anything outside the attachment
        namespace or resolving outside the root.
        """
        logical = PurePosixPath(access_path)
        parts = logical.parts
        if len(parts) != 6 or parts[0] != "/" or f"/{parts[1]}" != ACCESS_PREFIX:
            raise AttachmentPathError(
                "Not an attachment access path", context={"path": access_path}
            )

        year, month, folder, encoded = parts[2:]
        filename = unquote(encoded)
        if (
            not (year.isdigit() and len(year) == 4)
            or not (month.isdigit() and len(month) == 2)
            or folder != ATTACHMENT_DIR_NAME
            or filename in {"", ".", ".."}
            or "/" in filename
            or "\\" in filename
        ):
            raise AttachmentPathError(
                "Not an attachment access path", context={"path": access_path}
            )

        root = self.root.resolve()
        target = (root / year / month / folder / filename).resolve()
        if root not in target.parents:
            raise AttachmentPathError(
                "Attachment path escapes the note root", context={"path": access_path}
            )
        return target


__all__ = [
    "ACCESS_PREFIX",
    "AttachmentManager",
    "sanitize_filename",
    "unix_millis",
]
