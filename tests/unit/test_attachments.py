from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

from tlog.core.attachments import AttachmentManager, sanitize_filename, unix_millis
from tlog.core.result import AttachmentPathError, StorageError

MOMENT = dt.datetime.fromtimestamp(1_700_000_000)


@pytest.fixture
def manager(notes_root: Path) -> AttachmentManager:
    return AttachmentManager(notes_root)


def test_sanitize_filename_replaces_illegal_characters() -> None:
    assert sanitize_filename("my:notes?.png") == "my_notes_.png"
    assert sanitize_filename('a\\b/c*d"e<f>g|h') == "a_b_c_d_e_f_g_h"
    assert sanitize_filename("plain name.txt") == "plain name.txt"


def test_unix_millis_keeps_millisecond_part() -> None:
    assert unix_millis(MOMENT) == 1_700_000_000_000
    assert unix_millis(MOMENT.replace(microsecond=123_999)) == 1_700_000_000_123


def test_save_writes_file_and_returns_access_path(manager: AttachmentManager) -> None:
    access = manager.save(b"\x89PNG", "my:notes?.png", now=MOMENT)

    assert access == f"/attachments/{MOMENT:%Y}/{MOMENT:%m}/Attachment/1700000000000_my_notes_.png"
    stored = manager.attachment_dir(MOMENT) / "1700000000000_my_notes_.png"
    assert stored.read_bytes() == b"\x89PNG"


def test_access_path_uses_november_2023(manager: AttachmentManager) -> None:
    access = manager.save(b"data", "a.txt", now=MOMENT)
    assert access.startswith("/attachments/2023/11/Attachment/")


def test_access_path_percent_encodes_name(manager: AttachmentManager) -> None:
    access = manager.save(b"data", "holiday photo #1.jpg", now=MOMENT)
    assert access.endswith("/1700000000000_holiday%20photo%20%231.jpg")


def test_same_name_same_millisecond_does_not_overwrite(manager: AttachmentManager) -> None:
    first = manager.save(b"first", "a.txt", now=MOMENT)
    second = manager.save(b"second", "a.txt", now=MOMENT)

    assert first != second
    assert second.endswith("/1700000000001_a.txt")
    directory = manager.attachment_dir(MOMENT)
    assert (directory / "1700000000000_a.txt").read_bytes() == b"first"
    assert (directory / "1700000000001_a.txt").read_bytes() == b"second"


def test_empty_data_is_still_saved(manager: AttachmentManager) -> None:
    access = manager.save(b"", "empty.bin", now=MOMENT)
    assert manager.resolve_access_path(access).read_bytes() == b""


def test_save_raises_storage_error_when_directory_is_blocked(
    manager: AttachmentManager,
) -> None:
    month = manager.attachment_dir(MOMENT).parent
    month.mkdir(parents=True)
    (month / "Attachment").write_text("not a directory", encoding="utf-8")

    with pytest.raises(StorageError):
        manager.save(b"data", "a.txt", now=MOMENT)


def test_resolve_access_path_round_trips(manager: AttachmentManager) -> None:
    access = manager.save(b"data", "holiday photo.jpg", now=MOMENT)

    resolved = manager.resolve_access_path(access)

    assert resolved.read_bytes() == b"data"
    assert resolved.name == "1700000000000_holiday photo.jpg"
    assert manager.root.resolve() in resolved.parents


@pytest.mark.parametrize(
    "access_path",
    [
        "/files/2023/11/Attachment/a.txt",
        "attachments/2023/11/Attachment/a.txt",
        "/attachments/2023/11/a.txt",
        "/attachments/2023/11/Other/a.txt",
        "/attachments/23/11/Attachment/a.txt",
        "/attachments/2023/1/Attachment/a.txt",
        "/attachments/2023/11/Attachment/..",
        "/attachments/2023/11/Attachment/..%2F..%2Fsecret",
        "/attachments/2023/11/Attachment/a.txt/extra",
    ],
)
def test_resolve_access_path_rejects_foreign_paths(
    manager: AttachmentManager, access_path: str
) -> None:
    with pytest.raises(AttachmentPathError):
        manager.resolve_access_path(access_path)


def test_resolve_access_path_is_a_value_error(manager: AttachmentManager) -> None:
    with pytest.raises(ValueError):
        manager.resolve_access_path("/etc/passwd")
