from __future__ import annotations

from tlog.core.result import (
    Err,
    InvalidDateError,
    NotFoundError,
    NoteNotFoundError,
    Ok,
    StorageError,
    TLogError,
    UsageError,
)


def test_ok_and_err_predicates() -> None:
    assert Ok(2).is_ok()
    assert not Ok(2).is_err()
    assert Err(NoteNotFoundError("missing")).is_err()
    assert not Err(NoteNotFoundError("missing")).is_ok()


def test_results_match_by_shape() -> None:
    match Err(NoteNotFoundError("missing")):
        case Ok(_):
            raise AssertionError("expected Err")
        case Err(err):
            assert err.message == "missing"


def test_error_string_includes_context() -> None:
    exc = StorageError("Failed to write note", context={"operation": "append"})
    assert str(exc) == "Failed to write note [operation=append]"
    assert str(TLogError("plain")) == "plain"
    assert TLogError("plain").context == {}


def test_hierarchy() -> None:
    assert issubclass(NoteNotFoundError, NotFoundError)
    assert issubclass(InvalidDateError, ValueError)
    assert issubclass(UsageError, TLogError)
    assert issubclass(StorageError, TLogError)
