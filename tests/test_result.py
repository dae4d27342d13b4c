"""Unit tests for the Result container used on the collection error channel."""

from __future__ import annotations

import pytest

from envsnap.core.result import Err, Ok, Result, err, ok


def test_ok_unwrap() -> None:
    r: Result[int, str] = ok(10)
    assert r.is_ok() and not r.is_err()
    assert r.unwrap() == 10


def test_err_unwrap_err() -> None:
    r: Result[int, str] = err("boom")
    assert r.is_err() and not r.is_ok()
    assert isinstance(r, Err) and r.unwrap_err() == "boom"


def test_unwrap_reraises_exception_errors() -> None:
    r: Result[int, Exception] = err(KeyError("section"))
    with pytest.raises(KeyError):
        r.unwrap()


def test_unwrap_plain_error_raises_runtime_error() -> None:
    with pytest.raises(RuntimeError):
        err("nope").unwrap()


def test_unwrap_err_on_ok_raises() -> None:
    assert isinstance(ok(1), Ok)
    with pytest.raises(RuntimeError):
        ok(1).unwrap_err()
