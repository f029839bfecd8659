"""Tests for the filesystem paste store."""

from pathlib import Path

import pytest

from rbin.ids import IdValidator
from rbin.models import Outcome
from rbin.storage import PasteStore


def test_write_then_read_returns_identical_bytes(store):
    content = b"line one\r\nline two\x00\xff\xfe binary tail"
    assert store.write("aZ3kq9", content).outcome is Outcome.OK
    result = store.read("aZ3kq9")
    assert result.ok
    assert result.content == content


def test_paste_is_stored_as_id_dot_txt(store, paste_dir):
    store.write("abc123", b"hello world")
    assert (paste_dir / "abc123.txt").read_bytes() == b"hello world"
    assert sorted(p.name for p in paste_dir.iterdir()) == ["abc123.txt"]


def test_read_unknown_id_is_not_found(store):
    result = store.read("000000")
    assert result.outcome is Outcome.NOT_FOUND
    assert result.content is None


def test_existing_paste_is_never_overwritten(store, paste_dir):
    store.write("abc123", b"first")
    result = store.write("abc123", b"second")
    assert result.outcome is Outcome.ALREADY_EXISTS
    assert store.read("abc123").content == b"first"
    # the temporary file of the losing write is cleaned up
    assert [p.name for p in paste_dir.iterdir()] == ["abc123.txt"]


def test_distinct_pastes_do_not_interfere(store):
    store.write("aaaaaa", b"alpha")
    store.write("bbbbbb", b"beta")
    assert store.read("aaaaaa").content == b"alpha"
    assert store.read("bbbbbb").content == b"beta"


def test_read_of_unreadable_entry_is_io_failure(store, paste_dir):
    (paste_dir / "abc123.txt").mkdir()
    result = store.read("abc123")
    assert result.outcome is Outcome.IO_FAILURE
    assert result.error


def test_write_into_missing_directory_is_io_failure(tmp_path):
    store = PasteStore(tmp_path / "does-not-exist", IdValidator(6))
    result = store.write("abc123", b"data")
    assert result.outcome is Outcome.IO_FAILURE
    assert not (tmp_path / "does-not-exist").exists()


@pytest.mark.parametrize("bad_id", ["../etc", "../../etc/passwd", "ab cd!", "abc12", "abc1234"])
def test_malformed_ids_never_touch_the_filesystem(store, monkeypatch, bad_id):
    def fail(*args, **kwargs):
        raise AssertionError("filesystem accessed for a malformed id")

    monkeypatch.setattr(Path, "read_bytes", fail)
    monkeypatch.setattr("rbin.storage.tempfile.mkstemp", fail)

    assert store.read(bad_id).outcome is Outcome.INVALID_ID
    assert store.write(bad_id, b"data").outcome is Outcome.INVALID_ID


def test_ensure_root_creates_nested_directories(tmp_path):
    root = tmp_path / "a" / "b" / "pastes"
    store = PasteStore(root, IdValidator(6))
    assert not store.is_writable()
    store.ensure_root()
    assert root.is_dir()
    assert store.is_writable()
