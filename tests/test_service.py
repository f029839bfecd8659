"""Tests for the paste submission and retrieval flow."""

import asyncio
from pathlib import Path

from rbin.ids import IdGenerator, IdValidator
from rbin.models import Outcome
from rbin.service import PasteService


class ScriptedGenerator(IdGenerator):
    """Returns a fixed sequence of ids."""

    def __init__(self, ids):
        super().__init__(6)
        self.ids = list(ids)

    def generate(self) -> str:
        return self.ids.pop(0)


def make_service(store, ids=None, attempts=5):
    generator = ScriptedGenerator(ids) if ids is not None else IdGenerator(6)
    return PasteService(store, generator, IdValidator(6), write_attempts=attempts)


def test_create_then_get_round_trip(store):
    service = make_service(store)
    created = asyncio.run(service.create_paste(b"hello world"))
    assert created.ok
    assert len(created.paste_id) == 6

    fetched = asyncio.run(service.get_paste(created.paste_id))
    assert fetched.ok
    assert fetched.content == b"hello world"


def test_empty_content_is_rejected_without_writing(store, paste_dir):
    result = asyncio.run(make_service(store).create_paste(b""))
    assert result.outcome is Outcome.EMPTY_CONTENT
    assert list(paste_dir.iterdir()) == []


def test_missing_content_is_reported(store, paste_dir):
    result = asyncio.run(make_service(store).create_paste(None))
    assert result.outcome is Outcome.MISSING_FIELD
    assert list(paste_dir.iterdir()) == []


def test_taken_id_triggers_retry_with_fresh_id(store):
    store.write("aaaaaa", b"original")
    service = make_service(store, ids=["aaaaaa", "aaaaaa", "bbbbbb"])

    result = asyncio.run(service.create_paste(b"newcomer"))

    assert result.ok
    assert result.paste_id == "bbbbbb"
    assert store.read("aaaaaa").content == b"original"
    assert store.read("bbbbbb").content == b"newcomer"


def test_exhausted_retries_report_io_failure(store):
    store.write("aaaaaa", b"original")
    service = make_service(store, ids=["aaaaaa"] * 3, attempts=3)

    result = asyncio.run(service.create_paste(b"newcomer"))

    assert result.outcome is Outcome.IO_FAILURE
    assert store.read("aaaaaa").content == b"original"


def test_get_rejects_malformed_id_before_storage(store, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("filesystem accessed for a malformed id")

    monkeypatch.setattr(Path, "read_bytes", fail)
    result = asyncio.run(make_service(store).get_paste("aZ3kq9X"))
    assert result.outcome is Outcome.INVALID_ID


def test_get_unknown_id_is_not_found(store):
    result = asyncio.run(make_service(store).get_paste("000000"))
    assert result.outcome is Outcome.NOT_FOUND
