"""Shared fixtures: an rbin app rooted in a per-test paste directory."""

import pytest
from fastapi.testclient import TestClient

from rbin.config import Settings
from rbin.ids import IdValidator
from rbin.main import create_app
from rbin.storage import PasteStore


@pytest.fixture
def paste_dir(tmp_path):
    return tmp_path / "pastes"


@pytest.fixture
def settings(paste_dir):
    return Settings(paste_dir=paste_dir)


@pytest.fixture
def store(paste_dir):
    paste_store = PasteStore(paste_dir, IdValidator(6))
    paste_store.ensure_root()
    return paste_store


@pytest.fixture
def client(settings):
    # Entering the client runs the lifespan startup, which creates paste_dir.
    with TestClient(create_app(settings)) as test_client:
        yield test_client
