from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from newsboard.access import Caller, StaticTokenVerifier
from newsboard.api.deps import get_verifier, store_dependency
from newsboard.db import crud
from newsboard.db.store import MemoryItemStore
from newsboard.main import app

ADMIN_TOKEN = "admin-secret"
READER_TOKEN = "reader-secret"

ADMIN = Caller(name="admin", is_admin=True)
READER = Caller(name="doug", is_admin=False)


@pytest.fixture
def store():
    return MemoryItemStore()


@pytest.fixture
def add_item(store):
    """Create an item through crud and return it."""

    def _add(title="T1", summary="S1", link="https://x"):
        return asyncio.run(crud.create_news(store, ADMIN, title, summary, link))

    return _add


@pytest.fixture
def client(store):
    verifier = StaticTokenVerifier({ADMIN_TOKEN: ADMIN, READER_TOKEN: READER})
    app.dependency_overrides[store_dependency] = lambda: store
    app.dependency_overrides[get_verifier] = lambda: verifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def reader_headers():
    return {"Authorization": f"Bearer {READER_TOKEN}"}
