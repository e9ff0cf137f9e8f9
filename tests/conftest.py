"""
pytest configuration and shared fixtures.

Settings are read from the environment at import time, so the test
environment is pinned here before any application module is imported.
"""

import os

os.environ["APP_ENV"] = "test"
os.environ["ADMIN_PASSWORD"] = "s3cret"
os.environ["STORE_BACKEND"] = "memory"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import base64

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from repository.log_store import LogRecordStore
from repository.memory_store import MemoryRecordStore
from repository.record_store import RecordStore, StoreError

ADMIN_AUTH = ("admin", "s3cret")


def basic_auth(user: str, password: str) -> dict:
    token = base64.b64encode(f"{user}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


@pytest_asyncio.fixture(params=["memory", "log"])
async def store(request, tmp_path):
    """Each contract test runs once per in-process backend."""
    if request.param == "memory":
        s = MemoryRecordStore()
    else:
        s = await LogRecordStore(str(tmp_path / "records.log")).open()
    yield s
    await s.close()


@pytest_asyncio.fixture
async def log_store(tmp_path):
    s = await LogRecordStore(str(tmp_path / "records.log")).open()
    yield s
    await s.close()


@pytest.fixture
def client():
    """TestClient with lifespan: every test gets a fresh memory store."""
    from main import app

    with TestClient(app, headers=basic_auth(*ADMIN_AUTH)) as c:
        yield c


@pytest.fixture
def anon_client():
    from main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_auth():
    return basic_auth


class BrokenStore(RecordStore):
    """Every operation fails the way a dead disk or lost Redis would."""

    async def get(self, key):
        raise StoreError("disk on fire")

    async def put(self, key, record=None):
        raise StoreError("disk on fire")

    async def delete(self, key):
        raise StoreError("disk on fire")

    async def find(self, substring):
        raise StoreError("disk on fire")

    async def get_paused(self):
        raise StoreError("disk on fire")

    async def key_count(self):
        raise StoreError("disk on fire")


@pytest.fixture
def broken_client(client):
    from controller.controller_dependencies import get_record_store
    from main import app

    app.dependency_overrides[get_record_store] = lambda: BrokenStore()
    try:
        yield client
    finally:
        app.dependency_overrides.clear()
