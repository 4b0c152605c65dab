"""
Global pytest fixtures for the curtail test suite.

Responsibilities:
    - Provide isolated in-memory Storage, LinkManager and LinkService fixtures
    - Provide a FastAPI TestClient built by the app factory around the storage fixture
    - Provide small test doubles: a scripted code generator and failing stores

Why an app factory?
    Using `create_app(storage=...)` gives each test its own store, so no state
    leaks between tests and the HTTP tests can inspect the same store directly.
"""

import uuid
from types import SimpleNamespace
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from main import create_app
from curtail_platform.manager.link_manager import LinkManager
from curtail_platform.models import Link
from curtail_platform.service import LinkService
from curtail_platform.storage.base import BaseStorage, StorageError
from curtail_platform.storage.storage import Storage


class ScriptedGenerator:
    """
    Generator double: returns the scripted short codes in order, then
    `fallback` codes numbered from 0. Each call gets a fresh uuid4 record id.
    """

    def __init__(self, codes: List[str], fallback: str = "fresh"):
        self.codes = list(codes)
        self.fallback = fallback
        self.calls = 0

    def generate(self):
        self.calls += 1
        if self.codes:
            code = self.codes.pop(0)
        else:
            code = f"{self.fallback}{self.calls}"
        return str(uuid.uuid4()), code


class FailingStorage(BaseStorage):
    """Store double whose selected operations raise StorageError."""

    def __init__(self, fail_on=(), count: int = 0, message: str = "connection reset by peer (host=db-internal)"):
        self.fail_on = set(fail_on)
        self.count = count
        self.message = message
        self.calls: List[str] = []

    def _maybe_fail(self, op: str) -> None:
        self.calls.append(op)
        if op in self.fail_on:
            raise StorageError(self.message)

    def count_links(self) -> int:
        self._maybe_fail("count")
        return self.count

    def insert_link(self, link: Link) -> None:
        self._maybe_fail("insert")

    def get_link(self, short_code: str) -> Optional[Link]:
        self._maybe_fail("get")
        return None

    def list_links(self) -> List[Link]:
        self._maybe_fail("list")
        return []

    def bootstrap(self) -> None:
        self._maybe_fail("bootstrap")


def seed_links(storage: BaseStorage, n: int) -> List[Link]:
    """Insert n links with codes that can never clash with Base58 codes."""
    links = []
    for i in range(n):
        link = Link(record_id=str(uuid.uuid4()), short_code=f"seed-{i}", target=f"https://seed.example/{i}")
        storage.insert_link(link)
        links.append(link)
    return links


@pytest.fixture
def conf():
    """Settings object for the in-memory backend."""
    return SimpleNamespace(
        STORAGE_BACKEND="memory",
        DB_DSN="",
        LISTEN_ON="127.0.0.1:3000",
        LOG_LEVEL="INFO",
    )


@pytest.fixture
def storage() -> Storage:
    """Fresh in-memory Storage."""
    return Storage()


@pytest.fixture
def manager(storage: Storage) -> LinkManager:
    """LinkManager wired to the storage fixture with the real generator."""
    return LinkManager(storage=storage)


@pytest.fixture
def service(storage: Storage) -> LinkService:
    return LinkService(storage)


@pytest.fixture
def client(storage: Storage, conf) -> TestClient:
    """
    Fresh TestClient around an app serving the storage fixture.

    Entering the client runs the app lifespan, i.e. the startup phase.
    """
    with TestClient(create_app(storage=storage, conf=conf)) as c:
        yield c
