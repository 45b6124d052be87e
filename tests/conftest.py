"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections import Counter
from collections.abc import Awaitable, Callable, Generator, Iterable, Mapping
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

import pytest

from eventbook.config import settings
from eventbook.context import Caller, build_context
from eventbook.errors import StorageError
from eventbook.store import Collection, InMemoryGateway, Record, set_gateway


class CountingGateway(InMemoryGateway):
    """In-memory store that counts every call and can be told to fail some of them."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: Counter[tuple[str, Collection]] = Counter()
        self.fail_on: set[tuple[str, Collection]] = set()

    def _record(self, operation: str, collection: Collection) -> None:
        self.calls[(operation, collection)] += 1
        if (operation, collection) in self.fail_on:
            raise StorageError(f"Could not {operation} {collection.value}")

    def fetches(self, collection: Collection) -> int:
        """Number of read round-trips against a collection."""
        return sum(
            count
            for (operation, target), count in self.calls.items()
            if target is collection and operation.startswith(("fetch", "find"))
        )

    def reset_calls(self) -> None:
        self.calls.clear()

    async def fetch_by_id(self, collection: Collection, id: UUID) -> Record | None:
        self._record("fetch_by_id", collection)
        return await super().fetch_by_id(collection, id)

    async def fetch_by_ids(self, collection: Collection, ids: Iterable[UUID]) -> list[Record]:
        self._record("fetch_by_ids", collection)
        return await super().fetch_by_ids(collection, ids)

    async def fetch_all(self, collection: Collection) -> list[Record]:
        self._record("fetch_all", collection)
        return await super().fetch_all(collection)

    async def find_one(self, collection: Collection, **criteria: Any) -> Record | None:
        self._record("find_one", collection)
        return await super().find_one(collection, **criteria)

    async def insert(self, collection: Collection, values: Mapping[str, Any]) -> Record:
        self._record("insert", collection)
        return await super().insert(collection, values)

    async def update(
        self, collection: Collection, id: UUID, values: Mapping[str, Any]
    ) -> Record | None:
        self._record("update", collection)
        return await super().update(collection, id, values)

    async def delete(self, collection: Collection, id: UUID) -> bool:
        self._record("delete", collection)
        return await super().delete(collection, id)


@pytest.fixture
def gateway() -> Generator[CountingGateway, None, None]:
    """Fresh counting store, also installed as the process-wide gateway."""
    store = CountingGateway()
    set_gateway(store)
    yield store
    set_gateway(None)


@pytest.fixture
def make_user(gateway: CountingGateway) -> Callable[..., Awaitable[Record]]:
    """Insert a user record directly into the store."""

    async def _make_user(
        email: str = "owner@example.com", created_event_ids: list[UUID] | None = None
    ) -> Record:
        record = await gateway.insert(
            Collection.USERS,
            {
                "email": email,
                "password_hash": "pbkdf2_sha256$1$salt$digest",
                "created_event_ids": list(created_event_ids or []),
            },
        )
        gateway.reset_calls()
        return record

    return _make_user


@pytest.fixture
def make_event(gateway: CountingGateway) -> Callable[..., Awaitable[Record]]:
    """Insert an event record (and link it to its creator if the creator exists)."""

    async def _make_event(
        creator_id: UUID | None,
        title: str = "Talk",
        price: str = "10.50",
        date: datetime | None = None,
    ) -> Record:
        record = await gateway.insert(
            Collection.EVENTS,
            {
                "title": title,
                "description": f"{title} description",
                "price": Decimal(price),
                "date": date or datetime(2020, 1, 1, tzinfo=UTC),
                "creator_id": creator_id,
            },
        )
        if creator_id is not None:
            owner = await gateway.fetch_by_id(Collection.USERS, creator_id)
            if owner is not None:
                await gateway.update(
                    Collection.USERS,
                    creator_id,
                    {"created_event_ids": [*owner["created_event_ids"], record["id"]]},
                )
        gateway.reset_calls()
        return record

    return _make_event


@pytest.fixture
def make_context(gateway: CountingGateway) -> Callable[..., dict[str, Any]]:
    """Build a fresh resolver context (new loader per call, like one request)."""

    def _make_context(caller_id: UUID | None = None, cache: bool = False) -> dict[str, Any]:
        return build_context(gateway=gateway, caller=Caller(user_id=caller_id), loader_cache=cache)

    return _make_context


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the key derivation cheap in tests."""
    monkeypatch.setattr(settings, "password_hash_iterations", 1_000)


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
