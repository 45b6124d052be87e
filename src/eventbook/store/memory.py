"""In-process record store for development and tests."""

import asyncio
import copy
import uuid
from collections.abc import Iterable, Mapping
from typing import Any
from uuid import UUID

from ..errors import DuplicateError
from ..logging import get_logger
from .base import Collection, PersistenceGateway, Record

logger = get_logger(__name__)

# Mirrors the unique constraints declared on the ORM models
UNIQUE_FIELDS: dict[Collection, tuple[str, ...]] = {
    Collection.USERS: ("email",),
}

DEFAULTS: dict[Collection, dict[str, Any]] = {
    Collection.USERS: {"created_event_ids": []},
}


class InMemoryGateway(PersistenceGateway):
    """Dict-backed store. Every call yields to the event loop once, like a round-trip."""

    def __init__(self) -> None:
        self._collections: dict[Collection, dict[UUID, Record]] = {
            collection: {} for collection in Collection
        }

    def count(self, collection: Collection) -> int:
        return len(self._collections[collection])

    async def fetch_by_id(self, collection: Collection, id: UUID) -> Record | None:
        await asyncio.sleep(0)
        record = self._collections[collection].get(id)
        return copy.deepcopy(record) if record is not None else None

    async def fetch_by_ids(self, collection: Collection, ids: Iterable[UUID]) -> list[Record]:
        await asyncio.sleep(0)
        wanted = set(ids)
        return [
            copy.deepcopy(record)
            for key, record in self._collections[collection].items()
            if key in wanted
        ]

    async def fetch_all(self, collection: Collection) -> list[Record]:
        await asyncio.sleep(0)
        return [copy.deepcopy(record) for record in self._collections[collection].values()]

    async def find_one(self, collection: Collection, **criteria: Any) -> Record | None:
        await asyncio.sleep(0)
        for record in self._collections[collection].values():
            if all(record.get(field) == value for field, value in criteria.items()):
                return copy.deepcopy(record)
        return None

    async def insert(self, collection: Collection, values: Mapping[str, Any]) -> Record:
        await asyncio.sleep(0)
        records = self._collections[collection]
        for field in UNIQUE_FIELDS.get(collection, ()):
            if any(existing.get(field) == values.get(field) for existing in records.values()):
                raise DuplicateError()

        record = copy.deepcopy(DEFAULTS.get(collection, {}))
        record.update(copy.deepcopy(dict(values)))
        record["id"] = uuid.uuid4()
        records[record["id"]] = record
        logger.debug("Record inserted", collection=collection.value, id=str(record["id"]))
        return copy.deepcopy(record)

    async def update(
        self, collection: Collection, id: UUID, values: Mapping[str, Any]
    ) -> Record | None:
        await asyncio.sleep(0)
        record = self._collections[collection].get(id)
        if record is None:
            return None
        record.update(copy.deepcopy(dict(values)))
        return copy.deepcopy(record)

    async def delete(self, collection: Collection, id: UUID) -> bool:
        await asyncio.sleep(0)
        return self._collections[collection].pop(id, None) is not None
