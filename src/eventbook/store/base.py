"""Persistence gateway interface.

The gateway is the only component that owns durable state. Records cross it
as plain dicts keyed by column name; everything above it works with
request-scoped copies.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any
from uuid import UUID

Record = dict[str, Any]


class Collection(str, Enum):
    """Logical record collections."""

    EVENTS = "events"
    USERS = "users"


class PersistenceGateway(ABC):
    """Abstract base class for all record stores.

    Implementations raise ``StorageError`` when the underlying store fails and
    ``DuplicateError`` when an insert violates a uniqueness rule. A missing
    record is never an error: lookups return ``None`` or omit it.
    """

    @abstractmethod
    async def fetch_by_id(self, collection: Collection, id: UUID) -> Record | None:
        """Fetch one record by id."""
        pass

    @abstractmethod
    async def fetch_by_ids(self, collection: Collection, ids: Iterable[UUID]) -> list[Record]:
        """Fetch the records whose id is in ``ids``; unknown ids are skipped."""
        pass

    @abstractmethod
    async def fetch_all(self, collection: Collection) -> list[Record]:
        """Fetch every record in a collection, oldest first."""
        pass

    @abstractmethod
    async def find_one(self, collection: Collection, **criteria: Any) -> Record | None:
        """Fetch the first record whose fields equal ``criteria``."""
        pass

    @abstractmethod
    async def insert(self, collection: Collection, values: Mapping[str, Any]) -> Record:
        """Insert a record and return it with its generated id."""
        pass

    @abstractmethod
    async def update(
        self, collection: Collection, id: UUID, values: Mapping[str, Any]
    ) -> Record | None:
        """Overwrite the given fields of a record; ``None`` if it does not exist."""
        pass

    @abstractmethod
    async def delete(self, collection: Collection, id: UUID) -> bool:
        """Delete a record by id; ``False`` if it did not exist."""
        pass
