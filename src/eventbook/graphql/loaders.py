"""
Relation loaders: typed reads over the persistence gateway.

A ``RelationLoader`` is created per request. Without caching every relation
handle evaluation issues its own fetch; with caching, lookups go through
strawberry ``DataLoader`` instances keyed by id so a response never fetches
the same user or event twice.
"""

from collections.abc import Iterable
from datetime import UTC, datetime
from uuid import UUID

import strawberry
from strawberry.dataloader import DataLoader

from ..logging import get_logger
from ..store import Collection, PersistenceGateway, Record
from .types.event import Event
from .types.user import User

logger = get_logger(__name__)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with milliseconds: 2020-01-01T00:00:00.000Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def event_from_record(record: Record) -> Event:
    """Map a raw events row onto the Event type."""
    return Event(
        id=strawberry.ID(str(record["id"])),
        title=record["title"],
        description=record["description"],
        price=float(record["price"]),
        date=format_timestamp(record["date"]),
        creator_id=record.get("creator_id"),
    )


def user_from_record(record: Record) -> User:
    """Map a raw users row onto the User type. The password hash is not carried over."""
    return User(
        id=strawberry.ID(str(record["id"])),
        email=record["email"],
        created_event_ids=list(record.get("created_event_ids") or []),
    )


class RelationLoader:
    """Request-scoped read operations for events and users."""

    def __init__(self, gateway: PersistenceGateway, cache: bool = False):
        self.gateway = gateway
        self.cache = cache
        self.user_loader: DataLoader[UUID, User | None] | None = None
        self.event_loader: DataLoader[UUID, Event | None] | None = None
        if cache:
            self.user_loader = DataLoader(load_fn=self._batch_users)
            self.event_loader = DataLoader(load_fn=self._batch_events)

    async def _batch_users(self, keys: list[UUID]) -> list[User | None]:
        records = await self.gateway.fetch_by_ids(Collection.USERS, keys)
        users = {record["id"]: user_from_record(record) for record in records}
        return [users.get(key) for key in keys]

    async def _batch_events(self, keys: list[UUID]) -> list[Event | None]:
        records = await self.gateway.fetch_by_ids(Collection.EVENTS, keys)
        events = {record["id"]: event_from_record(record) for record in records}
        return [events.get(key) for key in keys]

    async def load_user_by_id(self, user_id: UUID) -> User | None:
        """Load one user; ``None`` when no record matches."""
        if self.user_loader is not None:
            return await self.user_loader.load(user_id)

        record = await self.gateway.fetch_by_id(Collection.USERS, user_id)
        if record is None:
            logger.info("User not found", user_id=str(user_id))
            return None
        return user_from_record(record)

    async def load_events_by_ids(self, event_ids: Iterable[UUID]) -> list[Event]:
        """Load the events with the given ids, in the given order, skipping unknown ids."""
        keys = list(event_ids)
        if not keys:
            return []

        if self.event_loader is not None:
            loaded = await self.event_loader.load_many(keys)
            return [event for event in loaded if event is not None]

        records = await self.gateway.fetch_by_ids(Collection.EVENTS, keys)
        by_id = {record["id"]: record for record in records}
        return [event_from_record(by_id[key]) for key in keys if key in by_id]

    async def load_all_events(self) -> list[Event]:
        records = await self.gateway.fetch_all(Collection.EVENTS)
        events = [event_from_record(record) for record in records]
        if self.event_loader is not None:
            for event in events:
                self.event_loader.prime(UUID(event.id), event)
        return events

    async def find_user_by_email(self, email: str) -> User | None:
        record = await self.gateway.find_one(Collection.USERS, email=email)
        return user_from_record(record) if record is not None else None

    def forget_user(self, user_id: UUID) -> None:
        """Drop a cached user after it has been written."""
        if self.user_loader is not None:
            self.user_loader.clear(user_id)
