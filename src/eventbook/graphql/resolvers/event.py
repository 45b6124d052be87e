from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ...errors import NotFoundError, StorageError
from ...logging import get_logger
from ...store import Collection, PersistenceGateway
from ..access_control import get_gateway_from_info, require_caller_id
from ..inputs import EventPayload, parse_input
from ..loaders import event_from_record
from ..relations import get_loader

if TYPE_CHECKING:
    from ..mutations.root import EventInput
    from ..types.event import Event

logger = get_logger(__name__)


# Query resolvers
async def resolve_events(info: strawberry.Info) -> list[Event]:
    """Resolve every stored event. Creators are left as unevaluated handles."""
    return await get_loader(info).load_all_events()


# Mutation resolvers
async def create_event(info: strawberry.Info, input: EventInput) -> Event:
    """
    Create an event owned by the caller and append it to the owner's events.

    Steps, with no transaction spanning them:
    1. normalize input (nothing is written on failure)
    2. insert the event with creator_id set to the caller
    3. load the owner; if absent, delete the event again and fail
    4. append the event id to the owner's created_event_ids
       (on storage failure, delete the event again and re-raise)

    Raises:
        ValidationError: Input does not normalize
        AuthorizationError: Request has no caller identity
        NotFoundError: Caller does not match a stored user
        StorageError: A store round-trip failed
    """
    payload = parse_input(EventPayload, input)
    owner_id = require_caller_id(info, "createEvent")

    gateway = get_gateway_from_info(info)
    loader = get_loader(info)

    record = await gateway.insert(
        Collection.EVENTS,
        {
            "title": payload.title,
            "description": payload.description,
            "price": Decimal(str(payload.price)),
            "date": payload.date,
            "creator_id": owner_id,
        },
    )
    created = event_from_record(record)
    event_id: UUID = record["id"]
    logger.info("Event inserted", event_id=str(event_id), owner_id=str(owner_id))

    owner = await loader.load_user_by_id(owner_id)
    if owner is None:
        await _remove_orphaned_event(gateway, event_id)
        raise NotFoundError("User", owner_id)

    try:
        updated = await gateway.update(
            Collection.USERS,
            owner_id,
            {"created_event_ids": [*owner.created_event_ids, event_id]},
        )
    except StorageError:
        await _remove_orphaned_event(gateway, event_id)
        raise
    finally:
        loader.forget_user(owner_id)

    if updated is None:
        # Owner disappeared between the read and the write
        await _remove_orphaned_event(gateway, event_id)
        raise NotFoundError("User", owner_id)

    logger.info("Event linked to owner", event_id=str(event_id), owner_id=str(owner_id))
    return created


async def _remove_orphaned_event(gateway: PersistenceGateway, event_id: UUID) -> None:
    """Compensate a failed owner link by deleting the event written before it."""
    try:
        deleted = await gateway.delete(Collection.EVENTS, event_id)
    except StorageError as e:
        logger.error(
            "Failed to remove orphaned event; it stays unlinked",
            event_id=str(event_id),
            error=str(e),
        )
        return

    logger.warning("Removed orphaned event", event_id=str(event_id), deleted=deleted)
