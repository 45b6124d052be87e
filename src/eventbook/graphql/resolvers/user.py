from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...config import settings
from ...errors import DuplicateError
from ...logging import get_logger
from ...passwords import hash_password_async
from ...store import Collection
from ..access_control import get_gateway_from_info
from ..inputs import UserPayload, parse_input
from ..loaders import user_from_record
from ..relations import get_loader

if TYPE_CHECKING:
    from ..mutations.root import UserInput
    from ..types.user import User

logger = get_logger(__name__)


async def create_user(info: strawberry.Info, input: UserInput) -> User:
    """
    Register a user after checking the email is not taken.

    The check and the insert are separate round-trips; a concurrent duplicate
    that slips between them is rejected by the store's unique constraint and
    surfaces as the same DuplicateError.

    Raises:
        ValidationError: Email or password missing or blank
        DuplicateError: Email already registered
        StorageError: A store round-trip failed
    """
    payload = parse_input(UserPayload, input)

    existing = await get_loader(info).find_user_by_email(payload.email)
    if existing is not None:
        logger.info("Rejected duplicate registration", user_id=existing.id)
        raise DuplicateError()

    password_hash = await hash_password_async(
        payload.password, settings.password_hash_iterations
    )

    record = await get_gateway_from_info(info).insert(
        Collection.USERS,
        {
            "email": payload.email,
            "password_hash": password_hash,
            "created_event_ids": [],
        },
    )
    logger.info("User created", user_id=str(record["id"]))
    return user_from_record(record)
