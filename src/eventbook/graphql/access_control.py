"""
Shared context access for GraphQL resolvers
"""

from typing import TYPE_CHECKING, Any
from uuid import UUID

import strawberry

from ..errors import AuthorizationError
from ..logging import get_logger

if TYPE_CHECKING:
    from ..context import Caller
    from ..store import PersistenceGateway

logger = get_logger(__name__)


def get_gateway_from_info(info: strawberry.Info) -> "PersistenceGateway":
    """Get the record store from the GraphQL context."""
    context: dict[str, Any] = info.context
    gateway = context.get("gateway")
    if gateway is None:
        raise RuntimeError("Record store not found in GraphQL context")
    return gateway


def get_caller_from_info(info: strawberry.Info) -> "Caller | None":
    """Get the caller identity from the GraphQL context, if any."""
    context: dict[str, Any] = info.context
    return context.get("caller")


def require_caller_id(info: strawberry.Info, operation: str) -> UUID:
    """
    Return the caller's user id or fail the operation.

    Raises:
        AuthorizationError: If the request carries no caller identity
    """
    caller = get_caller_from_info(info)
    if caller is None or not caller.is_identified:
        logger.info("Operation rejected without caller identity", operation=operation)
        raise AuthorizationError(f"{operation} requires a caller identity")
    return caller.user_id
