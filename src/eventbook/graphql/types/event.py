"""
Event GraphQL type definitions
"""

from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

from ..relations import RelationRef

if TYPE_CHECKING:
    from .user import User


@strawberry.type
class Event:
    """Event type for GraphQL API."""

    id: strawberry.ID
    title: str
    description: str
    price: float
    date: str
    creator_id: strawberry.Private[UUID | None]

    @property
    def creator_ref(self) -> RelationRef:
        return RelationRef.to_user(self.creator_id)

    @strawberry.field
    async def creator(
        self, info: strawberry.Info
    ) -> Annotated["User", strawberry.lazy(".user")] | None:  # noqa: E501
        """Get the user who created this event."""
        from ..relations import resolve_relation

        return await resolve_relation(self.creator_ref, info)
