"""
User GraphQL type definitions
"""

from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

from ..relations import RelationRef

if TYPE_CHECKING:
    from .event import Event


@strawberry.type
class User:
    """User type for GraphQL API.

    The stored password hash is never copied onto this type; ``password`` is
    declared only so clients may select it, and always resolves to null.
    """

    id: strawberry.ID
    email: str
    created_event_ids: strawberry.Private[list[UUID]]

    @property
    def created_events_ref(self) -> RelationRef:
        return RelationRef.to_events(self.created_event_ids)

    @strawberry.field
    def password(self) -> str | None:
        return None

    @strawberry.field
    async def created_events(
        self, info: strawberry.Info
    ) -> list[Annotated["Event", strawberry.lazy(".event")]] | None:  # noqa: E501
        """Get events created by this user, in creation order."""
        from ..relations import resolve_relation

        return await resolve_relation(self.created_events_ref, info)
