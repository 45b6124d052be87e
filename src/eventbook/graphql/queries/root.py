"""
Root GraphQL query definitions
"""

import strawberry

from ..types.event import Event


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def events(self, info: strawberry.Info) -> list[Event]:
        """Get all events."""
        from ..resolvers.event import resolve_events

        return await resolve_events(info)
