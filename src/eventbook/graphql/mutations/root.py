"""
Root GraphQL mutation definitions
"""

from typing import Any, NewType

import strawberry

from ..types.event import Event
from ..types.user import User


def _parse_price(value: Any) -> float | int | str:
    # Numeric strings pass through; EventPayload does the numeric parsing
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"Price cannot represent value: {value!r}")
    return value


Price = strawberry.scalar(
    NewType("Price", float),
    name="Price",
    description="Event price: a number or a numeric string such as \"10.5\".",
    serialize=float,
    parse_value=_parse_price,
)


# Input types for mutations
@strawberry.input
class EventInput:
    """Input for creating a new event."""

    title: str
    description: str
    price: Price  # type: ignore[reportInvalidTypeForm]
    date: str


@strawberry.input
class UserInput:
    """Input for creating a new user."""

    email: str
    password: str


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    @strawberry.mutation(name="createEvent")
    async def create_event(self, info: strawberry.Info, event_input: EventInput) -> Event | None:
        """Create an event owned by the caller and link it to the caller's user."""
        from ..resolvers.event import create_event

        return await create_event(info, event_input)

    @strawberry.mutation(name="createUser")
    async def create_user(self, info: strawberry.Info, user_input: UserInput) -> User | None:
        """Register a user; the password is stored only as a salted hash."""
        from ..resolvers.user import create_user

        return await create_user(info, user_input)
