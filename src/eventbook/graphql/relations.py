"""
Deferred relation handles.

An entity never carries its related entities. It carries the raw key(s) of
the relation, and the GraphQL type turns them into a ``RelationRef`` only
when the client's selection reaches that field. Each evaluation produces new
entities that hold their own raw keys, so a selection such as
``events { creator { createdEvents { creator { email } } } }`` walks as deep
as the query asks and no deeper.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import UUID

import strawberry

from ..logging import get_logger

if TYPE_CHECKING:
    from .loaders import RelationLoader
    from .types.event import Event
    from .types.user import User

logger = get_logger(__name__)


class RelationKind(Enum):
    """What a handle points at."""

    USER = "user"
    EVENTS = "events"


@dataclass(frozen=True)
class RelationRef:
    """Tagged, unevaluated reference to a related user or list of events."""

    kind: RelationKind
    keys: tuple[UUID, ...]

    @classmethod
    def to_user(cls, user_id: UUID | None) -> RelationRef:
        return cls(RelationKind.USER, (user_id,) if user_id is not None else ())

    @classmethod
    def to_events(cls, event_ids: Iterable[UUID] | None) -> RelationRef:
        return cls(RelationKind.EVENTS, tuple(event_ids or ()))

    @property
    def is_empty(self) -> bool:
        return not self.keys

    async def resolve(self, loader: RelationLoader) -> User | list[Event] | None:
        """Evaluate the handle. Evaluating twice issues the same lookup twice."""
        if self.kind is RelationKind.USER:
            if self.is_empty:
                return None
            return await loader.load_user_by_id(self.keys[0])

        if self.is_empty:
            return []
        return await loader.load_events_by_ids(self.keys)


def get_loader(info: strawberry.Info) -> RelationLoader:
    """Get the request-scoped relation loader from the GraphQL context."""
    context: dict[str, Any] = info.context
    loader = context.get("loaders")
    if loader is None:
        raise RuntimeError("Relation loader not found in GraphQL context")
    return loader


async def resolve_relation(ref: RelationRef, info: strawberry.Info) -> Any:
    """Field resolver body shared by every relation field."""
    logger.debug("Resolving relation", kind=ref.kind.value, keys=len(ref.keys))
    return await ref.resolve(get_loader(info))
