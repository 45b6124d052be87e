"""Per-request context passed to every GraphQL resolver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from .config import settings
from .store import PersistenceGateway, get_gateway


@dataclass(frozen=True)
class Caller:
    """Identity on whose behalf a request runs.

    There is no authentication yet: the HTTP layer fills ``user_id`` from the
    configured default owner. Mutations read it from here and nowhere else.
    """

    user_id: UUID | None = None

    @property
    def is_identified(self) -> bool:
        return self.user_id is not None


def default_caller() -> Caller:
    return Caller(user_id=settings.default_owner_id)


def build_context(
    request: Any = None,
    gateway: PersistenceGateway | None = None,
    caller: Caller | None = None,
    loader_cache: bool | None = None,
) -> dict[str, Any]:
    """Build the resolver context: store, request-scoped loader and caller identity."""
    from .graphql.loaders import RelationLoader

    gateway = gateway or get_gateway()
    cache = settings.loader_cache if loader_cache is None else loader_cache
    return {
        "request": request,
        "gateway": gateway,
        "loaders": RelationLoader(gateway, cache=cache),
        "caller": caller or default_caller(),
    }
