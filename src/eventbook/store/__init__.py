"""Record stores behind the persistence gateway interface."""

from ..logging import get_logger
from .base import Collection, PersistenceGateway, Record
from .memory import InMemoryGateway

logger = get_logger(__name__)

_gateway: PersistenceGateway | None = None


def create_gateway(backend: str) -> PersistenceGateway:
    """Create a gateway for the named backend ('sql' or 'memory')."""
    if backend == "memory":
        return InMemoryGateway()
    if backend == "sql":
        from .sql import SqlGateway

        return SqlGateway()
    raise ValueError(f"Unknown store backend: {backend}")


def get_gateway() -> PersistenceGateway:
    """Get the process-wide gateway, creating it from settings on first use."""
    global _gateway

    if _gateway is None:
        from ..config import settings

        _gateway = create_gateway(settings.store_backend)
        logger.info("Record store configured", backend=settings.store_backend)

    return _gateway


def set_gateway(gateway: PersistenceGateway | None) -> None:
    """Replace the process-wide gateway (tests, embedding)."""
    global _gateway
    _gateway = gateway


__all__ = [
    "Collection",
    "InMemoryGateway",
    "PersistenceGateway",
    "Record",
    "create_gateway",
    "get_gateway",
    "set_gateway",
]
