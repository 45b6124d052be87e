"""PostgreSQL record store built on async SQLAlchemy."""

from collections.abc import AsyncGenerator, Iterable, Mapping
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.inspection import inspect

from ..database.connection import get_async_session
from ..dbmodels import Base, Events, Users
from ..errors import DuplicateError, StorageError
from ..logging import get_logger
from .base import Collection, PersistenceGateway, Record

logger = get_logger(__name__)

MODELS: dict[Collection, type[Base]] = {
    Collection.EVENTS: Events,
    Collection.USERS: Users,
}


def to_record(row: Base) -> Record:
    """Copy the mapped column values of an ORM row into a plain dict."""
    return {attr.key: getattr(row, attr.key) for attr in inspect(row).mapper.column_attrs}


def _is_unique_violation(error: IntegrityError) -> bool:
    if getattr(error.orig, "sqlstate", None) == "23505":
        return True
    message = str(error.orig).lower()
    return "unique" in message or "duplicate key" in message


class SqlGateway(PersistenceGateway):
    """Store backed by the shared async session pool, one session per operation."""

    @asynccontextmanager
    async def _session(
        self, operation: str, collection: Collection
    ) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with get_async_session() as session:
                yield session
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise DuplicateError() from e
            logger.error(
                "Integrity error", operation=operation, collection=collection.value, error=str(e)
            )
            raise StorageError(f"Could not {operation} {collection.value}") from e
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "Storage operation failed",
                operation=operation,
                collection=collection.value,
                error=str(e),
            )
            raise StorageError(f"Could not {operation} {collection.value}") from e

    async def fetch_by_id(self, collection: Collection, id: UUID) -> Record | None:
        model = MODELS[collection]
        async with self._session("fetch", collection) as session:
            result = await session.execute(select(model).where(model.id == id))
            row = result.scalar_one_or_none()
            return to_record(row) if row is not None else None

    async def fetch_by_ids(self, collection: Collection, ids: Iterable[UUID]) -> list[Record]:
        model = MODELS[collection]
        keys = list(ids)
        if not keys:
            return []
        async with self._session("fetch", collection) as session:
            result = await session.execute(select(model).where(model.id.in_(keys)))
            return [to_record(row) for row in result.scalars().all()]

    async def fetch_all(self, collection: Collection) -> list[Record]:
        model = MODELS[collection]
        async with self._session("fetch", collection) as session:
            result = await session.execute(select(model).order_by(model.created_at.asc()))
            return [to_record(row) for row in result.scalars().all()]

    async def find_one(self, collection: Collection, **criteria: Any) -> Record | None:
        model = MODELS[collection]
        stmt = select(model).filter_by(**criteria).limit(1)
        async with self._session("fetch", collection) as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
            return to_record(row) if row is not None else None

    async def insert(self, collection: Collection, values: Mapping[str, Any]) -> Record:
        model = MODELS[collection]
        async with self._session("insert", collection) as session:
            row = model(**values)
            session.add(row)
            await session.flush()
            await session.refresh(row)
            return to_record(row)

    async def update(
        self, collection: Collection, id: UUID, values: Mapping[str, Any]
    ) -> Record | None:
        model = MODELS[collection]
        stmt = update(model).where(model.id == id).values(**values).returning(model)
        async with self._session("update", collection) as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
            return to_record(row) if row is not None else None

    async def delete(self, collection: Collection, id: UUID) -> bool:
        model = MODELS[collection]
        async with self._session("delete", collection) as session:
            result = await session.execute(delete(model).where(model.id == id))
            return result.rowcount > 0
