"""Base repository with common CRUD operations."""

from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import and_, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.marketplace.core.config import get_settings
from src.marketplace.models.base import utc_now
from src.marketplace.schemas.pagination import decode_cursor, encode_cursor


ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    should be done in the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Get a record by its primary key."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    async def find(
        self,
        *criteria: Any,
        order_by: Any | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Sequence[ModelType]:
        """Find records matching all criteria."""
        query = select(self.model)
        if criteria:
            query = query.where(*criteria)
        if order_by is not None:
            query = query.order_by(order_by)
        if limit is not None:
            query = query.limit(limit)
        if offset is not None:
            query = query.offset(offset)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self, *criteria: Any) -> int:
        """Count records matching all criteria."""
        query = select(func.count()).select_from(self.model)
        if criteria:
            query = query.where(*criteria)
        result = await self.session.execute(query)
        return int(result.scalar_one())

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def insert(self, entity: ModelType) -> ModelType:
        """Add entity and flush so database defaults and constraints apply."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def update(self, entity: ModelType, patch: Mapping[str, Any]) -> ModelType:
        """Apply a patch of field values to a loaded entity and flush it."""
        for field, value in patch.items():
            setattr(entity, field, value)
        # SQLModel has no onupdate callbacks, so keep updated_at current here
        if "updated_at" in type(entity).model_fields:
            entity.updated_at = utc_now()  # type: ignore[attr-defined]
        await self.session.flush()
        return entity

    async def delete(self, entity: ModelType) -> None:
        """Delete a loaded entity and flush."""
        await self.session.delete(entity)
        await self.session.flush()

    async def paginate(
        self,
        query: Any,
        cursor: str | None,
        limit: int | None = None,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Run a newest-first listing one page at a time.

        Rows are ordered by ``(created_at, id)`` descending. `limit` defaults to
        default_page_size and is clamped to 1..max_page_size. A malformed cursor
        restarts from the first page.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        settings = get_settings()
        if limit is None:
            limit = settings.default_page_size
        limit = max(1, min(limit, settings.max_page_size))
        created_at = self.model.created_at  # type: ignore[attr-defined]
        row_id = self.model.id  # type: ignore[attr-defined]

        if cursor:
            try:
                last_created_at, last_id = decode_cursor(cursor)
            except ValueError:
                pass
            else:
                query = query.where(
                    or_(
                        created_at < last_created_at,
                        and_(created_at == last_created_at, row_id < last_id),
                    )
                )

        query = query.order_by(created_at.desc(), row_id.desc()).limit(limit + 1)
        result = await self.session.execute(query)
        items = list(result.scalars().all())

        has_more = len(items) > limit
        items = items[:limit]
        next_cursor = None
        if has_more and items:
            last = items[-1]
            next_cursor = encode_cursor(last.created_at, last.id)  # type: ignore[attr-defined]
        return items, next_cursor, has_more
