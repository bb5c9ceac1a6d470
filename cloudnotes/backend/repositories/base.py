"""
Base Repository.

Owner-scoped CRUD over one table. Every query filters on the owner id the
repository was built with, so a repository can never read or write another
owner's rows.

Each write commits on its own: single-record writes are atomic, and no
transaction spans two writes.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cloudnotes.backend.core.exceptions import NotFoundError
from cloudnotes.backend.core.logging import get_logger
from cloudnotes.backend.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class OwnerScopedRepository(Generic[ModelType]):
    """
    Base repository for rows keyed by (owner_id, id).

    Subclasses set the model class:

        class NoteRepository(OwnerScopedRepository[Note]):
            model = Note
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession, owner_id: str) -> None:
        if not owner_id:
            raise ValueError("owner_id is required")
        self.session = session
        self.owner_id = owner_id

    def _select(self):
        return select(self.model).where(self.model.owner_id == self.owner_id)

    def _insertion_order(self) -> tuple:
        return (self.model.created_at, self.model.id)

    async def list_all(self) -> dict[str, ModelType]:
        """Return all of the owner's rows as an insertion-ordered id -> row mapping."""
        result = await self.session.execute(
            self._select().order_by(*self._insertion_order())
        )
        return {row.id: row for row in result.scalars().all()}

    async def get_by_id_or_none(self, id: str) -> ModelType | None:
        """Get one of the owner's rows, or None."""
        result = await self.session.execute(
            self._select().where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, id: str) -> ModelType:
        """
        Get one of the owner's rows.

        Raises:
            NotFoundError: If no such row exists for this owner
        """
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return instance

    async def create(self, **fields: Any) -> ModelType:
        """Insert a row with a store-generated id and commit it."""
        fields.pop("id", None)
        instance = self.model(owner_id=self.owner_id, **fields)
        self.session.add(instance)
        await self.session.commit()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: str, **fields: Any) -> ModelType:
        """
        Merge `fields` into an existing row and commit.

        Fields not passed keep their stored values.

        Raises:
            NotFoundError: If no such row exists for this owner
        """
        instance = await self.get_by_id(id)
        for key, value in fields.items():
            if key in ("id", "owner_id"):
                continue
            if hasattr(instance, key):
                setattr(instance, key, value)
        await self.session.commit()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: str) -> bool:
        """Delete a row if present and commit. Returns whether a row was removed."""
        result = await self.session.execute(
            delete(self.model)
            .where(self.model.owner_id == self.owner_id)
            .where(self.model.id == id)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def delete_all(self) -> int:
        """Delete all of the owner's rows and commit. Returns the number removed."""
        result = await self.session.execute(
            delete(self.model).where(self.model.owner_id == self.owner_id)
        )
        await self.session.commit()
        return result.rowcount
