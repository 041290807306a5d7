"""Persistence interface for barter records.

``SqlBarterRepository`` saves with a version compare-and-swap: an update
only lands if nobody else saved the barter since it was loaded.
"""

from typing import Any, Protocol

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import utcnow
from app.models.barter import BarterOffer
from app.services.errors import ConflictError, NotFoundError


class BarterRepository(Protocol):
    async def load(self, barter_id: int) -> BarterOffer | None: ...

    async def add(self, barter: BarterOffer) -> BarterOffer: ...

    async def save(
        self, barter_id: int, changes: dict[str, Any], expected_version: int
    ) -> BarterOffer: ...

    async def list_by_owner(self, user_id: str, limit: int) -> list[BarterOffer]: ...

    async def list_by_requester(self, user_id: str, limit: int) -> list[BarterOffer]: ...


class SqlBarterRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def load(self, barter_id: int) -> BarterOffer | None:
        result = await self.db.execute(
            select(BarterOffer)
            .where(BarterOffer.id == barter_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def add(self, barter: BarterOffer) -> BarterOffer:
        self.db.add(barter)
        await self.db.commit()
        await self.db.refresh(barter)
        return barter

    async def save(
        self, barter_id: int, changes: dict[str, Any], expected_version: int
    ) -> BarterOffer:
        """Apply ``changes`` if the stored version still equals ``expected_version``.

        Raises ConflictError when another writer got there first and
        NotFoundError when the row is gone.
        """
        result = await self.db.execute(
            update(BarterOffer)
            .where(
                BarterOffer.id == barter_id,
                BarterOffer.version == expected_version,
            )
            .values(**changes, version=expected_version + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ConflictError(barter_id, expected_version)
        await self.db.commit()

        barter = await self.load(barter_id)
        if barter is None:
            raise NotFoundError(barter_id)
        return barter

    async def list_by_owner(self, user_id: str, limit: int) -> list[BarterOffer]:
        result = await self.db.execute(
            select(BarterOffer)
            .where(BarterOffer.owner_id == user_id)
            .order_by(BarterOffer.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_by_requester(self, user_id: str, limit: int) -> list[BarterOffer]:
        result = await self.db.execute(
            select(BarterOffer)
            .where(BarterOffer.requester_id == user_id)
            .order_by(BarterOffer.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
