"""Persistence for the fixed and custom extension lists."""
from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from fileguard.models.extension import FixedExtension, CustomExtension


class _ExtensionStore:
    """Lookup/save helpers shared by both extension tables.

    Callers pass already-normalized (lower-cased) extension strings.
    """

    model: type[FixedExtension] | type[CustomExtension]

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_key(self, extension: str):
        result = await self.db.execute(
            select(self.model).where(self.model.extension == extension)
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, record_id: int):
        return await self.db.get(self.model, record_id)

    async def exists_by_key(self, extension: str) -> bool:
        result = await self.db.execute(
            select(self.model.id).where(self.model.extension == extension).limit(1)
        )
        return result.first() is not None

    async def find_all(self) -> list:
        result = await self.db.execute(select(self.model))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()

    async def find_blocked_extensions(self) -> list[str]:
        result = await self.db.execute(
            select(self.model.extension).where(self.model.is_blocked.is_(True))
        )
        return list(result.scalars().all())

    async def save(self, record):
        """Insert or update a record. IntegrityError propagates after rollback."""
        self.db.add(record)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(record)
        return record

    async def delete(self, record) -> None:
        await self.db.delete(record)
        await self.db.commit()

    async def delete_all(self, commit: bool = True) -> int:
        result = await self.db.execute(delete(self.model))
        if commit:
            await self.db.commit()
        return result.rowcount or 0


class FixedExtensionStore(_ExtensionStore):
    model = FixedExtension

    async def find_all_ordered(self) -> list[FixedExtension]:
        """All fixed extensions, alphabetical by extension."""
        result = await self.db.execute(
            select(FixedExtension).order_by(FixedExtension.extension)
        )
        return list(result.scalars().all())


class CustomExtensionStore(_ExtensionStore):
    model = CustomExtension

    async def find_all_ordered(self) -> list[CustomExtension]:
        """All custom extensions, oldest first (id breaks same-timestamp ties)."""
        result = await self.db.execute(
            select(CustomExtension).order_by(CustomExtension.created_at, CustomExtension.id)
        )
        return list(result.scalars().all())
