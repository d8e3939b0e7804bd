"""Persistence for uploaded file metadata."""
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from fileguard.models.file_record import FileRecord


class FileStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, file_id: int) -> FileRecord | None:
        return await self.db.get(FileRecord, file_id)

    async def find_by_key(self, stored_filename: str) -> FileRecord | None:
        result = await self.db.execute(
            select(FileRecord).where(FileRecord.stored_filename == stored_filename)
        )
        return result.scalar_one_or_none()

    async def exists_by_stored_filename(self, stored_filename: str) -> bool:
        result = await self.db.execute(
            select(FileRecord.id).where(FileRecord.stored_filename == stored_filename).limit(1)
        )
        return result.first() is not None

    async def find_all(self) -> list[FileRecord]:
        result = await self.db.execute(select(FileRecord))
        return list(result.scalars().all())

    async def find_all_ordered(self) -> list[FileRecord]:
        """Newest first."""
        result = await self.db.execute(
            select(FileRecord).order_by(desc(FileRecord.created_at), desc(FileRecord.id))
        )
        return list(result.scalars().all())

    async def save(self, record: FileRecord) -> FileRecord:
        self.db.add(record)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(record)
        return record

    async def delete(self, record: FileRecord) -> None:
        await self.db.delete(record)
        await self.db.commit()
