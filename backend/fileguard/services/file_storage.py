"""File storage on the local filesystem under the configured upload root."""
import os
import aiofiles
from pathlib import Path
from fileguard.config import settings


class FileStorageService:
    """Handles file read/write/delete under a single upload root."""

    def __init__(self, base_path: str | Path | None = None):
        self.base_path = Path(base_path or settings.FILE_STORAGE_PATH).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    async def write(self, filename: str, file_bytes: bytes) -> tuple[str, int]:
        """Write bytes under the upload root. Returns (resolved path, bytes written).

        Raises OSError if the file cannot be written.
        """
        file_path = self.base_path / filename
        async with aiofiles.open(file_path, "wb") as f:
            written = await f.write(file_bytes)
        return str(file_path), written

    async def read(self, storage_path: str) -> bytes:
        """Read file bytes. Raises FileNotFoundError if the file is gone."""
        async with aiofiles.open(storage_path, "rb") as f:
            return await f.read()

    def exists(self, storage_path: str) -> bool:
        return Path(storage_path).is_file()

    async def delete(self, storage_path: str) -> None:
        """Delete file from storage. Missing files are ignored."""
        path = Path(storage_path)
        if path.exists():
            os.remove(path)


file_storage = FileStorageService()
