"""Upload pipeline: validate, check extension policy, write bytes, record metadata."""
import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath

from sqlalchemy.ext.asyncio import AsyncSession

from fileguard.config import settings
from fileguard.errors import BusinessRuleViolation, ErrorCode
from fileguard.models.file_record import FileRecord
from fileguard.repositories.file_store import FileStore
from fileguard.services.extension_policy import ExtensionPolicyService
from fileguard.services.file_storage import FileStorageService

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
MAX_ORIGINAL_FILENAME_LENGTH = 255
# Filesystem NAME_MAX, in bytes
MAX_STORED_FILENAME_BYTES = 255
_STORED_PREFIX_BYTES = 33  # uuid4 hex + "_"
# Keeps Unicode letters and digits; drops separators, spaces and control chars
_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.-]")


@dataclass
class UploadedFile:
    filename: str | None
    content_type: str | None
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class DownloadedFile:
    record: FileRecord
    content: bytes


def extract_extension(filename: str) -> str:
    """Lower-cased text after the last '.', or "" if there is none."""
    dot = filename.rfind(".")
    if dot == -1:
        return ""
    return filename[dot + 1:].lower()


def _truncate_utf8(value: str, max_bytes: int) -> str:
    return value.encode("utf-8")[:max_bytes].decode("utf-8", "ignore")


def sanitize_filename(filename: str, max_bytes: int = MAX_STORED_FILENAME_BYTES - _STORED_PREFIX_BYTES) -> str:
    """Drop any directory part, replace characters unsafe on disk with '_'
    and shorten the stem so the UTF-8 name fits in ``max_bytes``.

    The extension is kept whenever it fits on its own.
    """
    name = PurePosixPath(filename.replace("\\", "/")).name
    name = _UNSAFE_FILENAME_CHARS.sub("_", name) or "file"
    if len(name.encode("utf-8")) <= max_bytes:
        return name

    stem, dot, ext = name.rpartition(".")
    suffix = f".{ext}" if dot else ""
    budget = max_bytes - len(suffix.encode("utf-8"))
    if not stem or budget <= 0:
        return _truncate_utf8(name, max_bytes)
    return _truncate_utf8(stem, budget) + suffix


def generate_stored_filename(original_filename: str) -> str:
    """Random hex prefix + sanitized original name, e.g. '3f2a..._test.txt'."""
    return f"{uuid.uuid4().hex}_{sanitize_filename(original_filename)}"


class FileUploadService:
    def __init__(
        self,
        db: AsyncSession,
        storage: FileStorageService,
        policy: ExtensionPolicyService | None = None,
        max_file_size: int | None = None,
    ):
        self.store = FileStore(db)
        self.storage = storage
        self.policy = policy or ExtensionPolicyService(db)
        self.max_file_size = max_file_size or settings.MAX_UPLOAD_SIZE_BYTES or MAX_FILE_SIZE_BYTES

    async def upload(self, file: UploadedFile) -> FileRecord:
        if file.size == 0:
            raise BusinessRuleViolation(ErrorCode.EMPTY_FILE, "File is empty")
        if file.size > self.max_file_size:
            raise BusinessRuleViolation(
                ErrorCode.FILE_TOO_LARGE,
                f"File size cannot exceed {self.max_file_size // (1024 * 1024)}MB",
            )
        if file.filename is None or not file.filename.strip():
            raise BusinessRuleViolation(ErrorCode.INVALID_FILENAME, "Invalid filename")
        if len(file.filename) > MAX_ORIGINAL_FILENAME_LENGTH:
            raise BusinessRuleViolation(
                ErrorCode.INVALID_FILENAME,
                f"Filename cannot exceed {MAX_ORIGINAL_FILENAME_LENGTH} characters",
            )

        extension = extract_extension(file.filename)
        if not extension:
            raise BusinessRuleViolation(
                ErrorCode.MISSING_EXTENSION,
                "Files without an extension cannot be uploaded",
            )
        if await self.policy.is_extension_blocked(extension):
            logger.warning("Rejected upload '%s': extension '%s' is blocked", file.filename, extension)
            raise BusinessRuleViolation(
                ErrorCode.BLOCKED_EXTENSION,
                f"Blocked extension: {extension}",
                extension=extension,
            )

        stored_filename = generate_stored_filename(file.filename)

        # Step 1: write bytes. Nothing is recorded if this fails.
        try:
            file_path, written = await self.storage.write(stored_filename, file.content)
        except OSError as e:
            logger.exception("Failed to write upload '%s' to storage", stored_filename)
            raise BusinessRuleViolation(
                ErrorCode.STORAGE_WRITE_FAILED,
                "Failed to save file",
            ) from e
        if written != file.size:
            logger.error(
                "Short write for '%s': expected %d bytes, wrote %d",
                stored_filename, file.size, written,
            )
            await self.storage.delete(file_path)
            raise BusinessRuleViolation(ErrorCode.STORAGE_WRITE_FAILED, "Failed to save file")

        # Step 2: record metadata. Remove the bytes again if the commit fails.
        record = FileRecord(
            original_filename=file.filename,
            stored_filename=stored_filename,
            file_size=file.size,
            content_type=file.content_type,
            file_path=file_path,
        )
        try:
            record = await self.store.save(record)
        except Exception:
            logger.exception("Failed to record metadata, removing stored bytes: %s", file_path)
            await self.storage.delete(file_path)
            raise

        logger.info(
            "Stored upload '%s' as '%s' (%d bytes, id=%d)",
            file.filename, stored_filename, file.size, record.id,
        )
        return record

    async def get_all(self) -> list[FileRecord]:
        return await self.store.find_all_ordered()

    async def get_by_id(self, file_id: int) -> FileRecord:
        record = await self.store.find_by_id(file_id)
        if record is None:
            raise BusinessRuleViolation(ErrorCode.NOT_FOUND, f"File not found: id={file_id}")
        return record

    async def download(self, file_id: int) -> DownloadedFile:
        record = await self.get_by_id(file_id)
        try:
            content = await self.storage.read(record.file_path)
        except OSError as e:
            logger.warning("Backing file for id=%d unreadable at %s: %s", file_id, record.file_path, e)
            raise BusinessRuleViolation(
                ErrorCode.UNREADABLE,
                "File not found or unreadable",
            ) from e
        return DownloadedFile(record=record, content=content)

    async def delete(self, file_id: int) -> None:
        record = await self.get_by_id(file_id)
        file_path = record.file_path
        await self.store.delete(record)
        await self.storage.delete(file_path)
        logger.info("Deleted file id=%d (%s)", file_id, file_path)
