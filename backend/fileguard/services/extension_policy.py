"""Extension block/allow policy.

Two lists feed the decision:
- fixed extensions: admin-curated, at most 10, each toggled blocked/unblocked;
- custom extensions: ad-hoc additions, at most 200, always created blocked.

An extension lives in at most one list. Lookups check the fixed list first;
extensions on neither list are allowed.
"""
import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fileguard.errors import BusinessRuleViolation, ErrorCode
from fileguard.models.extension import FixedExtension, CustomExtension
from fileguard.repositories.extension_store import FixedExtensionStore, CustomExtensionStore
from fileguard.services.extension_validator import (
    MAX_EXTENSION_LENGTH,
    normalize_extension,
    validate_extension,
)
from fileguard.services.seed_defaults import add_default_fixed_extensions

logger = logging.getLogger(__name__)

MAX_FIXED_EXTENSIONS = 10
MAX_CUSTOM_EXTENSIONS = 200

EXTENSION_TYPE_FIXED = "fixed"
EXTENSION_TYPE_CUSTOM = "custom"
EXTENSION_TYPE_NONE = "none"


class ExtensionPolicyService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.fixed_store = FixedExtensionStore(db)
        self.custom_store = CustomExtensionStore(db)

    # ── Validation ────────────────────────────────────────────────

    def validate_extension(self, ext: str | None) -> bool:
        return validate_extension(ext)

    def _require_valid(self, ext: str | None) -> str:
        if not validate_extension(ext):
            raise BusinessRuleViolation(
                ErrorCode.INVALID_EXTENSION,
                f"Invalid extension: use 1-{MAX_EXTENSION_LENGTH} letters or digits only",
                extension=ext,
            )
        return normalize_extension(ext)

    async def _require_not_listed(self, ext: str) -> None:
        if await self.fixed_store.exists_by_key(ext):
            raise BusinessRuleViolation(
                ErrorCode.DUPLICATE_IN_FIXED,
                f"Extension already exists in the fixed list: {ext}",
                extension=ext,
            )
        if await self.custom_store.exists_by_key(ext):
            raise BusinessRuleViolation(
                ErrorCode.DUPLICATE_IN_CUSTOM,
                f"Extension already exists in the custom list: {ext}",
                extension=ext,
            )

    # ── Fixed extensions ──────────────────────────────────────────

    async def add_fixed_extension(
        self,
        ext: str | None,
        description: str = "",
        is_blocked: bool = True,
    ) -> FixedExtension:
        """Add an admin-curated extension. Blocked unless the caller says otherwise."""
        ext = self._require_valid(ext)
        if await self.fixed_store.count() >= MAX_FIXED_EXTENSIONS:
            raise BusinessRuleViolation(
                ErrorCode.CAPACITY_EXCEEDED,
                f"Fixed extensions are limited to {MAX_FIXED_EXTENSIONS}",
                extension=ext,
            )
        await self._require_not_listed(ext)

        record = FixedExtension(extension=ext, is_blocked=is_blocked, description=description or "")
        try:
            record = await self.fixed_store.save(record)
        except IntegrityError as e:
            # Lost a race with a concurrent add of the same extension
            raise BusinessRuleViolation(
                ErrorCode.DUPLICATE_IN_FIXED,
                f"Extension already exists in the fixed list: {ext}",
                extension=ext,
            ) from e
        logger.info("Added fixed extension '%s' (blocked=%s)", ext, record.is_blocked)
        return record

    async def update_fixed_extension_status(self, ext: str | None, blocked: bool) -> FixedExtension:
        key = normalize_extension(ext or "")
        record = await self.fixed_store.find_by_key(key)
        if record is None:
            raise BusinessRuleViolation(
                ErrorCode.NOT_FOUND,
                f"Fixed extension not found: {key}",
                extension=key,
            )
        record.is_blocked = blocked
        record = await self.fixed_store.save(record)
        logger.info("Fixed extension '%s' blocked=%s", key, blocked)
        return record

    async def delete_fixed_extension(self, extension_id: int) -> None:
        record = await self.fixed_store.find_by_id(extension_id)
        if record is None:
            raise BusinessRuleViolation(
                ErrorCode.NOT_FOUND,
                f"Fixed extension not found: id={extension_id}",
            )
        await self.fixed_store.delete(record)
        logger.info("Deleted fixed extension '%s'", record.extension)

    async def reset_fixed_extensions(self) -> list[FixedExtension]:
        """Replace the fixed list with the default set, all unblocked."""
        removed = await self.fixed_store.delete_all(commit=False)
        added = await add_default_fixed_extensions(self.db)
        await self.db.commit()
        logger.info("Reset fixed extensions: removed %d, restored %d defaults", removed, len(added))
        return await self.fixed_store.find_all_ordered()

    async def get_all_fixed_extensions(self) -> list[FixedExtension]:
        return await self.fixed_store.find_all_ordered()

    # ── Custom extensions ─────────────────────────────────────────

    async def add_custom_extension(self, ext: str | None) -> CustomExtension:
        """Add an ad-hoc extension. Custom extensions are always created blocked."""
        ext = self._require_valid(ext)
        if await self.custom_store.count() >= MAX_CUSTOM_EXTENSIONS:
            raise BusinessRuleViolation(
                ErrorCode.CAPACITY_EXCEEDED,
                f"Custom extensions are limited to {MAX_CUSTOM_EXTENSIONS}",
                extension=ext,
            )
        await self._require_not_listed(ext)

        record = CustomExtension(extension=ext, is_blocked=True)
        try:
            record = await self.custom_store.save(record)
        except IntegrityError as e:
            raise BusinessRuleViolation(
                ErrorCode.DUPLICATE_IN_CUSTOM,
                f"Extension already exists in the custom list: {ext}",
                extension=ext,
            ) from e
        logger.info("Added custom extension '%s'", ext)
        return record

    async def delete_custom_extension(self, extension_id: int) -> None:
        record = await self.custom_store.find_by_id(extension_id)
        if record is None:
            raise BusinessRuleViolation(
                ErrorCode.NOT_FOUND,
                f"Custom extension not found: id={extension_id}",
            )
        await self.custom_store.delete(record)
        logger.info("Deleted custom extension '%s'", record.extension)

    async def delete_custom_extension_by_name(self, ext: str | None) -> None:
        key = normalize_extension(ext or "")
        record = await self.custom_store.find_by_key(key)
        if record is None:
            raise BusinessRuleViolation(
                ErrorCode.NOT_FOUND,
                f"Custom extension not found: {key}",
                extension=key,
            )
        await self.custom_store.delete(record)
        logger.info("Deleted custom extension '%s'", key)

    async def delete_all_custom_extensions(self) -> int:
        removed = await self.custom_store.delete_all()
        logger.info("Deleted all %d custom extensions", removed)
        return removed

    async def get_all_custom_extensions(self) -> list[CustomExtension]:
        return await self.custom_store.find_all_ordered()

    # ── Decisions ─────────────────────────────────────────────────

    async def is_extension_blocked(self, ext: str | None) -> bool:
        """True if the extension is on either list and flagged blocked."""
        if not ext:
            return False
        key = normalize_extension(ext)
        record = await self.fixed_store.find_by_key(key)
        if record is None:
            record = await self.custom_store.find_by_key(key)
        if record is None:
            return False
        return record.is_blocked

    async def get_extension_type(self, ext: str | None) -> str:
        key = normalize_extension(ext or "")
        if key and await self.fixed_store.exists_by_key(key):
            return EXTENSION_TYPE_FIXED
        if key and await self.custom_store.exists_by_key(key):
            return EXTENSION_TYPE_CUSTOM
        return EXTENSION_TYPE_NONE

    async def get_blocked_extensions(self) -> list[str]:
        fixed = await self.fixed_store.find_blocked_extensions()
        custom = await self.custom_store.find_blocked_extensions()
        return sorted(set(fixed) | set(custom))
