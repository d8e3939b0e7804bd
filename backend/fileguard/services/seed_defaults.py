"""Seed the default fixed extensions on startup.

Idempotent: only seeds when the fixed list is empty, so admin edits
(toggles, deletions) survive restarts. The same set is used by
``ExtensionPolicyService.reset_fixed_extensions``.
"""
import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fileguard.models.extension import FixedExtension, CustomExtension
from fileguard.repositories.extension_store import FixedExtensionStore

logger = logging.getLogger(__name__)

# Executable and script formats commonly abused for malware delivery.
# Seeded unblocked: admins opt in to blocking each one.
DEFAULT_FIXED_EXTENSIONS = [
    {"extension": "bat", "description": "Windows batch file"},
    {"extension": "cmd", "description": "Windows command script"},
    {"extension": "com", "description": "DOS executable"},
    {"extension": "cpl", "description": "Control Panel applet"},
    {"extension": "exe", "description": "Windows executable"},
    {"extension": "scr", "description": "Windows screensaver"},
    {"extension": "js", "description": "JavaScript file"},
]


async def add_default_fixed_extensions(session: AsyncSession) -> list[str]:
    """Add the default fixed extensions to the session (flush, no commit).

    Defaults already on the custom list are skipped: an extension may live
    in only one list.
    """
    result = await session.execute(select(CustomExtension.extension))
    custom = set(result.scalars().all())

    added = []
    for e in DEFAULT_FIXED_EXTENSIONS:
        if e["extension"] in custom:
            logger.info("Skipping default fixed extension '%s': already a custom extension", e["extension"])
            continue
        session.add(FixedExtension(is_blocked=False, **e))
        added.append(e["extension"])
    await session.flush()
    return added


async def seed_default_fixed_extensions(session: AsyncSession) -> None:
    """Idempotent entry point: seed the fixed list if it is empty."""
    logger.info("Checking default fixed extensions...")
    if await FixedExtensionStore(session).count() > 0:
        logger.info("Fixed extensions already present, skipping seed")
        return

    added = await add_default_fixed_extensions(session)
    await session.commit()
    logger.info("Seeded %d default fixed extensions", len(added))
