"""Extension policy API routes."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fileguard.database import get_db
from fileguard.schemas.common import DeleteResponse, BulkDeleteResponse
from fileguard.schemas.extension import (
    FixedExtensionCreate,
    FixedExtensionStatusUpdate,
    CustomExtensionCreate,
    FixedExtensionResponse,
    CustomExtensionResponse,
    ExtensionCheckResponse,
    ExtensionTypeResponse,
    BlockedExtensionsResponse,
)
from fileguard.services.extension_policy import ExtensionPolicyService
from fileguard.services.extension_validator import normalize_extension

router = APIRouter(prefix="/api/extensions", tags=["extensions"])


def get_policy_service(db: AsyncSession = Depends(get_db)) -> ExtensionPolicyService:
    return ExtensionPolicyService(db)


# ── Fixed extensions ──────────────────────────────────────────────

@router.get("/fixed", response_model=list[FixedExtensionResponse])
async def list_fixed_extensions(policy: ExtensionPolicyService = Depends(get_policy_service)):
    """List fixed extensions alphabetically."""
    return await policy.get_all_fixed_extensions()


@router.post("/fixed", response_model=FixedExtensionResponse, status_code=201)
async def add_fixed_extension(
    body: FixedExtensionCreate,
    policy: ExtensionPolicyService = Depends(get_policy_service),
):
    return await policy.add_fixed_extension(body.extension, body.description, body.is_blocked)


@router.put("/fixed", response_model=FixedExtensionResponse)
async def update_fixed_extension_status(
    body: FixedExtensionStatusUpdate,
    policy: ExtensionPolicyService = Depends(get_policy_service),
):
    """Toggle the blocked flag of a fixed extension."""
    return await policy.update_fixed_extension_status(body.extension, body.is_blocked)


@router.post("/fixed/reset", response_model=list[FixedExtensionResponse])
async def reset_fixed_extensions(policy: ExtensionPolicyService = Depends(get_policy_service)):
    """Replace the fixed list with the defaults, all unblocked."""
    return await policy.reset_fixed_extensions()


@router.delete("/fixed/{extension_id}", response_model=DeleteResponse)
async def delete_fixed_extension(
    extension_id: int,
    policy: ExtensionPolicyService = Depends(get_policy_service),
):
    await policy.delete_fixed_extension(extension_id)
    return {"deleted": True, "id": extension_id}


# ── Custom extensions ─────────────────────────────────────────────

@router.get("/custom", response_model=list[CustomExtensionResponse])
async def list_custom_extensions(policy: ExtensionPolicyService = Depends(get_policy_service)):
    """List custom extensions, oldest first."""
    return await policy.get_all_custom_extensions()


@router.post("/custom", response_model=CustomExtensionResponse, status_code=201)
async def add_custom_extension(
    body: CustomExtensionCreate,
    policy: ExtensionPolicyService = Depends(get_policy_service),
):
    """Add a custom extension. Custom extensions are always blocked."""
    return await policy.add_custom_extension(body.extension)


# Must be declared before /custom/{extension_id}
@router.delete("/custom/all", response_model=BulkDeleteResponse)
async def delete_all_custom_extensions(policy: ExtensionPolicyService = Depends(get_policy_service)):
    removed = await policy.delete_all_custom_extensions()
    return {"deleted": removed}


@router.delete("/custom/extension/{extension}", response_model=DeleteResponse)
async def delete_custom_extension_by_name(
    extension: str,
    policy: ExtensionPolicyService = Depends(get_policy_service),
):
    """Remove a custom extension by name, which unblocks it."""
    await policy.delete_custom_extension_by_name(extension)
    return {"deleted": True}


@router.delete("/custom/{extension_id}", response_model=DeleteResponse)
async def delete_custom_extension(
    extension_id: int,
    policy: ExtensionPolicyService = Depends(get_policy_service),
):
    await policy.delete_custom_extension(extension_id)
    return {"deleted": True, "id": extension_id}


# ── Lookups ───────────────────────────────────────────────────────

@router.get("/check/{extension}", response_model=ExtensionCheckResponse)
async def check_extension(
    extension: str,
    policy: ExtensionPolicyService = Depends(get_policy_service),
):
    """Whether uploads with this extension are currently rejected."""
    blocked = await policy.is_extension_blocked(extension)
    return {"extension": normalize_extension(extension), "blocked": blocked}


@router.get("/type/{extension}", response_model=ExtensionTypeResponse)
async def get_extension_type(
    extension: str,
    policy: ExtensionPolicyService = Depends(get_policy_service),
):
    ext_type = await policy.get_extension_type(extension)
    return {"extension": normalize_extension(extension), "type": ext_type}


@router.get("/blocked", response_model=BlockedExtensionsResponse)
async def list_blocked_extensions(policy: ExtensionPolicyService = Depends(get_policy_service)):
    return {"extensions": await policy.get_blocked_extensions()}
