"""Extension policy request/response schemas."""
from typing import Optional
from datetime import datetime
from fileguard.schemas.base import CamelModel, CamelORMModel


# Extension strings are loosely typed; the policy service rejects malformed
# ones with INVALID_EXTENSION.

class FixedExtensionCreate(CamelModel):
    extension: Optional[str] = None
    description: str = ""
    is_blocked: bool = True


class FixedExtensionStatusUpdate(CamelModel):
    extension: Optional[str] = None
    is_blocked: bool


class CustomExtensionCreate(CamelModel):
    extension: Optional[str] = None


class FixedExtensionResponse(CamelORMModel):
    id: int
    extension: str
    is_blocked: bool
    description: str = ""
    created_at: datetime
    updated_at: datetime


class CustomExtensionResponse(CamelORMModel):
    id: int
    extension: str
    is_blocked: bool
    created_at: datetime


class ExtensionCheckResponse(CamelModel):
    extension: str
    blocked: bool


class ExtensionTypeResponse(CamelModel):
    extension: str
    type: str


class BlockedExtensionsResponse(CamelModel):
    extensions: list[str] = []
