"""Shared Pydantic schemas."""
from fileguard.schemas.base import CamelModel


class DeleteResponse(CamelModel):
    deleted: bool = True
    id: int | None = None


class BulkDeleteResponse(CamelModel):
    deleted: int = 0
