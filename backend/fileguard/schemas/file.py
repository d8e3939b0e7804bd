"""File request/response schemas."""
from typing import Optional
from datetime import datetime
from fileguard.schemas.base import CamelORMModel


class FileResponse(CamelORMModel):
    id: int
    original_filename: str
    stored_filename: str
    file_size: int
    content_type: Optional[str] = None
    created_at: datetime
    updated_at: datetime
