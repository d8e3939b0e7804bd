"""Import all models so SQLAlchemy metadata knows about them."""
from fileguard.models.base import Base
from fileguard.models.extension import FixedExtension, CustomExtension
from fileguard.models.file_record import FileRecord

__all__ = [
    "Base",
    "FixedExtension", "CustomExtension", "FileRecord",
]
