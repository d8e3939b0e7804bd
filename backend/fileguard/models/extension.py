"""Extension policy models - fixed (admin-curated) and custom (ad-hoc) block lists."""
from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from fileguard.models.base import Base, CreatedAtMixin, TimestampMixin


class FixedExtension(Base, TimestampMixin):
    __tablename__ = "fixed_extensions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    extension: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    is_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")


class CustomExtension(Base, CreatedAtMixin):
    __tablename__ = "custom_extensions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    extension: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    # No column default: the policy service always passes is_blocked explicitly
    is_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False)
