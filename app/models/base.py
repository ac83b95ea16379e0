from datetime import datetime, UTC

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from app.core.permissions import ALL_PERMISSIONS, MASK_BITS, normalize_mask


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """created_at / updated_at maintained by SQLAlchemy"""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class SoftDeleteMixin:
    """
    Logical deletion for audit entities.

    Rows are never removed; repositories filter on ``deleted_at IS NULL``.
    """

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    def soft_delete(self) -> None:
        self.deleted_at = utcnow()


class PermissionMaskType(TypeDecorator):
    """
    Stores an unsigned 32-bit permission mask in a signed INTEGER column.

    0xFFFFFFFF is written as -1 and read back as 0xFFFFFFFF, so Python code
    only ever sees the unsigned form.
    """

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = normalize_mask(value)
        if value > ALL_PERMISSIONS >> 1:
            value -= 1 << MASK_BITS
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return normalize_mask(value)
