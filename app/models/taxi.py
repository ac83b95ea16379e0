from enum import Enum as PyEnum
from sqlalchemy import String, Integer, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin, SoftDeleteMixin

if TYPE_CHECKING:
    from app.models.user import User


class TaxiStatus(str, PyEnum):
    """Taxi lifecycle status"""

    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"


class Taxi(Base, TimestampMixin, SoftDeleteMixin):
    """Vehicle owned by a tenant, optionally assigned to one driver."""

    __tablename__ = "taxis"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    license_plate: Mapped[str] = mapped_column(String(50), nullable=False)
    model: Mapped[str | None] = mapped_column(String(255), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    vin: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[TaxiStatus] = mapped_column(
        Enum(TaxiStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=TaxiStatus.ACTIVE,
        index=True,
    )
    assigned_driver_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Relationships
    assigned_driver: Mapped["User | None"] = relationship("User")

    def __repr__(self) -> str:
        return f"<Taxi(id={self.id}, tenant_id={self.tenant_id}, plate='{self.license_plate}')>"
