from sqlalchemy import String, Integer, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.core.permissions import DEFAULT_DRIVER_MASK
from app.models.base import Base, TimestampMixin, SoftDeleteMixin, PermissionMaskType

if TYPE_CHECKING:
    from app.models.tenant import Tenant
    from app.models.session import Session


class User(Base, TimestampMixin, SoftDeleteMixin):
    """
    A person working for a tenant: admin, owner, manager, mechanic or driver.

    What the user may do is decided by ``permission`` alone (see
    app.core.permissions). ``active=False`` blocks login and invalidates
    any access token still in circulation.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,  # Critical for multi-tenant queries
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    permission: Mapped[int] = mapped_column(
        PermissionMaskType, nullable=False, default=DEFAULT_DRIVER_MASK
    )
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True, unique=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="users")
    sessions: Mapped[list["Session"]] = relationship(
        "Session",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, tenant_id={self.tenant_id}, email='{self.email}')>"
