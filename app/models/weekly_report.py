from datetime import date, datetime
from decimal import Decimal
from enum import Enum as PyEnum
from sqlalchemy import Integer, Numeric, ForeignKey, Date, DateTime, Text, Enum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin, SoftDeleteMixin

if TYPE_CHECKING:
    from app.models.taxi import Taxi
    from app.models.user import User


class ReportStatus(str, PyEnum):
    """
    Weekly report lifecycle.

    DRAFT -> SUBMITTED -> APPROVED | REJECTED. Approved and rejected are
    terminal.
    """

    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class WeeklyReport(Base, TimestampMixin, SoftDeleteMixin):
    """
    A driver's earnings for one week on one taxi.

    total_expenses is derived: the sum of the non-deleted expenses linked
    to this report. It is written only by the report and expense services.

    ``version`` is SQLAlchemy's optimistic concurrency counter: every UPDATE
    checks and increments it.
    """

    __tablename__ = "weekly_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    taxi_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("taxis.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    driver_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    earnings: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2), nullable=False, default=Decimal("0")
    )
    total_expenses: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2), nullable=False, default=Decimal("0")
    )
    status: Mapped[ReportStatus] = mapped_column(
        Enum(ReportStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=ReportStatus.DRAFT,
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Relationships
    taxi: Mapped["Taxi"] = relationship("Taxi")
    driver: Mapped["User"] = relationship("User", foreign_keys=[driver_id])
    approved_by: Mapped["User | None"] = relationship("User", foreign_keys=[approved_by_id])

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_weekly_reports_tenant_week", "tenant_id", "week_start_date"),
        Index("ix_weekly_reports_driver_week", "driver_id", "week_start_date"),
    )
