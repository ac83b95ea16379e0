from datetime import date as date_type
from decimal import Decimal
from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Numeric, ForeignKey, Date, Text, Enum, Index
from sqlalchemy.orm import Mapped, mapped_column
from app.models.base import Base, TimestampMixin, SoftDeleteMixin


class ExpenseCategory(str, PyEnum):
    """Expense category enumeration"""

    FUEL = "fuel"
    MAINTENANCE = "maintenance"
    INSURANCE = "insurance"
    REPAIR = "repair"
    CLEANING = "cleaning"
    OTHER = "other"


class Expense(Base, TimestampMixin, SoftDeleteMixin):
    """
    Money spent by a tenant, standalone or attached to a weekly report
    and/or a taxi.

    Linking to a report makes the amount count towards that report's
    total_expenses.
    """

    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    report_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("weekly_reports.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    taxi_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("taxis.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    category: Mapped[ExpenseCategory] = mapped_column(
        Enum(ExpenseCategory, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=2), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    receipt_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)
    created_by_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (Index("ix_expenses_tenant_date", "tenant_id", "date"),)
