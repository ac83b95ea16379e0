from decimal import Decimal
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.expense import Expense


class ExpenseRepository:
    """Repository for Expense data access"""

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(Expense).filter(Expense.deleted_at.is_(None))

    def create_no_commit(self, expense: Expense) -> Expense:
        """Create expense without committing (for atomic ops)"""
        self.db.add(expense)
        self.db.flush()
        return expense

    def get_by_id_and_tenant(self, expense_id: int, tenant_id: int) -> Expense | None:
        """
        Get expense by ID, ensuring it belongs to the tenant.

        Returns:
            Expense or None if not found or belongs to different tenant
        """
        return (
            self._active()
            .filter(Expense.id == expense_id, Expense.tenant_id == tenant_id)
            .first()
        )

    def get_by_tenant(self, tenant_id: int) -> list[Expense]:
        """All expenses of a tenant, most recent date first"""
        return (
            self._active()
            .filter(Expense.tenant_id == tenant_id)
            .order_by(Expense.date.desc(), Expense.id.desc())
            .all()
        )

    def get_report_total(self, report_id: int) -> Decimal:
        """Sum of non-deleted expenses linked to a report (0 when none)"""
        result = (
            self.db.query(func.sum(Expense.amount))
            .filter(Expense.report_id == report_id, Expense.deleted_at.is_(None))
            .scalar()
        )
        return Decimal(str(result)) if result is not None else Decimal("0")

    def get_tenant_total(self, tenant_id: int) -> Decimal:
        """Sum of all non-deleted expenses of a tenant"""
        result = (
            self.db.query(func.sum(Expense.amount))
            .filter(Expense.tenant_id == tenant_id, Expense.deleted_at.is_(None))
            .scalar()
        )
        return Decimal(str(result)) if result is not None else Decimal("0")

    def flush(self) -> None:
        """Write pending changes without committing"""
        self.db.flush()

    def commit(self, *instances) -> None:
        """Commit the unit of work and refresh the given instances"""
        self.db.commit()
        for instance in instances:
            self.db.refresh(instance)
