import logging
from datetime import date

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import ConflictException, NotFoundException
from app.models.expense import Expense
from app.models.request_context import RequestContext
from app.repositories.expense_repository import ExpenseRepository
from app.repositories.report_repository import ReportRepository
from app.repositories.taxi_repository import TaxiRepository
from app.schemas.expense_schemas import ExpenseCreate, ExpenseUpdate

logger = logging.getLogger(__name__)


class ExpenseService:
    """
    Service layer for expense business logic.

    Expenses linked to a weekly report roll up into the report's
    total_expenses. The expense write and the report recomputation are
    committed together.
    """

    def __init__(self, db: Session):
        self.db = db
        self.expense_repo = ExpenseRepository(db)
        self.report_repo = ReportRepository(db)
        self.taxi_repo = TaxiRepository(db)

    def _check_links(self, report_id: int | None, taxi_id: int | None, tenant_id: int) -> None:
        """Linked report/taxi must belong to the same tenant"""
        if report_id is not None and not self.report_repo.get_by_id_and_tenant(report_id, tenant_id):
            raise NotFoundException("Report not found")
        if taxi_id is not None and not self.taxi_repo.get_by_id_and_tenant(taxi_id, tenant_id):
            raise NotFoundException("Taxi not found")

    def _recalculate_report_totals(self, *report_ids: int | None) -> None:
        """
        Recompute total_expenses for the given reports from their linked
        expenses. Pending expense changes must already be flushed.
        """
        for report_id in {rid for rid in report_ids if rid is not None}:
            report = self.report_repo.get_by_id(report_id)
            if report is None:
                continue
            report.total_expenses = self.expense_repo.get_report_total(report_id)
            logger.debug("Report %s total_expenses=%s", report_id, report.total_expenses)

    def _commit(self, *instances) -> None:
        try:
            self.expense_repo.commit(*instances)
        except StaleDataError:
            self.db.rollback()
            logger.warning("Report total recomputation lost a concurrent update")
            raise ConflictException("Report was modified by another request, reload and retry")

    def create_expense(self, data: ExpenseCreate, context: RequestContext) -> Expense:
        """
        Create an expense and update the linked report's total atomically.

        Raises:
            NotFoundException: If the linked report or taxi isn't in the caller's tenant
        """
        self._check_links(data.report_id, data.taxi_id, context.tenant_id)

        expense = Expense(
            tenant_id=context.tenant_id,
            report_id=data.report_id,
            taxi_id=data.taxi_id,
            category=data.category,
            amount=data.amount,
            reason=data.reason,
            receipt_url=data.receipt_url,
            date=data.date or date.today(),
            created_by_id=context.user_id,
        )
        expense = self.expense_repo.create_no_commit(expense)
        self._recalculate_report_totals(expense.report_id)
        self._commit(expense)

        logger.info("Expense %s created in tenant %s", expense.id, context.tenant_id)
        return expense

    def get_expense(self, expense_id: int, context: RequestContext) -> Expense:
        """
        Get expense by ID within the caller's tenant.

        Raises:
            NotFoundException: If expense doesn't exist or belongs to another tenant
        """
        expense = self.expense_repo.get_by_id_and_tenant(expense_id, context.tenant_id)
        if not expense:
            raise NotFoundException("Expense not found")
        return expense

    def list_expenses(self, context: RequestContext) -> list[Expense]:
        """All tenant expenses, most recent first"""
        return self.expense_repo.get_by_tenant(context.tenant_id)

    def update_expense(
        self, expense_id: int, data: ExpenseUpdate, context: RequestContext
    ) -> Expense:
        """
        Update an expense. Both the previous and the new report (if the
        expense moved or was unlinked) get their totals recomputed. An
        explicit null report_id or taxi_id removes that link.

        Raises:
            NotFoundException: Expense, or newly linked report/taxi, not in caller's tenant
        """
        expense = self.get_expense(expense_id, context)
        self._check_links(data.report_id, data.taxi_id, context.tenant_id)

        old_report_id = expense.report_id

        # An explicit null unlinks; an omitted field leaves the link alone
        if "report_id" in data.model_fields_set:
            expense.report_id = data.report_id
        if "taxi_id" in data.model_fields_set:
            expense.taxi_id = data.taxi_id
        if data.category is not None:
            expense.category = data.category
        if data.amount is not None:
            expense.amount = data.amount
        if data.reason is not None:
            expense.reason = data.reason
        if data.receipt_url is not None:
            expense.receipt_url = data.receipt_url
        if data.date is not None:
            expense.date = data.date

        self.expense_repo.flush()
        self._recalculate_report_totals(old_report_id, expense.report_id)
        self._commit(expense)
        return expense

    def delete_expense(self, expense_id: int, context: RequestContext) -> None:
        """
        Soft-delete an expense and update the linked report's total.

        Raises:
            NotFoundException: If expense doesn't exist or belongs to another tenant
        """
        expense = self.get_expense(expense_id, context)

        expense.soft_delete()
        self.expense_repo.flush()
        self._recalculate_report_totals(expense.report_id)
        self._commit()

        logger.info("Expense %s deleted in tenant %s", expense_id, context.tenant_id)
