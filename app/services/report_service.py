import logging
from datetime import datetime, UTC
from decimal import Decimal

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
)
from app.core.permissions import EDIT_REPORTS
from app.models.request_context import RequestContext
from app.models.weekly_report import ReportStatus, WeeklyReport
from app.repositories.expense_repository import ExpenseRepository
from app.repositories.report_repository import ReportRepository
from app.repositories.taxi_repository import TaxiRepository
from app.schemas.report_schemas import ReportCreate, ReportUpdate

logger = logging.getLogger(__name__)


class ReportService:
    """
    Weekly report lifecycle.

    draft -> submitted -> approved | rejected

    - Only the report's driver submits.
    - Only owners/admins approve or reject, and only submitted reports.
    - Holders of EDIT_REPORTS edit anything not yet approved; a driver
      without it edits their own drafts only.
    - total_expenses is recomputed from linked expenses on every update.
    """

    def __init__(self, db: Session):
        self.db = db
        self.report_repo = ReportRepository(db)
        self.taxi_repo = TaxiRepository(db)
        self.expense_repo = ExpenseRepository(db)

    def _save(self, report: WeeklyReport) -> WeeklyReport:
        """Commit a report change, turning a version mismatch into a 409."""
        try:
            return self.report_repo.update(report)
        except StaleDataError:
            self.db.rollback()
            logger.warning("Concurrent modification of report %s", report.id)
            raise ConflictException("Report was modified by another request, reload and retry")

    def create_report(self, data: ReportCreate, context: RequestContext) -> WeeklyReport:
        """
        Create a draft report for the caller on one of the tenant's taxis.

        Raises:
            NotFoundException: If the taxi doesn't exist in the caller's tenant
        """
        taxi = self.taxi_repo.get_by_id_and_tenant(data.taxi_id, context.tenant_id)
        if not taxi:
            raise NotFoundException("Taxi not found")

        report = WeeklyReport(
            tenant_id=context.tenant_id,
            taxi_id=taxi.id,
            driver_id=context.user_id,
            week_start_date=data.week_start_date,
            earnings=data.earnings,
            total_expenses=Decimal("0"),
            status=ReportStatus.DRAFT,
            notes=data.notes,
        )
        report = self.report_repo.create(report)
        logger.info("Report %s created by user %s", report.id, context.user_id)
        return report

    def get_report(self, report_id: int, context: RequestContext) -> WeeklyReport:
        """
        Get report by ID within the caller's tenant.

        Raises:
            NotFoundException: If report doesn't exist or belongs to another tenant
        """
        report = self.report_repo.get_by_id_and_tenant(report_id, context.tenant_id)
        if not report:
            raise NotFoundException("Report not found")
        return report

    def list_reports(self, context: RequestContext) -> list[WeeklyReport]:
        """
        Plain drivers see their own reports, everyone else the whole tenant.
        Newest week first.
        """
        if context.is_plain_driver():
            return self.report_repo.get_by_driver(context.tenant_id, context.user_id)
        return self.report_repo.get_by_tenant(context.tenant_id)

    def update_report(
        self, report_id: int, data: ReportUpdate, context: RequestContext
    ) -> WeeklyReport:
        """
        Update a report and recompute its expense total.

        Raises:
            NotFoundException: Report not in caller's tenant
            ForbiddenException: Caller lacks EDIT_REPORTS and isn't the report's driver
            InvalidStateException: Approved report, or non-draft report edited by its driver
        """
        report = self.get_report(report_id, context)

        if context.has_permission(EDIT_REPORTS):
            if report.status == ReportStatus.APPROVED:
                raise InvalidStateException("Cannot edit approved reports")
        else:
            if report.driver_id != context.user_id:
                raise ForbiddenException("Not allowed to edit this report")
            if report.status != ReportStatus.DRAFT:
                raise InvalidStateException("Can only edit draft reports")

        if data.week_start_date is not None:
            report.week_start_date = data.week_start_date
        if data.earnings is not None:
            report.earnings = data.earnings
        if data.notes is not None:
            report.notes = data.notes

        report.total_expenses = self.expense_repo.get_report_total(report.id)

        return self._save(report)

    def submit_report(self, report_id: int, context: RequestContext) -> WeeklyReport:
        """
        Submit a draft report. Only the report's own driver may submit.

        Raises:
            NotFoundException: Report not in caller's tenant
            ForbiddenException: Caller is not the report's driver
            InvalidStateException: Report is not a draft
        """
        report = self.get_report(report_id, context)

        if report.driver_id != context.user_id:
            raise ForbiddenException("Only the report's driver can submit it")
        if report.status != ReportStatus.DRAFT:
            raise InvalidStateException("Report already submitted")

        report.status = ReportStatus.SUBMITTED
        report.submitted_at = datetime.now(UTC)

        report = self._save(report)
        logger.info("Report %s submitted by user %s", report.id, context.user_id)
        return report

    def approve_report(self, report_id: int, context: RequestContext) -> WeeklyReport:
        """
        Approve a submitted report (owner or admin).

        Raises:
            NotFoundException: Report not in caller's tenant
            ForbiddenException: Caller is not owner/admin
            InvalidStateException: Report is not submitted
        """
        report = self.get_report(report_id, context)

        if not context.is_owner_or_admin():
            raise ForbiddenException("Only owner or admin can approve reports")
        if report.status != ReportStatus.SUBMITTED:
            raise InvalidStateException("Report must be submitted first")

        report.status = ReportStatus.APPROVED
        report.approved_at = datetime.now(UTC)
        report.approved_by_id = context.user_id

        report = self._save(report)
        logger.info("Report %s approved by user %s", report.id, context.user_id)
        return report

    def reject_report(self, report_id: int, context: RequestContext) -> WeeklyReport:
        """
        Reject a submitted report (owner or admin). Rejected is terminal.

        Raises:
            NotFoundException: Report not in caller's tenant
            ForbiddenException: Caller is not owner/admin
            InvalidStateException: Report is not submitted
        """
        report = self.get_report(report_id, context)

        if not context.is_owner_or_admin():
            raise ForbiddenException("Only owner or admin can reject reports")
        if report.status != ReportStatus.SUBMITTED:
            raise InvalidStateException("Report must be submitted first")

        report.status = ReportStatus.REJECTED

        report = self._save(report)
        logger.info("Report %s rejected by user %s", report.id, context.user_id)
        return report

    def delete_report(self, report_id: int, context: RequestContext) -> None:
        """
        Soft-delete a report.

        Owners/admins delete in any status. A plain driver deletes only their
        own drafts. Anyone else is refused.

        Raises:
            NotFoundException: Report not in caller's tenant
            ForbiddenException: Caller may not delete this report
            InvalidStateException: Driver deleting a non-draft report
        """
        report = self.get_report(report_id, context)

        if not context.is_owner_or_admin():
            if not context.is_plain_driver() or report.driver_id != context.user_id:
                raise ForbiddenException("Not allowed to delete this report")
            if report.status != ReportStatus.DRAFT:
                raise InvalidStateException("Can only delete draft reports")

        try:
            self.report_repo.delete(report)
        except StaleDataError:
            self.db.rollback()
            raise ConflictException("Report was modified by another request, reload and retry")
        logger.info("Report %s deleted by user %s", report_id, context.user_id)
