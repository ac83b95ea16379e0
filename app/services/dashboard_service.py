from decimal import Decimal

from sqlalchemy.orm import Session

from app.models.request_context import RequestContext
from app.models.taxi import TaxiStatus
from app.models.weekly_report import ReportStatus
from app.repositories.expense_repository import ExpenseRepository
from app.repositories.report_repository import ReportRepository
from app.repositories.taxi_repository import TaxiRepository
from app.schemas.dashboard_schemas import DashboardStats


class DashboardService:
    """Tenant-wide summary figures"""

    def __init__(self, db: Session):
        self.db = db
        self.taxi_repo = TaxiRepository(db)
        self.report_repo = ReportRepository(db)
        self.expense_repo = ExpenseRepository(db)

    def get_stats(self, context: RequestContext) -> DashboardStats:
        """
        Compute dashboard stats for the caller's tenant.

        - active_drivers: distinct drivers assigned to an active taxi
        - pending_reports: reports still in draft
        - total_revenue: earnings of approved reports
        - total_expenses: every non-deleted expense of the tenant
        """
        taxis = self.taxi_repo.get_by_tenant(context.tenant_id)
        active_drivers = {
            taxi.assigned_driver_id
            for taxi in taxis
            if taxi.status == TaxiStatus.ACTIVE and taxi.assigned_driver_id is not None
        }

        reports = self.report_repo.get_by_tenant(context.tenant_id)
        pending_reports = sum(1 for r in reports if r.status == ReportStatus.DRAFT)
        total_revenue = sum(
            (r.earnings for r in reports if r.status == ReportStatus.APPROVED), Decimal("0")
        )

        total_expenses = self.expense_repo.get_tenant_total(context.tenant_id)

        return DashboardStats(
            total_taxis=len(taxis),
            active_drivers=len(active_drivers),
            pending_reports=pending_reports,
            total_revenue=float(total_revenue),
            total_expenses=float(total_expenses),
            net_revenue=float(total_revenue - total_expenses),
        )
