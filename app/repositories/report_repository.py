from sqlalchemy.orm import Session
from app.models.weekly_report import WeeklyReport


class ReportRepository:
    """Repository for WeeklyReport data access"""

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(WeeklyReport).filter(WeeklyReport.deleted_at.is_(None))

    def get_by_id(self, report_id: int) -> WeeklyReport | None:
        """Get report by ID regardless of tenant. Only for internal recomputation."""
        return self._active().filter(WeeklyReport.id == report_id).first()

    def get_by_id_and_tenant(self, report_id: int, tenant_id: int) -> WeeklyReport | None:
        """
        Get report by ID, ensuring it belongs to the tenant.

        Returns:
            WeeklyReport or None if not found or belongs to different tenant
        """
        return (
            self._active()
            .filter(WeeklyReport.id == report_id, WeeklyReport.tenant_id == tenant_id)
            .first()
        )

    def get_by_tenant(self, tenant_id: int) -> list[WeeklyReport]:
        """All reports of a tenant, newest week first"""
        return (
            self._active()
            .filter(WeeklyReport.tenant_id == tenant_id)
            .order_by(WeeklyReport.week_start_date.desc(), WeeklyReport.id.desc())
            .all()
        )

    def get_by_driver(self, tenant_id: int, driver_id: int) -> list[WeeklyReport]:
        """A driver's own reports, newest week first"""
        return (
            self._active()
            .filter(WeeklyReport.tenant_id == tenant_id, WeeklyReport.driver_id == driver_id)
            .order_by(WeeklyReport.week_start_date.desc(), WeeklyReport.id.desc())
            .all()
        )

    def create(self, report: WeeklyReport) -> WeeklyReport:
        """Create a new report"""
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)
        return report

    def update(self, report: WeeklyReport) -> WeeklyReport:
        """Update a report (version-checked by the mapper)"""
        self.db.commit()
        self.db.refresh(report)
        return report

    def delete(self, report: WeeklyReport) -> None:
        """Soft-delete a report"""
        report.soft_delete()
        self.db.commit()
