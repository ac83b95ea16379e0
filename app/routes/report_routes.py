from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.permissions import ADD_REPORTS, VIEW_REPORTS
from app.database import get_db
from app.dependencies import require_permission
from app.models.request_context import RequestContext
from app.services.report_service import ReportService
from app.schemas.report_schemas import (
    ReportCreate,
    ReportUpdate,
    ReportResponse,
    ReportListResponse,
)

router = APIRouter()


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    data: ReportCreate,
    context: RequestContext = Depends(require_permission(ADD_REPORTS)),
    db: Session = Depends(get_db),
):
    """Create a draft weekly report for the authenticated driver"""
    service = ReportService(db)
    return service.create_report(data, context)


@router.get("", response_model=ReportListResponse)
async def list_reports(
    context: RequestContext = Depends(require_permission(VIEW_REPORTS)),
    db: Session = Depends(get_db),
):
    """
    List weekly reports, newest week first.

    Drivers only see their own reports.
    """
    service = ReportService(db)
    reports = service.list_reports(context)
    return ReportListResponse(reports=reports, total=len(reports))


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: int,
    context: RequestContext = Depends(require_permission(VIEW_REPORTS)),
    db: Session = Depends(get_db),
):
    """Get specific report"""
    service = ReportService(db)
    return service.get_report(report_id, context)


@router.put("/{report_id}", response_model=ReportResponse)
async def update_report(
    report_id: int,
    data: ReportUpdate,
    context: RequestContext = Depends(require_permission(VIEW_REPORTS)),
    db: Session = Depends(get_db),
):
    """
    Update a report.

    - Holders of EDIT_REPORTS: any report that is not approved
    - Drivers: their own drafts only
    """
    service = ReportService(db)
    return service.update_report(report_id, data, context)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: int,
    context: RequestContext = Depends(require_permission(VIEW_REPORTS)),
    db: Session = Depends(get_db),
):
    """Delete a report (owner/admin any status, drivers own drafts)"""
    service = ReportService(db)
    service.delete_report(report_id, context)
    return None


@router.post("/{report_id}/submit", response_model=ReportResponse)
async def submit_report(
    report_id: int,
    context: RequestContext = Depends(require_permission(VIEW_REPORTS)),
    db: Session = Depends(get_db),
):
    """Submit a draft report for approval (report's driver only)"""
    service = ReportService(db)
    return service.submit_report(report_id, context)


@router.post("/{report_id}/approve", response_model=ReportResponse)
async def approve_report(
    report_id: int,
    context: RequestContext = Depends(require_permission(VIEW_REPORTS)),
    db: Session = Depends(get_db),
):
    """Approve a submitted report (owner or admin)"""
    service = ReportService(db)
    return service.approve_report(report_id, context)


@router.post("/{report_id}/reject", response_model=ReportResponse)
async def reject_report(
    report_id: int,
    context: RequestContext = Depends(require_permission(VIEW_REPORTS)),
    db: Session = Depends(get_db),
):
    """Reject a submitted report (owner or admin)"""
    service = ReportService(db)
    return service.reject_report(report_id, context)
