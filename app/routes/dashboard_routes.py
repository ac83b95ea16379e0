from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.permissions import VIEW_REPORTS
from app.database import get_db
from app.dependencies import require_permission
from app.models.request_context import RequestContext
from app.services.dashboard_service import DashboardService
from app.schemas.dashboard_schemas import DashboardStats

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    context: RequestContext = Depends(require_permission(VIEW_REPORTS)),
    db: Session = Depends(get_db),
):
    """Fleet totals for the tenant: taxis, active drivers, pending reports, revenue"""
    service = DashboardService(db)
    return service.get_stats(context)
