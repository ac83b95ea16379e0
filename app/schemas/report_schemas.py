from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from app.models.weekly_report import ReportStatus


class ReportCreate(BaseModel):
    """Schema for creating a weekly report (always starts as draft)"""

    taxi_id: int = Field(..., gt=0)
    week_start_date: date
    earnings: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = Field(None, max_length=5000)


class ReportUpdate(BaseModel):
    """Schema for updating a weekly report (partial)"""

    week_start_date: Optional[date] = None
    earnings: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = Field(None, max_length=5000)


class ReportResponse(BaseModel):
    """Schema for weekly report response"""

    model_config = {"from_attributes": True}

    id: int
    tenant_id: int
    taxi_id: int
    driver_id: int
    week_start_date: date
    earnings: float
    total_expenses: float
    status: ReportStatus
    notes: Optional[str]
    submitted_at: Optional[datetime]
    approved_at: Optional[datetime]
    approved_by_id: Optional[int]
    version: int
    created_at: datetime
    updated_at: datetime


class ReportListResponse(BaseModel):
    """Schema for list of reports"""

    reports: list[ReportResponse]
    total: int
