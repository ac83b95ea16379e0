from datetime import date as date_type, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from app.models.expense import ExpenseCategory


class ExpenseCreate(BaseModel):
    """Schema for creating a new expense"""

    report_id: Optional[int] = Field(None, gt=0)
    taxi_id: Optional[int] = Field(None, gt=0)
    category: ExpenseCategory
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    reason: Optional[str] = Field(None, max_length=5000)
    receipt_url: Optional[str] = Field(None, max_length=1024)
    date: Optional[date_type] = Field(None, description="Defaults to today")


class ExpenseUpdate(BaseModel):
    """Schema for updating an expense"""

    report_id: Optional[int] = Field(None, gt=0)
    taxi_id: Optional[int] = Field(None, gt=0)
    category: Optional[ExpenseCategory] = None
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    reason: Optional[str] = Field(None, max_length=5000)
    receipt_url: Optional[str] = Field(None, max_length=1024)
    date: Optional[date_type] = None


class ExpenseResponse(BaseModel):
    """Schema for expense response"""

    model_config = {"from_attributes": True}

    id: int
    tenant_id: int
    report_id: Optional[int]
    taxi_id: Optional[int]
    category: ExpenseCategory
    amount: float
    reason: Optional[str]
    receipt_url: Optional[str]
    date: date_type
    created_by_id: int
    created_at: datetime
    updated_at: datetime


class ExpenseListResponse(BaseModel):
    """Schema for list of expenses"""

    expenses: list[ExpenseResponse]
    total: int
