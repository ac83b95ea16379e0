from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class DepositCreate(BaseModel):
    """Schema for recording a bank deposit"""

    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    deposit_date: date
    period_start: date
    period_end: date
    bank_account: Optional[str] = Field(None, max_length=255)
    proof_url: Optional[str] = Field(None, max_length=1024)
    notes: Optional[str] = Field(None, max_length=5000)

    @model_validator(mode="after")
    def check_period(self) -> "DepositCreate":
        if self.period_end < self.period_start:
            raise ValueError("period_end must not be before period_start")
        return self


class DepositUpdate(BaseModel):
    """Schema for updating a bank deposit (period checked against stored values)"""

    amount: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    deposit_date: Optional[date] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    bank_account: Optional[str] = Field(None, max_length=255)
    proof_url: Optional[str] = Field(None, max_length=1024)
    notes: Optional[str] = Field(None, max_length=5000)


class DepositResponse(BaseModel):
    """Schema for deposit response"""

    model_config = {"from_attributes": True}

    id: int
    tenant_id: int
    amount: float
    deposit_date: date
    period_start: date
    period_end: date
    bank_account: Optional[str]
    proof_url: Optional[str]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime


class DepositListResponse(BaseModel):
    """Schema for list of deposits"""

    deposits: list[DepositResponse]
    total: int
