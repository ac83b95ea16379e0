from datetime import datetime
from pydantic import BaseModel, Field
from app.models.taxi import TaxiStatus


class TaxiCreate(BaseModel):
    """Schema for creating a new taxi"""

    license_plate: str = Field(..., min_length=1, max_length=50)
    model: str | None = Field(None, max_length=255)
    year: int | None = Field(None, ge=1900, le=2100)
    color: str | None = Field(None, max_length=50)
    vin: str | None = Field(None, max_length=100)
    status: TaxiStatus = TaxiStatus.ACTIVE
    assigned_driver_id: int | None = Field(None, gt=0)


class TaxiUpdate(BaseModel):
    """Schema for updating a taxi"""

    license_plate: str | None = Field(None, min_length=1, max_length=50)
    model: str | None = Field(None, max_length=255)
    year: int | None = Field(None, ge=1900, le=2100)
    color: str | None = Field(None, max_length=50)
    vin: str | None = Field(None, max_length=100)
    status: TaxiStatus | None = None
    assigned_driver_id: int | None = Field(None, gt=0)


class TaxiResponse(BaseModel):
    """Schema for taxi response"""

    id: int
    tenant_id: int
    license_plate: str
    model: str | None
    year: int | None
    color: str | None
    vin: str | None
    status: TaxiStatus
    assigned_driver_id: int | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaxiListResponse(BaseModel):
    """Schema for list of taxis"""

    taxis: list[TaxiResponse]
    total: int
