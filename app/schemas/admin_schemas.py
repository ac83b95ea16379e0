from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime

from app.core.permissions import ALL_PERMISSIONS, normalize_mask
from app.models.role import Role


class TenantCreate(BaseModel):
    """Create a tenant (admin only)"""

    name: str = Field(..., min_length=1, max_length=255)
    subdomain: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9][a-z0-9-]*$")
    logo: str | None = None
    settings: dict = Field(default_factory=dict)


class TenantUpdate(BaseModel):
    """Update tenant fields (admin only)"""

    name: str | None = Field(None, min_length=1, max_length=255)
    subdomain: str | None = Field(
        None, min_length=1, max_length=100, pattern=r"^[a-z0-9][a-z0-9-]*$"
    )
    logo: str | None = None
    settings: dict | None = None


class TenantResponse(BaseModel):
    """Tenant details response"""

    id: int
    name: str
    subdomain: str
    logo: str | None
    settings: dict
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


def _check_mask(value: int | None) -> int | None:
    if value is None:
        return None
    if value < -(1 << 31) or value > ALL_PERMISSIONS:
        raise ValueError("permission must fit in 32 bits")
    # -1 is the signed spelling of the admin mask
    return normalize_mask(value)


class UserCreate(BaseModel):
    """
    Create a user in a tenant (admin only).

    Give either an explicit ``permission`` mask or a legacy ``role`` name.
    """

    tenant_id: int = Field(..., gt=0)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6)
    permission: int | None = None
    role: Role | None = None
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    phone: str | None = Field(None, min_length=1, max_length=50)
    active: bool = True

    @field_validator("permission")
    @classmethod
    def normalize_permission(cls, value: int | None) -> int | None:
        return _check_mask(value)

    @model_validator(mode="after")
    def check_permission_source(self) -> "UserCreate":
        if self.permission is None and self.role is None:
            raise ValueError("either permission or role is required")
        return self


class UserUpdate(BaseModel):
    """Update a user (admin only); omitted fields are left unchanged"""

    tenant_id: int | None = Field(None, gt=0)
    email: str | None = Field(None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str | None = Field(None, min_length=6)
    permission: int | None = None
    role: Role | None = None
    first_name: str | None = Field(None, min_length=1, max_length=255)
    last_name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, min_length=1, max_length=50)
    active: bool | None = None

    @field_validator("permission")
    @classmethod
    def normalize_permission(cls, value: int | None) -> int | None:
        return _check_mask(value)
