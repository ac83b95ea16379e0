from datetime import datetime
from pydantic import BaseModel, Field

from app.core.permissions import RoleMasks
from app.models.user import User


class LoginRequest(BaseModel):
    """Credentials for POST /api/auth/login"""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    """Refresh token for POST /api/auth/refresh and /logout"""

    refresh_token: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own account"""

    first_name: str | None = Field(None, min_length=1, max_length=255)
    last_name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, min_length=1, max_length=50)
    password: str | None = Field(None, min_length=6)


class UserResponse(BaseModel):
    """User as returned to clients (never includes the password hash)"""

    id: int
    tenant_id: int
    email: str
    permission: int
    role: str
    first_name: str
    last_name: str
    phone: str | None
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @classmethod
    def from_user(cls, user: User, role_masks: RoleMasks) -> "UserResponse":
        return cls(
            id=user.id,
            tenant_id=user.tenant_id,
            email=user.email,
            permission=user.permission,
            role=role_masks.role_name(user.permission),
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
            active=user.active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class LoginResponse(BaseModel):
    """Access + refresh tokens and the authenticated user"""

    token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse


class RefreshResponse(BaseModel):
    """New access token; the refresh token is unchanged"""

    token: str
    token_type: str = "bearer"
    expires_at: datetime
