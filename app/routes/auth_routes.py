from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.permissions import RoleMasks
from app.database import get_db
from app.dependencies import get_current_user, get_role_masks
from app.models.user import User
from app.services.auth_service import AuthService
from app.schemas.auth_schemas import (
    LoginRequest,
    LoginResponse,
    ProfileUpdate,
    RefreshRequest,
    RefreshResponse,
    UserResponse,
)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    role_masks: RoleMasks = Depends(get_role_masks),
):
    """Exchange email and password for an access token and a refresh token"""
    service = AuthService(db, role_masks)
    result = service.login(data.email, data.password)
    return LoginResponse(
        token=result.token,
        refresh_token=result.refresh_token,
        expires_at=result.expires_at,
        user=UserResponse.from_user(result.user, role_masks),
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    data: RefreshRequest,
    db: Session = Depends(get_db),
    role_masks: RoleMasks = Depends(get_role_masks),
):
    """Issue a new access token from a refresh token"""
    service = AuthService(db, role_masks)
    token, expires_at = service.refresh(data.refresh_token)
    return RefreshResponse(token=token, expires_at=expires_at)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    data: RefreshRequest,
    db: Session = Depends(get_db),
    role_masks: RoleMasks = Depends(get_role_masks),
):
    """Revoke the refresh token's session. Unknown tokens are accepted silently."""
    service = AuthService(db, role_masks)
    service.logout(data.refresh_token)
    return None


@router.get("/me", response_model=UserResponse)
async def me(
    user: User = Depends(get_current_user),
    role_masks: RoleMasks = Depends(get_role_masks),
):
    """Get the authenticated user"""
    return UserResponse.from_user(user, role_masks)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    role_masks: RoleMasks = Depends(get_role_masks),
):
    """Update the authenticated user's own name, phone or password"""
    service = AuthService(db, role_masks)
    user = service.update_profile(user, data)
    return UserResponse.from_user(user, role_masks)
