from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import UnauthorizedException
from app.core.permissions import RoleMasks, authorize
from app.database import get_db
from app.models.request_context import RequestContext
from app.models.user import User
from app.services.auth_service import AuthService

security = HTTPBearer(auto_error=False)


def get_role_masks() -> RoleMasks:
    """Role mask table for this process (overridable in tests)."""
    return settings.role_masks


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
    role_masks: RoleMasks = Depends(get_role_masks),
) -> User:
    """
    FastAPI dependency to validate the access token and load the user.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT signature, expiry and token type
    3. Load the user named by the 'sub' claim
    4. Return the live User (current permission mask and active flag)

    Raises:
        HTTPException 401: If token missing, invalid or expired
        AccountInactiveException: If the user was deactivated (mapped to 403)
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return AuthService(db, role_masks).validate_token(credentials.credentials)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_request_context(
    user: User = Depends(get_current_user),
    role_masks: RoleMasks = Depends(get_role_masks),
) -> RequestContext:
    """
    FastAPI dependency building the request context.

    Tenant and permission always come from the authenticated user, never
    from the request payload.
    """
    return RequestContext(user=user, role_masks=role_masks)


def require_permission(*required: int):
    """
    Route guard: the caller's mask must grant at least one of ``required``.

    Usage:
        @router.get("", dependencies=[Depends(require_permission(VIEW_TAXIS))])

    or, to also receive the context:
        context: RequestContext = Depends(require_permission(VIEW_TAXIS))

    Raises:
        ForbiddenException: Insufficient permissions (mapped to 403)
    """

    async def dependency(
        context: RequestContext = Depends(get_request_context),
    ) -> RequestContext:
        authorize(context.permission, *required)
        return context

    return dependency
