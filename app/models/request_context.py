"""Request context for authorization."""

from dataclasses import dataclass
from app.core.permissions import RoleMasks, has_permission, has_any_permission
from app.models.user import User


@dataclass
class RequestContext:
    """
    Ambient context for a request, derived from the validated access token.

    The tenant and permission come from the live User row, not from the
    token claims, so permission changes apply on the next request.

    Attributes:
        user: The authenticated User object
        role_masks: Role mask table in effect for this process
    """

    user: User
    role_masks: RoleMasks

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def tenant_id(self) -> int:
        return self.user.tenant_id

    @property
    def permission(self) -> int:
        return self.user.permission

    @property
    def role_name(self) -> str:
        return self.role_masks.role_name(self.permission)

    def has_permission(self, required: int) -> bool:
        return has_permission(self.permission, required)

    def has_any_permission(self, *required: int) -> bool:
        return has_any_permission(self.permission, *required)

    def is_owner_or_admin(self) -> bool:
        """Holds the full owner mask or is admin."""
        return self.role_masks.is_owner_or_admin(self.permission)

    def is_plain_driver(self) -> bool:
        """Mask is exactly the driver mask, nothing broader."""
        return self.role_masks.is_plain_driver(self.permission)

    def __repr__(self) -> str:
        return (
            f"<RequestContext(user_id={self.user_id}, tenant_id={self.tenant_id}, "
            f"role={self.role_name})>"
        )
