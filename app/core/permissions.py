"""
Permission bit-mask model.

A permission is a single bit in a 32-bit mask. Users carry a mask, routes
and services ask whether the mask grants one or more bits.

The admin mask is every bit set. Masks are unsigned in Python; the signed
form (-1) only exists in the database column and is normalized by
``PermissionMaskType``. The checks below still accept -1 so callers holding
a raw database value are never locked out.
"""

from dataclasses import dataclass

from app.core.exceptions import ForbiddenException

MASK_BITS = 32
ALL_PERMISSIONS = (1 << MASK_BITS) - 1  # 0xFFFFFFFF

# Reports
VIEW_REPORTS = 1 << 0
ADD_REPORTS = 1 << 1
EDIT_REPORTS = 1 << 2
DELETE_REPORTS = 1 << 3

# Taxis
VIEW_TAXIS = 1 << 4
ADD_TAXIS = 1 << 5
EDIT_TAXIS = 1 << 6
DELETE_TAXIS = 1 << 7

# Expenses
VIEW_EXPENSES = 1 << 8
ADD_EXPENSES = 1 << 9
EDIT_EXPENSES = 1 << 10
DELETE_EXPENSES = 1 << 11

# Deposits
VIEW_DEPOSITS = 1 << 12
ADD_DEPOSITS = 1 << 13
EDIT_DEPOSITS = 1 << 14
DELETE_DEPOSITS = 1 << 15

# Users
VIEW_USERS = 1 << 16
ADD_USERS = 1 << 17
EDIT_USERS = 1 << 18
DELETE_USERS = 1 << 19

# Tenant management (admin only)
MANAGE_TENANTS = 1 << 20

DEFAULT_OWNER_MASK = (
    VIEW_REPORTS | ADD_REPORTS | EDIT_REPORTS | DELETE_REPORTS
    | VIEW_TAXIS | ADD_TAXIS | EDIT_TAXIS | DELETE_TAXIS
    | VIEW_EXPENSES | ADD_EXPENSES | EDIT_EXPENSES | DELETE_EXPENSES
    | VIEW_DEPOSITS | ADD_DEPOSITS | EDIT_DEPOSITS | DELETE_DEPOSITS
    | VIEW_USERS | ADD_USERS | EDIT_USERS | DELETE_USERS
)
DEFAULT_MANAGER_MASK = (
    VIEW_REPORTS | ADD_REPORTS | EDIT_REPORTS
    | VIEW_DEPOSITS | ADD_DEPOSITS | EDIT_DEPOSITS
    | VIEW_TAXIS
)
DEFAULT_MECHANIC_MASK = VIEW_TAXIS | VIEW_REPORTS
DEFAULT_DRIVER_MASK = VIEW_REPORTS | ADD_REPORTS


def normalize_mask(mask: int) -> int:
    """Fold any integer (including the signed -1) into the unsigned 32-bit range."""
    return mask & ALL_PERMISSIONS


def is_admin_mask(mask: int) -> bool:
    return normalize_mask(mask) == ALL_PERMISSIONS


def has_permission(user_mask: int, required: int) -> bool:
    """True if the mask is the admin sentinel or shares any bit with ``required``."""
    if is_admin_mask(user_mask):
        return True
    return normalize_mask(user_mask) & required != 0


def has_any_permission(user_mask: int, *required: int) -> bool:
    if is_admin_mask(user_mask):
        return True
    return any(normalize_mask(user_mask) & perm != 0 for perm in required)


def has_all_permissions(user_mask: int, *required: int) -> bool:
    if is_admin_mask(user_mask):
        return True
    mask = normalize_mask(user_mask)
    return all(mask & perm == perm for perm in required)


def authorize(user_mask: int, *required: int) -> None:
    """
    Route-level guard decision.

    Raises:
        ForbiddenException: If the mask grants none of the required bits
    """
    if not has_any_permission(user_mask, *required):
        raise ForbiddenException("Insufficient permissions")


@dataclass(frozen=True)
class RoleMasks:
    """
    Role name to permission mask table.

    Built once from settings at startup and passed to the components that
    need it. Instances are immutable.
    """

    admin: int = ALL_PERMISSIONS
    owner: int = DEFAULT_OWNER_MASK
    manager: int = DEFAULT_MANAGER_MASK
    mechanic: int = DEFAULT_MECHANIC_MASK
    driver: int = DEFAULT_DRIVER_MASK

    def __post_init__(self):
        for name in ("admin", "owner", "manager", "mechanic", "driver"):
            object.__setattr__(self, name, normalize_mask(getattr(self, name)))

    def permission_for_role(self, role: str) -> int:
        """Map a legacy role name to its mask. Unknown names get driver permissions."""
        return {
            "admin": self.admin,
            "owner": self.owner,
            "manager": self.manager,
            "mechanic": self.mechanic,
            "driver": self.driver,
        }.get(role, self.driver)

    def role_name(self, mask: int) -> str:
        """Best-effort display name for a mask. Never use for authorization."""
        mask = normalize_mask(mask)
        if mask == self.admin or is_admin_mask(mask):
            return "admin"
        for name in ("owner", "manager", "mechanic", "driver"):
            if mask == getattr(self, name):
                return name
        return "custom"

    def is_owner_or_admin(self, mask: int) -> bool:
        """Holds every owner bit, or is admin."""
        mask = normalize_mask(mask)
        return mask == self.admin or has_all_permissions(mask, self.owner)

    def is_plain_driver(self, mask: int) -> bool:
        return normalize_mask(mask) == self.driver
