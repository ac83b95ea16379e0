import dataclasses

import pytest

from app.core.exceptions import ForbiddenException
from app.core.permissions import (
    ALL_PERMISSIONS,
    ADD_REPORTS,
    DEFAULT_DRIVER_MASK,
    DEFAULT_MANAGER_MASK,
    DEFAULT_MECHANIC_MASK,
    DEFAULT_OWNER_MASK,
    DELETE_TAXIS,
    EDIT_DEPOSITS,
    EDIT_REPORTS,
    MANAGE_TENANTS,
    VIEW_REPORTS,
    VIEW_TAXIS,
    VIEW_USERS,
    RoleMasks,
    authorize,
    has_all_permissions,
    has_any_permission,
    has_permission,
    is_admin_mask,
    normalize_mask,
)
from app.models.base import PermissionMaskType


class TestBitLayout:
    """Permission bits and default role masks"""

    def test_bit_positions(self):
        assert VIEW_REPORTS == 1
        assert ADD_REPORTS == 2
        assert VIEW_TAXIS == 16
        assert VIEW_USERS == 1 << 16
        assert MANAGE_TENANTS == 1 << 20

    def test_default_masks(self):
        assert DEFAULT_DRIVER_MASK == 3
        assert DEFAULT_MECHANIC_MASK == VIEW_TAXIS | VIEW_REPORTS
        assert DEFAULT_OWNER_MASK == 0xFFFFF
        assert DEFAULT_OWNER_MASK & MANAGE_TENANTS == 0
        assert DEFAULT_MANAGER_MASK & EDIT_REPORTS
        assert DEFAULT_MANAGER_MASK & EDIT_DEPOSITS
        assert not DEFAULT_MANAGER_MASK & DELETE_TAXIS


class TestPermissionChecks:
    """has_permission / has_any_permission / has_all_permissions"""

    @pytest.mark.parametrize("admin_mask", [ALL_PERMISSIONS, -1])
    def test_admin_sentinel_grants_everything(self, admin_mask):
        """Both spellings of the admin mask grant every bit"""
        assert is_admin_mask(admin_mask)
        assert has_permission(admin_mask, MANAGE_TENANTS)
        assert has_any_permission(admin_mask, DELETE_TAXIS)
        assert has_all_permissions(admin_mask, DELETE_TAXIS, MANAGE_TENANTS)

    def test_zero_mask_grants_nothing(self):
        assert not has_permission(0, VIEW_REPORTS)
        assert not has_any_permission(0, VIEW_REPORTS, ADD_REPORTS)

    def test_driver_mask(self):
        assert has_permission(DEFAULT_DRIVER_MASK, VIEW_REPORTS)
        assert has_permission(DEFAULT_DRIVER_MASK, ADD_REPORTS)
        assert not has_permission(DEFAULT_DRIVER_MASK, EDIT_REPORTS)
        assert not has_permission(DEFAULT_DRIVER_MASK, VIEW_TAXIS)

    def test_any_vs_all(self):
        mask = VIEW_REPORTS | VIEW_TAXIS
        assert has_any_permission(mask, VIEW_TAXIS, DELETE_TAXIS)
        assert not has_all_permissions(mask, VIEW_TAXIS, DELETE_TAXIS)
        assert has_all_permissions(mask, VIEW_TAXIS, VIEW_REPORTS)

    def test_owner_lacks_manage_tenants(self):
        assert not has_permission(DEFAULT_OWNER_MASK, MANAGE_TENANTS)

    def test_normalize_mask(self):
        assert normalize_mask(-1) == ALL_PERMISSIONS
        assert normalize_mask(DEFAULT_OWNER_MASK) == DEFAULT_OWNER_MASK


class TestAuthorize:
    """Route-level guard decision"""

    def test_authorize_passes_with_any_bit(self):
        authorize(DEFAULT_MANAGER_MASK, DELETE_TAXIS, VIEW_TAXIS)

    def test_authorize_raises_without_bits(self):
        with pytest.raises(ForbiddenException):
            authorize(DEFAULT_DRIVER_MASK, VIEW_TAXIS)

    def test_authorize_admin(self):
        authorize(-1, MANAGE_TENANTS)


class TestRoleMasks:
    """Role name <-> mask table"""

    def test_permission_for_role(self):
        masks = RoleMasks()
        assert masks.permission_for_role("owner") == DEFAULT_OWNER_MASK
        assert masks.permission_for_role("admin") == ALL_PERMISSIONS
        assert masks.permission_for_role("driver") == DEFAULT_DRIVER_MASK

    def test_unknown_role_gets_driver_mask(self):
        assert RoleMasks().permission_for_role("chauffeur") == DEFAULT_DRIVER_MASK

    def test_role_name(self):
        masks = RoleMasks()
        assert masks.role_name(-1) == "admin"
        assert masks.role_name(ALL_PERMISSIONS) == "admin"
        assert masks.role_name(DEFAULT_OWNER_MASK) == "owner"
        assert masks.role_name(DEFAULT_MANAGER_MASK) == "manager"
        assert masks.role_name(DEFAULT_MECHANIC_MASK) == "mechanic"
        assert masks.role_name(DEFAULT_DRIVER_MASK) == "driver"
        assert masks.role_name(VIEW_REPORTS | DELETE_TAXIS) == "custom"

    def test_signed_admin_override_is_normalized(self):
        masks = RoleMasks(admin=-1)
        assert masks.admin == ALL_PERMISSIONS

    def test_owner_or_admin_gate(self):
        masks = RoleMasks()
        assert masks.is_owner_or_admin(DEFAULT_OWNER_MASK)
        assert masks.is_owner_or_admin(ALL_PERMISSIONS)
        assert masks.is_owner_or_admin(-1)
        # Holding one owner bit is not enough
        assert not masks.is_owner_or_admin(DEFAULT_DRIVER_MASK)
        assert not masks.is_owner_or_admin(DEFAULT_MANAGER_MASK)

    def test_plain_driver(self):
        masks = RoleMasks()
        assert masks.is_plain_driver(DEFAULT_DRIVER_MASK)
        assert not masks.is_plain_driver(DEFAULT_DRIVER_MASK | VIEW_TAXIS)

    def test_role_masks_are_immutable(self):
        masks = RoleMasks()
        with pytest.raises(dataclasses.FrozenInstanceError):
            masks.owner = 0

    def test_custom_masks_from_settings(self):
        masks = RoleMasks(driver=VIEW_REPORTS)
        assert masks.permission_for_role("driver") == VIEW_REPORTS
        assert masks.is_plain_driver(VIEW_REPORTS)


class TestPermissionStorage:
    """Signed INTEGER column <-> unsigned mask"""

    def test_admin_mask_stored_signed(self):
        column_type = PermissionMaskType()
        assert column_type.process_bind_param(ALL_PERMISSIONS, None) == -1
        assert column_type.process_result_value(-1, None) == ALL_PERMISSIONS

    def test_regular_mask_unchanged(self):
        column_type = PermissionMaskType()
        assert column_type.process_bind_param(DEFAULT_OWNER_MASK, None) == DEFAULT_OWNER_MASK
        assert column_type.process_result_value(DEFAULT_OWNER_MASK, None) == DEFAULT_OWNER_MASK

    def test_admin_user_round_trips_through_database(self, admin, db_session):
        from sqlalchemy import text
        from app.models.user import User

        raw = db_session.execute(
            text("SELECT permission FROM users WHERE id = :id"), {"id": admin.id}
        ).scalar()
        assert raw == -1

        db_session.expire_all()
        stored = db_session.query(User).filter(User.id == admin.id).one()
        assert stored.permission == ALL_PERMISSIONS
