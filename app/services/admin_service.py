import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateKeyException, NotFoundException
from app.core.permissions import RoleMasks
from app.core.security import hash_password
from app.models.tenant import Tenant
from app.models.user import User
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository
from app.schemas.admin_schemas import TenantCreate, TenantUpdate, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class AdminService:
    """
    Cross-tenant administration of tenants and users.

    Callers are gated on MANAGE_TENANTS at the route; nothing here is
    tenant-scoped.
    """

    def __init__(self, db: Session, role_masks: RoleMasks):
        self.db = db
        self.role_masks = role_masks
        self.tenant_repo = TenantRepository(db)
        self.user_repo = UserRepository(db)

    # Tenants

    def _check_subdomain(self, subdomain: str) -> None:
        if self.tenant_repo.get_by_subdomain(subdomain):
            raise DuplicateKeyException("Subdomain already exists")

    def create_tenant(self, data: TenantCreate) -> Tenant:
        """
        Create a tenant.

        Raises:
            DuplicateKeyException: If the subdomain is taken
        """
        self._check_subdomain(data.subdomain)
        tenant = self.tenant_repo.create(Tenant(**data.model_dump()))
        logger.info("Tenant %s created (subdomain=%s)", tenant.id, tenant.subdomain)
        return tenant

    def list_tenants(self) -> list[Tenant]:
        return self.tenant_repo.get_all()

    def get_tenant(self, tenant_id: int) -> Tenant:
        """
        Raises:
            NotFoundException: If tenant doesn't exist or was deleted
        """
        tenant = self.tenant_repo.get_by_id(tenant_id)
        if not tenant:
            raise NotFoundException("Tenant not found")
        return tenant

    def update_tenant(self, tenant_id: int, data: TenantUpdate) -> Tenant:
        """
        Update tenant fields present in the payload.

        Raises:
            NotFoundException: If tenant doesn't exist
            DuplicateKeyException: If changing to a subdomain that is taken
        """
        tenant = self.get_tenant(tenant_id)
        changes = data.model_dump(exclude_none=True)

        new_subdomain = changes.get("subdomain")
        if new_subdomain is not None and new_subdomain != tenant.subdomain:
            self._check_subdomain(new_subdomain)

        for field, value in changes.items():
            setattr(tenant, field, value)

        return self.tenant_repo.update(tenant)

    def delete_tenant(self, tenant_id: int) -> None:
        tenant = self.get_tenant(tenant_id)
        self.tenant_repo.delete(tenant)
        logger.info("Tenant %s deleted", tenant_id)

    # Users

    def _check_email(self, email: str) -> None:
        # Login is by email alone, so emails are unique across tenants
        if self.user_repo.get_by_email(email):
            raise DuplicateKeyException("Email already exists")

    def _check_phone(self, phone: str | None) -> None:
        if phone is not None and self.user_repo.get_by_phone(phone):
            raise DuplicateKeyException("Phone number already exists")

    def _resolve_permission(self, permission: int | None, role) -> int | None:
        if permission is not None:
            return permission
        if role is not None:
            return self.role_masks.permission_for_role(role.value)
        return None

    def _commit_user(self, user: User, create: bool) -> User:
        try:
            return self.user_repo.create(user) if create else self.user_repo.update(user)
        except IntegrityError:
            # Soft-deleted rows still hold their unique keys
            self.db.rollback()
            raise DuplicateKeyException("User with this email or phone already exists")

    def create_user(self, data: UserCreate) -> User:
        """
        Create a user in an existing tenant.

        Raises:
            NotFoundException: If the tenant doesn't exist
            DuplicateKeyException: If email or phone is taken
        """
        self.get_tenant(data.tenant_id)
        self._check_email(data.email)
        self._check_phone(data.phone)

        user = User(
            tenant_id=data.tenant_id,
            email=data.email,
            password_hash=hash_password(data.password),
            permission=self._resolve_permission(data.permission, data.role),
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            active=data.active,
        )
        user = self._commit_user(user, create=True)
        logger.info(
            "User %s created in tenant %s (role=%s)",
            user.id,
            user.tenant_id,
            self.role_masks.role_name(user.permission),
        )
        return user

    def list_users(self) -> list[User]:
        return self.user_repo.get_all()

    def list_users_by_tenant(self, tenant_id: int) -> list[User]:
        """
        Raises:
            NotFoundException: If the tenant doesn't exist
        """
        self.get_tenant(tenant_id)
        return self.user_repo.get_by_tenant(tenant_id)

    def get_user(self, user_id: int) -> User:
        """
        Raises:
            NotFoundException: If user doesn't exist or was deleted
        """
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundException("User not found")
        return user

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        """
        Update a user. Omitted fields stay as they are.

        Raises:
            NotFoundException: If user or new tenant doesn't exist
            DuplicateKeyException: If changing to an email or phone that is taken
        """
        user = self.get_user(user_id)

        if data.tenant_id is not None and data.tenant_id != user.tenant_id:
            self.get_tenant(data.tenant_id)
            user.tenant_id = data.tenant_id
        if data.email is not None and data.email.lower() != user.email.lower():
            self._check_email(data.email)
            user.email = data.email
        if data.phone is not None and data.phone != user.phone:
            self._check_phone(data.phone)
            user.phone = data.phone
        if data.password is not None:
            user.password_hash = hash_password(data.password)

        permission = self._resolve_permission(data.permission, data.role)
        if permission is not None:
            user.permission = permission

        if data.first_name is not None:
            user.first_name = data.first_name
        if data.last_name is not None:
            user.last_name = data.last_name
        if data.active is not None:
            user.active = data.active

        return self._commit_user(user, create=False)

    def delete_user(self, user_id: int) -> None:
        """Soft-delete a user and revoke all of their sessions"""
        user = self.get_user(user_id)
        self.user_repo.delete(user)
        logger.info("User %s deleted", user_id)
