"""Repository for Tenant model operations."""

from sqlalchemy.orm import Session
from app.models.tenant import Tenant


class TenantRepository:
    """Repository for Tenant model operations"""

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(Tenant).filter(Tenant.deleted_at.is_(None))

    def get_by_id(self, tenant_id: int) -> Tenant | None:
        """
        Get tenant by ID.

        Args:
            tenant_id: Tenant ID

        Returns:
            Tenant object or None if not found or soft-deleted
        """
        return self._active().filter(Tenant.id == tenant_id).first()

    def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        """
        Get tenant by subdomain.

        Soft-deleted tenants are included: the unique index still holds
        their subdomain.
        """
        return self.db.query(Tenant).filter(Tenant.subdomain == subdomain).first()

    def get_all(self) -> list[Tenant]:
        """
        Get all tenants.

        Returns:
            List of all non-deleted Tenant objects
        """
        return self._active().order_by(Tenant.id).all()

    def create(self, tenant: Tenant) -> Tenant:
        """
        Create a new tenant.

        Args:
            tenant: Tenant object to create

        Returns:
            Created Tenant object with ID populated
        """
        self.db.add(tenant)
        self.db.commit()
        self.db.refresh(tenant)
        return tenant

    def update(self, tenant: Tenant) -> Tenant:
        """
        Update an existing tenant.

        Args:
            tenant: Tenant object with updated fields

        Returns:
            Updated Tenant object
        """
        self.db.commit()
        self.db.refresh(tenant)
        return tenant

    def delete(self, tenant: Tenant) -> None:
        """
        Soft-delete a tenant.

        Tenant data stays in place for audit; the tenant simply stops
        resolving through this repository.

        Args:
            tenant: Tenant object to delete
        """
        tenant.soft_delete()
        self.db.commit()
