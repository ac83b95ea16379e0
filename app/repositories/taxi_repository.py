from sqlalchemy.orm import Session
from app.models.taxi import Taxi


class TaxiRepository:
    """Repository for Taxi model operations with multi-tenant support"""

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(Taxi).filter(Taxi.deleted_at.is_(None))

    def get_by_tenant(self, tenant_id: int) -> list[Taxi]:
        """Get all taxis for a tenant"""
        return self._active().filter(Taxi.tenant_id == tenant_id).order_by(Taxi.id).all()

    def get_by_id_and_tenant(self, taxi_id: int, tenant_id: int) -> Taxi | None:
        """
        Get taxi ensuring it belongs to tenant (multi-tenant safety).

        Returns None if taxi doesn't exist or belongs to another tenant.
        """
        return self._active().filter(Taxi.id == taxi_id, Taxi.tenant_id == tenant_id).first()

    def create(self, taxi: Taxi) -> Taxi:
        """Create new taxi"""
        self.db.add(taxi)
        self.db.commit()
        self.db.refresh(taxi)
        return taxi

    def update(self, taxi: Taxi) -> Taxi:
        """Update existing taxi"""
        self.db.commit()
        self.db.refresh(taxi)
        return taxi

    def delete(self, taxi: Taxi) -> None:
        """Soft-delete taxi"""
        taxi.soft_delete()
        self.db.commit()
