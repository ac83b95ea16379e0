from sqlalchemy.orm import Session
from app.models.bank_deposit import BankDeposit


class DepositRepository:
    """Repository for BankDeposit model operations with multi-tenant support"""

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(BankDeposit).filter(BankDeposit.deleted_at.is_(None))

    def get_by_tenant(self, tenant_id: int) -> list[BankDeposit]:
        """Get all deposits for a tenant, most recent deposit first"""
        return (
            self._active()
            .filter(BankDeposit.tenant_id == tenant_id)
            .order_by(BankDeposit.deposit_date.desc(), BankDeposit.id.desc())
            .all()
        )

    def get_by_id_and_tenant(self, deposit_id: int, tenant_id: int) -> BankDeposit | None:
        """
        Get deposit ensuring it belongs to tenant (multi-tenant safety).

        Returns None if deposit doesn't exist or belongs to another tenant.
        """
        return (
            self._active()
            .filter(BankDeposit.id == deposit_id, BankDeposit.tenant_id == tenant_id)
            .first()
        )

    def create(self, deposit: BankDeposit) -> BankDeposit:
        """Create new deposit"""
        self.db.add(deposit)
        self.db.commit()
        self.db.refresh(deposit)
        return deposit

    def update(self, deposit: BankDeposit) -> BankDeposit:
        """Update existing deposit"""
        self.db.commit()
        self.db.refresh(deposit)
        return deposit

    def delete(self, deposit: BankDeposit) -> None:
        """Soft-delete deposit"""
        deposit.soft_delete()
        self.db.commit()
