from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException, ValidationException
from app.models.bank_deposit import BankDeposit
from app.models.request_context import RequestContext
from app.repositories.deposit_repository import DepositRepository
from app.schemas.deposit_schemas import DepositCreate, DepositUpdate


class DepositService:
    """Service layer for bank deposit business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.deposit_repo = DepositRepository(db)

    def create_deposit(self, data: DepositCreate, context: RequestContext) -> BankDeposit:
        """Record a deposit for the caller's tenant"""
        deposit = BankDeposit(tenant_id=context.tenant_id, **data.model_dump())
        return self.deposit_repo.create(deposit)

    def get_deposit(self, deposit_id: int, context: RequestContext) -> BankDeposit:
        """
        Get deposit by ID within the caller's tenant.

        Raises:
            NotFoundException: If deposit doesn't exist or belongs to another tenant
        """
        deposit = self.deposit_repo.get_by_id_and_tenant(deposit_id, context.tenant_id)
        if not deposit:
            raise NotFoundException("Deposit not found")
        return deposit

    def list_deposits(self, context: RequestContext) -> list[BankDeposit]:
        return self.deposit_repo.get_by_tenant(context.tenant_id)

    def update_deposit(
        self, deposit_id: int, data: DepositUpdate, context: RequestContext
    ) -> BankDeposit:
        """
        Update a deposit. The resulting period is checked against the
        stored values for whichever bound is not being changed.

        Raises:
            NotFoundException: If deposit not in caller's tenant
            ValidationException: If period_end would fall before period_start
        """
        deposit = self.get_deposit(deposit_id, context)
        changes = data.model_dump(exclude_none=True)

        period_start = changes.get("period_start", deposit.period_start)
        period_end = changes.get("period_end", deposit.period_end)
        if period_end < period_start:
            raise ValidationException("period_end must not be before period_start")

        for field, value in changes.items():
            setattr(deposit, field, value)

        return self.deposit_repo.update(deposit)

    def delete_deposit(self, deposit_id: int, context: RequestContext) -> None:
        """
        Soft-delete a deposit.

        Raises:
            NotFoundException: If deposit not in caller's tenant
        """
        deposit = self.get_deposit(deposit_id, context)
        self.deposit_repo.delete(deposit)
