import logging

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException, ValidationException
from app.models.request_context import RequestContext
from app.models.taxi import Taxi
from app.repositories.taxi_repository import TaxiRepository
from app.repositories.user_repository import UserRepository
from app.schemas.taxi_schemas import TaxiCreate, TaxiUpdate

logger = logging.getLogger(__name__)


class TaxiService:
    """Service layer for taxi business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.taxi_repo = TaxiRepository(db)
        self.user_repo = UserRepository(db)

    def _check_driver(self, driver_id: int | None, tenant_id: int) -> None:
        if driver_id is None:
            return
        if not self.user_repo.get_by_id_and_tenant(driver_id, tenant_id):
            raise ValidationException("Assigned driver must be a user of this tenant")

    def create_taxi(self, data: TaxiCreate, context: RequestContext) -> Taxi:
        """
        Create new taxi for the caller's tenant.

        Raises:
            ValidationException: If the assigned driver isn't in the tenant
        """
        self._check_driver(data.assigned_driver_id, context.tenant_id)

        taxi = Taxi(tenant_id=context.tenant_id, **data.model_dump())
        taxi = self.taxi_repo.create(taxi)
        logger.info("Taxi %s created in tenant %s", taxi.id, context.tenant_id)
        return taxi

    def get_taxi(self, taxi_id: int, context: RequestContext) -> Taxi:
        """
        Get taxi by ID within the caller's tenant.

        Raises:
            NotFoundException: If taxi doesn't exist or belongs to another tenant
        """
        taxi = self.taxi_repo.get_by_id_and_tenant(taxi_id, context.tenant_id)
        if not taxi:
            raise NotFoundException("Taxi not found")
        return taxi

    def list_taxis(self, context: RequestContext) -> list[Taxi]:
        return self.taxi_repo.get_by_tenant(context.tenant_id)

    def update_taxi(self, taxi_id: int, data: TaxiUpdate, context: RequestContext) -> Taxi:
        """
        Update taxi fields that are present in the payload.

        Raises:
            NotFoundException: If taxi not in caller's tenant
            ValidationException: If the assigned driver isn't in the tenant
        """
        taxi = self.get_taxi(taxi_id, context)
        changes = data.model_dump(exclude_none=True)
        self._check_driver(changes.get("assigned_driver_id"), context.tenant_id)

        for field, value in changes.items():
            setattr(taxi, field, value)

        return self.taxi_repo.update(taxi)

    def delete_taxi(self, taxi_id: int, context: RequestContext) -> None:
        """
        Soft-delete a taxi.

        Raises:
            NotFoundException: If taxi not in caller's tenant
        """
        taxi = self.get_taxi(taxi_id, context)
        self.taxi_repo.delete(taxi)
        logger.info("Taxi %s deleted in tenant %s", taxi_id, context.tenant_id)
