from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.permissions import ADD_DEPOSITS, DELETE_DEPOSITS, EDIT_DEPOSITS, VIEW_DEPOSITS
from app.database import get_db
from app.dependencies import require_permission
from app.models.request_context import RequestContext
from app.services.deposit_service import DepositService
from app.schemas.deposit_schemas import (
    DepositCreate,
    DepositUpdate,
    DepositResponse,
    DepositListResponse,
)

router = APIRouter()


@router.post("", response_model=DepositResponse, status_code=status.HTTP_201_CREATED)
async def create_deposit(
    data: DepositCreate,
    context: RequestContext = Depends(require_permission(ADD_DEPOSITS)),
    db: Session = Depends(get_db),
):
    """Record a bank deposit covering a period"""
    service = DepositService(db)
    return service.create_deposit(data, context)


@router.get("", response_model=DepositListResponse)
async def list_deposits(
    context: RequestContext = Depends(require_permission(VIEW_DEPOSITS)),
    db: Session = Depends(get_db),
):
    service = DepositService(db)
    deposits = service.list_deposits(context)
    return DepositListResponse(deposits=deposits, total=len(deposits))


@router.get("/{deposit_id}", response_model=DepositResponse)
async def get_deposit(
    deposit_id: int,
    context: RequestContext = Depends(require_permission(VIEW_DEPOSITS)),
    db: Session = Depends(get_db),
):
    service = DepositService(db)
    return service.get_deposit(deposit_id, context)


@router.put("/{deposit_id}", response_model=DepositResponse)
async def update_deposit(
    deposit_id: int,
    data: DepositUpdate,
    context: RequestContext = Depends(require_permission(EDIT_DEPOSITS)),
    db: Session = Depends(get_db),
):
    service = DepositService(db)
    return service.update_deposit(deposit_id, data, context)


@router.delete("/{deposit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_deposit(
    deposit_id: int,
    context: RequestContext = Depends(require_permission(DELETE_DEPOSITS)),
    db: Session = Depends(get_db),
):
    service = DepositService(db)
    service.delete_deposit(deposit_id, context)
    return None
