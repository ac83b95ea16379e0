from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.permissions import ADD_TAXIS, DELETE_TAXIS, EDIT_TAXIS, VIEW_TAXIS
from app.database import get_db
from app.dependencies import require_permission
from app.models.request_context import RequestContext
from app.services.taxi_service import TaxiService
from app.schemas.taxi_schemas import TaxiCreate, TaxiUpdate, TaxiResponse, TaxiListResponse

router = APIRouter()


@router.post("", response_model=TaxiResponse, status_code=status.HTTP_201_CREATED)
async def create_taxi(
    data: TaxiCreate,
    context: RequestContext = Depends(require_permission(ADD_TAXIS)),
    db: Session = Depends(get_db),
):
    """Add a taxi to the tenant's fleet"""
    service = TaxiService(db)
    return service.create_taxi(data, context)


@router.get("", response_model=TaxiListResponse)
async def list_taxis(
    context: RequestContext = Depends(require_permission(VIEW_TAXIS)),
    db: Session = Depends(get_db),
):
    """Get all taxis of the tenant"""
    service = TaxiService(db)
    taxis = service.list_taxis(context)
    return TaxiListResponse(taxis=taxis, total=len(taxis))


@router.get("/{taxi_id}", response_model=TaxiResponse)
async def get_taxi(
    taxi_id: int,
    context: RequestContext = Depends(require_permission(VIEW_TAXIS)),
    db: Session = Depends(get_db),
):
    service = TaxiService(db)
    return service.get_taxi(taxi_id, context)


@router.put("/{taxi_id}", response_model=TaxiResponse)
async def update_taxi(
    taxi_id: int,
    data: TaxiUpdate,
    context: RequestContext = Depends(require_permission(EDIT_TAXIS)),
    db: Session = Depends(get_db),
):
    service = TaxiService(db)
    return service.update_taxi(taxi_id, data, context)


@router.delete("/{taxi_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_taxi(
    taxi_id: int,
    context: RequestContext = Depends(require_permission(DELETE_TAXIS)),
    db: Session = Depends(get_db),
):
    service = TaxiService(db)
    service.delete_taxi(taxi_id, context)
    return None
