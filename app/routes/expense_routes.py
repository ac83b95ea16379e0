from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.permissions import ADD_EXPENSES, DELETE_EXPENSES, EDIT_EXPENSES, VIEW_EXPENSES
from app.database import get_db
from app.dependencies import require_permission
from app.models.request_context import RequestContext
from app.services.expense_service import ExpenseService
from app.schemas.expense_schemas import (
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseResponse,
    ExpenseListResponse,
)

router = APIRouter()


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    data: ExpenseCreate,
    context: RequestContext = Depends(require_permission(ADD_EXPENSES)),
    db: Session = Depends(get_db),
):
    """
    Record an expense.

    If linked to a report, the report's total_expenses is updated in the
    same transaction.
    """
    service = ExpenseService(db)
    return service.create_expense(data, context)


@router.get("", response_model=ExpenseListResponse)
async def list_expenses(
    context: RequestContext = Depends(require_permission(VIEW_EXPENSES)),
    db: Session = Depends(get_db),
):
    """Get all expenses of the tenant, most recent first"""
    service = ExpenseService(db)
    expenses = service.list_expenses(context)
    return ExpenseListResponse(expenses=expenses, total=len(expenses))


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: int,
    context: RequestContext = Depends(require_permission(VIEW_EXPENSES)),
    db: Session = Depends(get_db),
):
    service = ExpenseService(db)
    return service.get_expense(expense_id, context)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    data: ExpenseUpdate,
    context: RequestContext = Depends(require_permission(EDIT_EXPENSES)),
    db: Session = Depends(get_db),
):
    """Update an expense; affected report totals are recomputed"""
    service = ExpenseService(db)
    return service.update_expense(expense_id, data, context)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    expense_id: int,
    context: RequestContext = Depends(require_permission(DELETE_EXPENSES)),
    db: Session = Depends(get_db),
):
    service = ExpenseService(db)
    service.delete_expense(expense_id, context)
    return None
