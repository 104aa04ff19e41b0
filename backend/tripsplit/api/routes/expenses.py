"""
Expense management routes.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
from tripsplit.db.session import get_db
from tripsplit.models.user import User
from tripsplit.schemas.expense import ExpenseCreate, ExpenseResponse
from tripsplit.api.dependencies import get_current_user
from tripsplit.api.routes.trips import check_trip_access
from tripsplit.services import expense_service

router = APIRouter(prefix="/trips/{trip_id}/expenses", tags=["expenses"])


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    trip_id: int,
    expense_data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create an expense with an equal or manual split."""
    check_trip_access(trip_id, current_user.id, db)
    return expense_service.create_expense_with_shares(trip_id, current_user.id, expense_data.root, db)


@router.get("", response_model=List[ExpenseResponse])
async def list_expenses(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List expenses of a trip, newest first."""
    check_trip_access(trip_id, current_user.id, db)
    return expense_service.list_expenses(trip_id, db)


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    trip_id: int,
    expense_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a single expense with its shares."""
    check_trip_access(trip_id, current_user.id, db)
    return expense_service.get_expense(trip_id, expense_id, db)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    trip_id: int,
    expense_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete an expense and its shares."""
    check_trip_access(trip_id, current_user.id, db)
    expense_service.delete_expense(trip_id, expense_id, current_user.id, db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
