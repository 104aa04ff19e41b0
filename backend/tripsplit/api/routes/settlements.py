"""
Settlement management routes.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
from tripsplit.db.session import get_db
from tripsplit.models.user import User
from tripsplit.schemas.settlement import SettlementCreate, SettlementResponse
from tripsplit.api.dependencies import get_current_user
from tripsplit.api.routes.trips import check_trip_access
from tripsplit.services import settlement_service

router = APIRouter(prefix="/trips/{trip_id}/settlements", tags=["settlements"])


@router.post("", response_model=SettlementResponse, status_code=status.HTTP_201_CREATED)
async def create_settlement(
    trip_id: int,
    settlement_data: SettlementCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record a payment from the current user to another member."""
    check_trip_access(trip_id, current_user.id, db)
    return settlement_service.create_settlement(
        trip_id,
        current_user.id,
        settlement_data.to_user_id,
        settlement_data.amount_cents,
        db
    )


@router.get("", response_model=List[SettlementResponse])
async def list_settlements(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List settlements of a trip, newest first."""
    check_trip_access(trip_id, current_user.id, db)
    return settlement_service.list_settlements(trip_id, db)


@router.get("/{settlement_id}", response_model=SettlementResponse)
async def get_settlement(
    trip_id: int,
    settlement_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a single settlement."""
    check_trip_access(trip_id, current_user.id, db)
    return settlement_service.get_settlement(trip_id, settlement_id, db)


@router.delete("/{settlement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_settlement(
    trip_id: int,
    settlement_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a settlement; the debt it paid reappears in the ledger."""
    check_trip_access(trip_id, current_user.id, db)
    settlement_service.delete_settlement(trip_id, settlement_id, current_user.id, db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
