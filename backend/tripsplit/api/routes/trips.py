"""
Trip management routes.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
from tripsplit.db.session import get_db
from tripsplit.models.user import User
from tripsplit.models.trip import Trip
from tripsplit.schemas.trip import (
    TripCreate, TripResponse, TripDetailResponse, TripCreatedResponse,
    InviteResponse, JoinResponse, TripMemberResponse
)
from tripsplit.api.dependencies import get_current_user
from tripsplit.core.security import build_invite_url
from tripsplit.services import trip_service

router = APIRouter(prefix="/trips", tags=["trips"])


def check_trip_access(trip_id: int, user_id: int, db: Session) -> Trip:
    """Check if user has access to trip."""
    return trip_service.require_member(trip_id, user_id, db)


@router.get("", response_model=List[TripResponse])
async def list_trips(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List all trips for current user."""
    return trip_service.list_trips(current_user.id, db)


@router.post("", response_model=TripCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new trip and return its permanent invite link."""
    trip, invite = trip_service.create_trip(current_user.id, trip_data.name, trip_data.currency_code, db)
    return TripCreatedResponse(
        trip=TripResponse.model_validate(trip),
        invite_url=build_invite_url(invite.token)
    )


@router.post("/join/{token}", response_model=JoinResponse)
async def join_trip(
    token: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Redeem a permanent invite link."""
    trip, already_member = trip_service.join_trip(token, current_user.id, db)
    return JoinResponse(
        joined=True,
        trip_id=trip.id,
        trip_name=trip.name,
        message="Already a member" if already_member else None
    )


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get trip details."""
    trip = check_trip_access(trip_id, current_user.id, db)
    membership = trip_service.get_membership(trip_id, current_user.id, db)

    return TripDetailResponse(
        id=trip.id,
        owner_id=trip.owner_id,
        name=trip.name,
        currency_code=trip.currency_code,
        created_at=trip.created_at,
        owner_full_name=trip.owner.full_name,
        my_role=membership.role
    )


@router.get("/{trip_id}/invite", response_model=InviteResponse)
async def get_invite(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the permanent invite URL for a trip."""
    check_trip_access(trip_id, current_user.id, db)
    invite = trip_service.get_invite(trip_id, db)
    return InviteResponse(invite_url=build_invite_url(invite.token))


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a trip (owner only)."""
    trip_service.delete_trip(trip_id, current_user.id, db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{trip_id}/members", response_model=List[TripMemberResponse])
async def get_members(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List trip members, requester first."""
    check_trip_access(trip_id, current_user.id, db)

    return [
        TripMemberResponse(
            user_id=member.user_id,
            full_name=user.full_name,
            role=member.role
        )
        for member, user in trip_service.list_members(trip_id, current_user.id, db)
    ]
