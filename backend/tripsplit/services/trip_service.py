"""
Trip service for trip, membership and invite business logic.
"""
import logging
from typing import List, Set, Tuple
from sqlalchemy import case
from sqlalchemy.orm import Session
from tripsplit.core.exceptions import NotFoundError, TripAccessError
from tripsplit.core.security import generate_invite_token
from tripsplit.db.session import transaction
from tripsplit.models.trip import Trip, TripMember, TripInvite, MemberRole
from tripsplit.models.user import User
from tripsplit.services.money import normalize_currency_code

logger = logging.getLogger(__name__)


def get_trip(trip_id: int, db: Session) -> Trip:
    """Return the trip or raise NotFoundError."""
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFoundError("Trip not found")
    return trip


def lock_trip(trip_id: int, db: Session) -> Trip:
    """
    Load the trip row with a row-level lock held until the transaction ends.

    Every write that validates against trip state (membership, ledger) takes
    this lock first, which serializes those writes per trip.
    """
    trip = db.query(Trip).filter(Trip.id == trip_id).with_for_update().first()
    if not trip:
        raise NotFoundError("Trip not found")
    return trip


def get_member_ids(trip_id: int, db: Session) -> Set[int]:
    """Ids of the users currently in the trip."""
    rows = db.query(TripMember.user_id).filter(TripMember.trip_id == trip_id).all()
    return {user_id for (user_id,) in rows}


def get_membership(trip_id: int, user_id: int, db: Session):
    return db.query(TripMember).filter(
        TripMember.trip_id == trip_id,
        TripMember.user_id == user_id
    ).first()


def require_member(trip_id: int, user_id: int, db: Session) -> Trip:
    """Return the trip if user_id belongs to it, otherwise raise."""
    trip = get_trip(trip_id, db)
    if not get_membership(trip_id, user_id, db):
        raise TripAccessError("Access denied to this trip")
    return trip


def list_trips(user_id: int, db: Session) -> List[Trip]:
    """Trips the user belongs to, newest first."""
    return db.query(Trip).join(TripMember).filter(
        TripMember.user_id == user_id
    ).order_by(Trip.created_at.desc(), Trip.id.desc()).all()


def create_trip(owner_id: int, name: str, currency_code: str, db: Session) -> Tuple[Trip, TripInvite]:
    """Create a trip, its owner membership and its permanent invite in one transaction."""
    code = normalize_currency_code(currency_code)
    with transaction(db):
        trip = Trip(owner_id=owner_id, name=name.strip(), currency_code=code)
        db.add(trip)
        db.flush()

        db.add(TripMember(trip_id=trip.id, user_id=owner_id, role=MemberRole.OWNER))
        invite = TripInvite(trip_id=trip.id, token=generate_invite_token(), created_by=owner_id)
        db.add(invite)

    db.refresh(trip)
    logger.info("Trip %s created by user %s (%s)", trip.id, owner_id, code)
    return trip, invite


def get_invite(trip_id: int, db: Session) -> TripInvite:
    """The trip's first (permanent) invite."""
    invite = db.query(TripInvite).filter(
        TripInvite.trip_id == trip_id
    ).order_by(TripInvite.id.asc()).first()
    if not invite:
        raise NotFoundError("No invite")
    return invite


def join_trip(token: str, user_id: int, db: Session) -> Tuple[Trip, bool]:
    """
    Redeem an invite token.

    Returns the trip and whether the user was already a member. Joining is
    idempotent: redeeming twice does not add a second membership.
    """
    with transaction(db):
        invite = db.query(TripInvite).filter(TripInvite.token == token).with_for_update().first()
        if not invite:
            raise NotFoundError("Invite not found")

        trip = lock_trip(invite.trip_id, db)
        if get_membership(trip.id, user_id, db):
            return trip, True

        db.add(TripMember(trip_id=trip.id, user_id=user_id, role=MemberRole.MEMBER))

    logger.info("User %s joined trip %s", user_id, trip.id)
    return trip, False


def delete_trip(trip_id: int, user_id: int, db: Session) -> None:
    """Delete a trip with all of its members, expenses and settlements. Owner only."""
    with transaction(db):
        trip = lock_trip(trip_id, db)
        if trip.owner_id != user_id:
            raise TripAccessError("Only the owner can delete this trip", code="owner_only")
        db.delete(trip)

    logger.info("Trip %s deleted by owner %s", trip_id, user_id)


def list_members(trip_id: int, user_id: int, db: Session) -> List[Tuple[TripMember, User]]:
    """Members of a trip with the requesting user first, then by name."""
    return db.query(TripMember, User).join(
        User, User.id == TripMember.user_id
    ).filter(
        TripMember.trip_id == trip_id
    ).order_by(
        case((TripMember.user_id == user_id, 0), else_=1),
        User.full_name.asc()
    ).all()
