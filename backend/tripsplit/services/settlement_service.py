"""
Settlement service: validating and recording payments between members.

A settlement is accepted only if the payer currently owes the recipient at
least the settlement amount, as computed by the ledger engine. The check is
stateless and re-run on every attempt, inside the same transaction as the
insert and under the trip lock.
"""
import logging
from typing import Container, List
from sqlalchemy.orm import Session
from tripsplit.core.exceptions import NotFoundError, SettlementValidationError, TripAccessError
from tripsplit.db.session import transaction
from tripsplit.models.settlement import Settlement
from tripsplit.models.trip import MemberRole
from tripsplit.services import ledger_service, trip_service
from tripsplit.services.money import MAX_MINOR_UNITS, is_storable_amount

logger = logging.getLogger(__name__)


def outstanding_debt(pair_net: int) -> int:
    """What the payer owes the recipient given the payer's net against them."""
    return max(0, -pair_net)


def check_settlement(
    from_user_id: int,
    to_user_id: int,
    amount_cents: int,
    current_members: Container[int],
    pair_net: int,
) -> int:
    """
    Check a proposed settlement against the payer's net with the recipient.

    Args:
        pair_net: Ledger net of from_user against to_user; negative when
            from_user owes to_user.

    Returns:
        The outstanding debt the settlement is drawn against.

    Raises:
        TripAccessError: the payer is not a trip member.
        SettlementValidationError: any other rule fails.
    """
    if not is_storable_amount(amount_cents):
        raise SettlementValidationError(
            f"amount_cents must be a positive integer up to {MAX_MINOR_UNITS}", code="invalid_amount"
        )
    if to_user_id == from_user_id:
        raise SettlementValidationError("Cannot settle with yourself", code="self_settlement")
    if from_user_id not in current_members:
        raise TripAccessError("Access denied to this trip")
    if to_user_id not in current_members:
        raise SettlementValidationError("Recipient is not a member of the trip", code="recipient_not_member")

    owed = outstanding_debt(pair_net)
    if owed <= 0:
        raise SettlementValidationError("No outstanding debt to this user", code="no_outstanding_debt")
    if amount_cents > owed:
        raise SettlementValidationError("Amount exceeds outstanding debt", code="exceeds_outstanding_debt")
    return owed


def validate_settlement(trip_id: int, from_user_id: int, to_user_id: int, amount_cents: int, db: Session) -> int:
    """Validate a settlement against the trip's current rows. Returns the outstanding debt."""
    member_ids = trip_service.get_member_ids(trip_id, db)
    nets = ledger_service.net_by_counterparty(
        from_user_id,
        ledger_service.load_share_rows(trip_id, from_user_id, db),
        ledger_service.load_settlement_rows(trip_id, from_user_id, db),
    )
    return check_settlement(from_user_id, to_user_id, amount_cents, member_ids, nets.get(to_user_id, 0))


def create_settlement(trip_id: int, from_user_id: int, to_user_id: int, amount_cents: int, db: Session) -> Settlement:
    """Validate and record a settlement from the requester to another member."""
    with transaction(db):
        trip = trip_service.lock_trip(trip_id, db)
        try:
            owed = validate_settlement(trip_id, from_user_id, to_user_id, amount_cents, db)
        except SettlementValidationError as exc:
            logger.debug("Settlement rejected in trip %s (%s): %s", trip_id, exc.code, exc.message)
            raise

        settlement = Settlement(
            trip_id=trip_id,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            amount_cents=amount_cents,
            currency_code=trip.currency_code,
        )
        db.add(settlement)

    db.refresh(settlement)
    logger.info(
        "Settlement %s recorded in trip %s: user %s paid user %s %d of %d cents owed",
        settlement.id, trip_id, from_user_id, to_user_id, amount_cents, owed
    )
    return settlement


def list_settlements(trip_id: int, db: Session) -> List[Settlement]:
    """Settlements of a trip, newest first."""
    return db.query(Settlement).filter(
        Settlement.trip_id == trip_id
    ).order_by(Settlement.created_at.desc(), Settlement.id.desc()).all()


def get_settlement(trip_id: int, settlement_id: int, db: Session) -> Settlement:
    """Return a settlement of the trip or raise NotFoundError."""
    settlement = db.query(Settlement).filter(
        Settlement.id == settlement_id,
        Settlement.trip_id == trip_id
    ).first()
    if not settlement:
        raise NotFoundError("Settlement not found")
    return settlement


def delete_settlement(trip_id: int, settlement_id: int, user_id: int, db: Session) -> None:
    """
    Delete a settlement. Allowed for either party or the trip owner.

    The ledger is recomputed on read, so the debt it paid down reappears on
    the next ledger read without a compensating entry.
    """
    with transaction(db):
        trip_service.lock_trip(trip_id, db)
        settlement = get_settlement(trip_id, settlement_id, db)
        membership = trip_service.get_membership(trip_id, user_id, db)
        if not membership:
            raise TripAccessError("Access denied to this trip")
        if user_id not in (settlement.from_user_id, settlement.to_user_id) and membership.role != MemberRole.OWNER:
            raise TripAccessError("Only a party to the settlement or the trip owner can delete it", code="not_settlement_party")
        db.delete(settlement)

    logger.info("Settlement %s deleted from trip %s by user %s", settlement_id, trip_id, user_id)
