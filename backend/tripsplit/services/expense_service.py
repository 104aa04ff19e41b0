"""
Expense service for expense-related business logic.
"""
import logging
from typing import List
from sqlalchemy.orm import Session, selectinload
from tripsplit.core.config import settings
from tripsplit.core.exceptions import NotFoundError, SplitValidationError, TripAccessError
from tripsplit.db.session import transaction
from tripsplit.models.expense import Expense, ExpenseShare, SplitMode
from tripsplit.models.trip import MemberRole
from tripsplit.schemas.expense import EqualExpenseCreate, ManualExpenseCreate
from tripsplit.services.allocator import ShareAllocation, allocate_equal, validate_manual
from tripsplit.services.money import Money
from tripsplit.services import trip_service

logger = logging.getLogger(__name__)


def allocate_shares(expense_data, amount_cents: int, member_ids) -> List[ShareAllocation]:
    """Dispatch on the split mode of a validated create body."""
    if isinstance(expense_data, EqualExpenseCreate):
        return allocate_equal(amount_cents, expense_data.participants, member_ids)
    if isinstance(expense_data, ManualExpenseCreate):
        return validate_manual(
            amount_cents,
            [(share.user_id, share.share_cents) for share in expense_data.shares],
            member_ids,
        )
    raise SplitValidationError("split_mode must be 'equal' or 'manual'", code="invalid_split_mode")


def create_expense_with_shares(trip_id: int, requester_id: int, expense_data, db: Session) -> Expense:
    """
    Create an expense and all of its shares atomically.

    The trip row is locked for the duration so membership cannot change
    between validation and insert, and a failure on any share insert rolls
    back the expense as well.
    """
    payer_id = expense_data.paid_by_user_id if expense_data.paid_by_user_id is not None else requester_id

    with transaction(db):
        trip = trip_service.lock_trip(trip_id, db)
        member_ids = trip_service.get_member_ids(trip_id, db)

        if requester_id not in member_ids:
            raise TripAccessError("Access denied to this trip")
        if payer_id not in member_ids:
            raise SplitValidationError("Payer must be a member of the trip", code="payer_not_member")
        if settings.REQUIRE_PAYER_IS_REQUESTER and payer_id != requester_id:
            raise TripAccessError("Payer must be the authenticated user", code="payer_not_requester")

        total = Money.positive(expense_data.amount_cents, expense_data.currency_code)
        if total.currency_code != trip.currency_code:
            raise SplitValidationError(
                f"currency_code must match the trip currency {trip.currency_code}",
                code="currency_mismatch",
            )

        shares = allocate_shares(expense_data, total.amount_minor_units, member_ids)

        expense = Expense(
            trip_id=trip_id,
            paid_by_user_id=payer_id,
            created_by=requester_id,
            description=expense_data.description,
            amount_cents=total.amount_minor_units,
            currency_code=total.currency_code,
            split_mode=SplitMode(expense_data.split_mode),
        )
        db.add(expense)
        db.flush()

        for share in shares:
            db.add(ExpenseShare(
                expense_id=expense.id,
                user_id=share.user_id,
                share_cents=share.share_cents
            ))

    db.refresh(expense)
    logger.info(
        "Expense %s created in trip %s: %s paid by user %s, %s split across %d",
        expense.id, trip_id, total, payer_id, expense.split_mode.value, len(shares)
    )
    return expense


def list_expenses(trip_id: int, db: Session) -> List[Expense]:
    """Expenses of a trip with their shares, newest first."""
    return db.query(Expense).options(
        selectinload(Expense.shares)
    ).filter(
        Expense.trip_id == trip_id
    ).order_by(Expense.created_at.desc(), Expense.id.desc()).all()


def get_expense(trip_id: int, expense_id: int, db: Session) -> Expense:
    """Return an expense of the trip or raise NotFoundError."""
    expense = db.query(Expense).options(
        selectinload(Expense.shares)
    ).filter(
        Expense.id == expense_id,
        Expense.trip_id == trip_id
    ).first()
    if not expense:
        raise NotFoundError("Expense not found")
    return expense


def delete_expense(trip_id: int, expense_id: int, user_id: int, db: Session) -> None:
    """
    Delete an expense and its shares.

    Allowed for the payer, the member who recorded it, or the trip owner.
    """
    with transaction(db):
        trip_service.lock_trip(trip_id, db)
        expense = get_expense(trip_id, expense_id, db)
        membership = trip_service.get_membership(trip_id, user_id, db)
        if not membership:
            raise TripAccessError("Access denied to this trip")
        if user_id not in (expense.paid_by_user_id, expense.created_by) and membership.role != MemberRole.OWNER:
            raise TripAccessError("Only the payer or the trip owner can delete this expense", code="not_expense_owner")
        db.delete(expense)

    logger.info("Expense %s deleted from trip %s by user %s", expense_id, trip_id, user_id)
