"""
Ledger and balance routes for the current user.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from tripsplit.db.session import get_db
from tripsplit.models.user import User
from tripsplit.schemas.ledger import LedgerResponse, LedgerEntryResponse, BalanceResponse
from tripsplit.api.dependencies import get_current_user
from tripsplit.api.routes.trips import check_trip_access
from tripsplit.services import ledger_service

router = APIRouter(prefix="/trips/{trip_id}", tags=["ledger"])


@router.get("/ledger", response_model=LedgerResponse)
async def get_ledger(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Who the current user owes, and who owes them, after settlements."""
    check_trip_access(trip_id, current_user.id, db)
    ledger = ledger_service.compute_ledger(trip_id, current_user.id, db)

    counterparty_ids = [e.user_id for e in ledger.debts + ledger.credits]
    names = {}
    if counterparty_ids:
        names = dict(
            db.query(User.id, User.full_name).filter(User.id.in_(counterparty_ids)).all()
        )

    return LedgerResponse(
        currency_code=ledger.currency_code,
        debts=[
            LedgerEntryResponse(user_id=e.user_id, full_name=names.get(e.user_id), amount_cents=e.amount_cents)
            for e in ledger.debts
        ],
        credits=[
            LedgerEntryResponse(user_id=e.user_id, full_name=names.get(e.user_id), amount_cents=e.amount_cents)
            for e in ledger.credits
        ]
    )


@router.get("/balance", response_model=BalanceResponse)
async def get_balance(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Net balance of the current user; positive means they owe money overall."""
    check_trip_access(trip_id, current_user.id, db)
    balance = ledger_service.compute_balance(trip_id, current_user.id, db)
    return BalanceResponse(balance_cents=balance.balance_cents, currency_code=balance.currency_code)
