"""
Ledger engine: who owes whom within a trip.

Balances are never stored. Every read recomputes them from the trip's
expense shares and settlements, so deleting an expense or settlement takes
effect on the next read with no compensating entry.

The computation for a subject user ``me`` runs in three passes:

1. Raw obligations. A share row where ``me`` participates in someone else's
   expense is a debt to the payer; a share row of another participant in an
   expense ``me`` paid is a credit from that participant. Self-shares are
   neither.
2. Settlements. Payments ``me -> c`` reduce the debt to ``c`` and payments
   ``c -> me`` reduce the credit from ``c``, each floored at zero on its own
   direction.
3. Netting. ``credit - debt`` per counterparty; positive is a credit entry,
   negative a debt entry, zero drops the counterparty.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session
from tripsplit.core.exceptions import NotFoundError
from tripsplit.models.expense import Expense, ExpenseShare
from tripsplit.models.settlement import Settlement
from tripsplit.models.trip import Trip


class ShareRow(NamedTuple):
    """Projection of an expense share joined with its expense payer."""
    payer_id: int
    user_id: int
    share_cents: int


class SettlementRow(NamedTuple):
    """Projection of a recorded settlement."""
    from_user_id: int
    to_user_id: int
    amount_cents: int


class LedgerEntry(NamedTuple):
    user_id: int
    amount_cents: int


@dataclass
class LedgerView:
    """Per-counterparty breakdown for one user in one trip."""
    currency_code: str
    debts: List[LedgerEntry] = field(default_factory=list)
    credits: List[LedgerEntry] = field(default_factory=list)

    @property
    def total_debt_cents(self) -> int:
        return sum(entry.amount_cents for entry in self.debts)

    @property
    def total_credit_cents(self) -> int:
        return sum(entry.amount_cents for entry in self.credits)

    @property
    def balance_cents(self) -> int:
        """Positive when the user is net in debt, negative when net owed."""
        return self.total_debt_cents - self.total_credit_cents

    def debt_to(self, user_id: int) -> int:
        for entry in self.debts:
            if entry.user_id == user_id:
                return entry.amount_cents
        return 0


@dataclass
class BalanceView:
    balance_cents: int
    currency_code: str


def raw_obligations(user_id: int, shares: Iterable[ShareRow]) -> Tuple[Dict[int, int], Dict[int, int]]:
    """Group share rows into (debts by payer, credits by participant) for user_id."""
    debts: Dict[int, int] = defaultdict(int)
    credits: Dict[int, int] = defaultdict(int)
    for row in shares:
        if row.user_id == user_id and row.payer_id != user_id:
            debts[row.payer_id] += row.share_cents
        elif row.payer_id == user_id and row.user_id != user_id:
            credits[row.user_id] += row.share_cents
    return dict(debts), dict(credits)


def settled_amounts(user_id: int, settlements: Iterable[SettlementRow]) -> Tuple[Dict[int, int], Dict[int, int]]:
    """Sum settlements into (paid by user_id to c, received by user_id from c)."""
    paid: Dict[int, int] = defaultdict(int)
    received: Dict[int, int] = defaultdict(int)
    for row in settlements:
        if row.from_user_id == user_id:
            paid[row.to_user_id] += row.amount_cents
        elif row.to_user_id == user_id:
            received[row.from_user_id] += row.amount_cents
    return dict(paid), dict(received)


def net_by_counterparty(
    user_id: int,
    shares: Iterable[ShareRow],
    settlements: Iterable[SettlementRow],
) -> Dict[int, int]:
    """
    Net position of user_id against each counterparty.

    Positive values are owed to user_id, negative values are owed by user_id.
    Only counterparties with a raw debt or credit are considered, and fully
    settled counterparties (net zero) are left out.
    """
    debts_raw, credits_raw = raw_obligations(user_id, shares)
    paid, received = settled_amounts(user_id, settlements)

    nets = {}
    for counterparty in set(debts_raw) | set(credits_raw):
        debt = max(0, debts_raw.get(counterparty, 0) - paid.get(counterparty, 0))
        credit = max(0, credits_raw.get(counterparty, 0) - received.get(counterparty, 0))
        net = credit - debt
        if net != 0:
            nets[counterparty] = net
    return nets


def _sorted_entries(entries: List[LedgerEntry]) -> List[LedgerEntry]:
    return sorted(entries, key=lambda e: (-e.amount_cents, e.user_id))


def build_ledger(
    user_id: int,
    currency_code: str,
    shares: Iterable[ShareRow],
    settlements: Iterable[SettlementRow],
) -> LedgerView:
    """Turn per-counterparty nets into debt and credit lists, largest first."""
    debts = []
    credits = []
    for counterparty, net in net_by_counterparty(user_id, shares, settlements).items():
        if net > 0:
            credits.append(LedgerEntry(counterparty, net))
        else:
            debts.append(LedgerEntry(counterparty, -net))
    return LedgerView(
        currency_code=currency_code,
        debts=_sorted_entries(debts),
        credits=_sorted_entries(credits),
    )


def load_share_rows(trip_id: int, user_id: int, db: Session) -> List[ShareRow]:
    """Fetch the share rows of a trip that involve user_id as payer or participant."""
    rows = db.query(
        Expense.paid_by_user_id, ExpenseShare.user_id, ExpenseShare.share_cents
    ).join(
        Expense, ExpenseShare.expense_id == Expense.id
    ).filter(
        Expense.trip_id == trip_id,
        or_(ExpenseShare.user_id == user_id, Expense.paid_by_user_id == user_id)
    ).all()
    return [ShareRow(payer_id, uid, cents) for payer_id, uid, cents in rows]


def load_settlement_rows(trip_id: int, user_id: int, db: Session) -> List[SettlementRow]:
    """Fetch the settlements of a trip sent or received by user_id."""
    rows = db.query(
        Settlement.from_user_id, Settlement.to_user_id, Settlement.amount_cents
    ).filter(
        Settlement.trip_id == trip_id,
        or_(Settlement.from_user_id == user_id, Settlement.to_user_id == user_id)
    ).all()
    return [SettlementRow(from_id, to_id, cents) for from_id, to_id, cents in rows]


def compute_ledger(trip_id: int, user_id: int, db: Session) -> LedgerView:
    """Compute the ledger view of user_id in a trip from stored rows."""
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFoundError("Trip not found")
    return build_ledger(
        user_id,
        trip.currency_code,
        load_share_rows(trip_id, user_id, db),
        load_settlement_rows(trip_id, user_id, db),
    )


def compute_balance(trip_id: int, user_id: int, db: Session) -> BalanceView:
    """Compute the signed scalar balance of user_id in a trip."""
    ledger = compute_ledger(trip_id, user_id, db)
    return BalanceView(balance_cents=ledger.balance_cents, currency_code=ledger.currency_code)
