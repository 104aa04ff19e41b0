"""Models package - Import all models for SQLAlchemy registration."""
from tripsplit.models.user import User
from tripsplit.models.trip import Trip, TripMember, TripInvite, MemberRole
from tripsplit.models.expense import Expense, ExpenseShare, SplitMode
from tripsplit.models.settlement import Settlement

__all__ = [
    "User",
    "Trip",
    "TripMember",
    "TripInvite",
    "MemberRole",
    "Expense",
    "ExpenseShare",
    "SplitMode",
    "Settlement",
]
