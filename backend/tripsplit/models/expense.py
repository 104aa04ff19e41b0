"""
Expense model and per-participant shares.
"""
from sqlalchemy import Column, String, BigInteger, Enum as SQLEnum, ForeignKey, Integer, Text, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from tripsplit.db.base import BaseModel
import enum


class SplitMode(str, enum.Enum):
    """How an expense amount was allocated to its participants."""
    EQUAL = "equal"
    MANUAL = "manual"


class Expense(BaseModel):
    """Expense model representing a single payment by one member."""
    __tablename__ = "expenses"

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    paid_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    description = Column(Text, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    currency_code = Column(String(3), nullable=False)
    split_mode = Column(SQLEnum(SplitMode), nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="expenses")
    payer = relationship("User", foreign_keys=[paid_by_user_id])
    shares = relationship("ExpenseShare", back_populates="expense", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint('amount_cents > 0', name='ck_expense_amount_positive'),
    )


class ExpenseShare(BaseModel):
    """
    One participant's portion of an expense.

    Shares of an expense sum to its amount_cents; this is checked when the
    expense is written and never re-validated on read.
    """
    __tablename__ = "expense_shares"

    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    share_cents = Column(BigInteger, nullable=False)

    # Relationships
    expense = relationship("Expense", back_populates="shares")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint('expense_id', 'user_id', name='uq_expense_share_user'),
        CheckConstraint('share_cents >= 0', name='ck_share_non_negative'),
    )
