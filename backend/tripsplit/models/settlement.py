"""
Settlement model for recorded member-to-member payments.
"""
from sqlalchemy import Column, String, BigInteger, ForeignKey, Integer, CheckConstraint
from sqlalchemy.orm import relationship
from tripsplit.db.base import BaseModel


class Settlement(BaseModel):
    """A payment already made by from_user to to_user within a trip."""
    __tablename__ = "settlements"

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    from_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    to_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount_cents = Column(BigInteger, nullable=False)
    currency_code = Column(String(3), nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="settlements")
    from_user = relationship("User", foreign_keys=[from_user_id])
    to_user = relationship("User", foreign_keys=[to_user_id])

    __table_args__ = (
        CheckConstraint('amount_cents > 0', name='ck_settlement_amount_positive'),
        CheckConstraint('from_user_id <> to_user_id', name='ck_settlement_distinct_parties'),
    )
