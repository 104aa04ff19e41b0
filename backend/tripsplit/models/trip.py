"""
Trip model and its membership and invite relations.
"""
from sqlalchemy import Column, String, Enum as SQLEnum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from tripsplit.db.base import BaseModel
import enum


class MemberRole(str, enum.Enum):
    """Trip membership role."""
    OWNER = "owner"
    MEMBER = "member"


class Trip(BaseModel):
    """Trip model representing a shared-expense group with one currency."""
    __tablename__ = "trips"

    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    currency_code = Column(String(3), nullable=False)  # Immutable after creation

    # Relationships
    owner = relationship("User", back_populates="owned_trips")
    members = relationship("TripMember", back_populates="trip", cascade="all, delete-orphan")
    invites = relationship("TripInvite", back_populates="trip", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="trip", cascade="all, delete-orphan")
    settlements = relationship("Settlement", back_populates="trip", cascade="all, delete-orphan")


class TripMember(BaseModel):
    """Junction table for Trip and User many-to-many relationship."""
    __tablename__ = "trip_members"

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(SQLEnum(MemberRole), default=MemberRole.MEMBER, nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="members")
    user = relationship("User", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint('trip_id', 'user_id', name='uq_trip_member'),
    )


class TripInvite(BaseModel):
    """Permanent, unlimited-use invite token for a trip."""
    __tablename__ = "trip_invites"

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(64), unique=True, nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="invites")
