"""
User model for authentication and user management.
"""
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from tripsplit.db.base import BaseModel


class User(BaseModel):
    """User model identified by email."""
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(100), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    memberships = relationship("TripMember", back_populates="user", cascade="all, delete-orphan")
    owned_trips = relationship("Trip", back_populates="owner")
