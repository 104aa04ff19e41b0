"""
Pydantic schemas for Trip entity.
"""
from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from tripsplit.models.trip import MemberRole


class TripCreate(BaseModel):
    """Schema for trip creation."""
    name: str
    currency_code: str

    @field_validator("name")
    @classmethod
    def require_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Trip name is required")
        return v.strip()


class TripResponse(BaseModel):
    """Schema for trip response."""
    id: int
    owner_id: int
    name: str
    currency_code: str
    created_at: datetime

    class Config:
        from_attributes = True


class TripDetailResponse(TripResponse):
    """Schema for detailed trip response."""
    owner_full_name: str
    my_role: MemberRole


class TripCreatedResponse(BaseModel):
    """Newly created trip with its shareable invite link."""
    trip: TripResponse
    invite_url: str


class InviteResponse(BaseModel):
    invite_url: str


class JoinResponse(BaseModel):
    """Result of redeeming an invite."""
    joined: bool
    trip_id: int
    trip_name: str
    message: Optional[str] = None


class TripMemberResponse(BaseModel):
    """Schema for trip member response."""
    user_id: int
    full_name: str
    role: MemberRole
