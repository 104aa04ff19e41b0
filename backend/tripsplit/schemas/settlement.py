"""
Pydantic schemas for Settlement entity.
"""
from pydantic import BaseModel
from datetime import datetime


class SettlementCreate(BaseModel):
    """Schema for recording a payment from the requester to another member."""
    to_user_id: int
    amount_cents: int


class SettlementResponse(BaseModel):
    """Schema for settlement response."""
    id: int
    trip_id: int
    from_user_id: int
    to_user_id: int
    amount_cents: int
    currency_code: str
    created_at: datetime

    class Config:
        from_attributes = True
