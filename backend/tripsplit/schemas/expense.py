"""
Pydantic schemas for Expense entity.

The create body is a tagged union on ``split_mode``: an equal split carries
the participant ids, a manual split carries explicit shares.
"""
from pydantic import BaseModel, Field, RootModel, field_validator
from typing import Annotated, List, Literal, Optional, Union
from datetime import datetime
from tripsplit.models.expense import SplitMode


class ShareIn(BaseModel):
    """One manual share entry."""
    user_id: int
    share_cents: int


class ExpenseCreateBase(BaseModel):
    """Fields common to every split mode."""
    description: str
    amount_cents: int
    currency_code: str
    paid_by_user_id: Optional[int] = None  # Defaults to the requester

    @field_validator("description")
    @classmethod
    def require_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Description is required")
        return v.strip()


class EqualExpenseCreate(ExpenseCreateBase):
    """Split evenly across participants."""
    split_mode: Literal["equal"]
    participants: List[int] = []


class ManualExpenseCreate(ExpenseCreateBase):
    """Split by caller-supplied shares that must sum to amount_cents."""
    split_mode: Literal["manual"]
    shares: List[ShareIn] = []


class ExpenseCreate(RootModel[Annotated[Union[EqualExpenseCreate, ManualExpenseCreate], Field(discriminator="split_mode")]]):
    """Create body, discriminated on split_mode."""


class ExpenseShareResponse(BaseModel):
    """Schema for expense share response."""
    user_id: int
    share_cents: int

    class Config:
        from_attributes = True


class ExpenseResponse(BaseModel):
    """Schema for expense response."""
    id: int
    trip_id: int
    paid_by_user_id: int
    created_by: int
    description: str
    amount_cents: int
    currency_code: str
    split_mode: SplitMode
    shares: List[ExpenseShareResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
