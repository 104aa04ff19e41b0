"""
Pydantic schemas for ledger and balance views.
"""
from pydantic import BaseModel
from typing import List, Optional


class LedgerEntryResponse(BaseModel):
    """Net amount between the requester and one counterparty."""
    user_id: int
    full_name: Optional[str] = None
    amount_cents: int


class LedgerResponse(BaseModel):
    """Debts owed by, and credits owed to, the requester. Largest first."""
    currency_code: str
    debts: List[LedgerEntryResponse] = []
    credits: List[LedgerEntryResponse] = []


class BalanceResponse(BaseModel):
    """Positive balance_cents means the requester is net in debt."""
    balance_cents: int
    currency_code: str
