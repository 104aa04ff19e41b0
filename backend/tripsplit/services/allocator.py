"""
Allocation of an expense amount into per-participant integer shares.
"""
import logging
from typing import Iterable, List, NamedTuple, Tuple
from tripsplit.core.exceptions import SplitValidationError
from tripsplit.services.money import MAX_MINOR_UNITS, is_storable_amount, is_whole_cents

logger = logging.getLogger(__name__)


class ShareAllocation(NamedTuple):
    """One participant's share of an expense, in cents."""
    user_id: int
    share_cents: int


def _require_positive_amount(amount_cents) -> None:
    if not is_storable_amount(amount_cents):
        raise SplitValidationError(
            f"amount_cents must be a positive integer up to {MAX_MINOR_UNITS}", code="invalid_amount"
        )


def _require_members(user_ids: Iterable[int], current_members, message: str) -> None:
    missing = [uid for uid in user_ids if uid not in current_members]
    if missing:
        logger.debug("Split rejected, non-member user ids: %s", missing)
        raise SplitValidationError(message, code="participant_not_member")


def dedupe_participants(participant_ids: Iterable[int]) -> List[int]:
    """Drop repeated ids, keeping the order in which each id was first seen."""
    seen = set()
    unique = []
    for uid in participant_ids:
        if not is_whole_cents(uid):
            raise SplitValidationError("participants invalid", code="invalid_participants")
        if uid not in seen:
            seen.add(uid)
            unique.append(uid)
    return unique


def allocate_equal(amount_cents: int, participant_ids: Iterable[int], current_members) -> List[ShareAllocation]:
    """
    Split amount_cents evenly across participants.

    Every participant receives amount // n cents and the first
    amount % n participants (in first-seen order) receive one cent more,
    so the shares always sum to amount_cents and differ by at most one cent.

    Args:
        amount_cents: Positive integer total.
        participant_ids: User ids in the order supplied by the caller;
            duplicates are ignored.
        current_members: Container of user ids currently in the trip.

    Raises:
        SplitValidationError: bad amount, empty or invalid participant list,
            or a participant who is not a trip member.
    """
    _require_positive_amount(amount_cents)
    unique = dedupe_participants(participant_ids or [])
    if not unique:
        raise SplitValidationError("participants array required for equal split", code="empty_participants")
    _require_members(unique, current_members, "One or more participants are not trip members")

    base, remainder = divmod(amount_cents, len(unique))
    return [
        ShareAllocation(user_id=uid, share_cents=base + (1 if index < remainder else 0))
        for index, uid in enumerate(unique)
    ]


def validate_manual(amount_cents: int, shares: Iterable[Tuple[int, int]], current_members) -> List[ShareAllocation]:
    """
    Check a caller-supplied split and return it unchanged.

    Each user may appear once, each share must be a non-negative integer,
    each user must be a trip member, and the shares must add up to
    amount_cents exactly.
    """
    _require_positive_amount(amount_cents)
    shares = list(shares or [])
    if not shares:
        raise SplitValidationError("shares array required for manual split", code="empty_shares")

    validated = []
    seen = set()
    total = 0
    for user_id, share_cents in shares:
        if not is_whole_cents(user_id) or not is_whole_cents(share_cents) or share_cents < 0:
            raise SplitValidationError("Invalid shares entry", code="invalid_share")
        if user_id in seen:
            raise SplitValidationError("Duplicate user in shares", code="duplicate_share_user")
        seen.add(user_id)
        total += share_cents
        validated.append(ShareAllocation(user_id=user_id, share_cents=share_cents))

    if total != amount_cents:
        raise SplitValidationError(
            f"Shares sum to {total} but amount_cents is {amount_cents}",
            code="share_sum_mismatch",
        )
    _require_members([s.user_id for s in validated], current_members, "One or more shares users are not trip members")
    return validated
