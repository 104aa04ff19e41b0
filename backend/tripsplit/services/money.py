"""
Integer minor-unit money type.

All ledger arithmetic is done on integer cents; floats are rejected at the
boundary so nothing downstream ever rounds.
"""
import re
from dataclasses import dataclass
from tripsplit.core.exceptions import SplitValidationError

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")

# Largest value a BigInteger money column holds.
MAX_MINOR_UNITS = 2 ** 63 - 1


def is_whole_cents(value) -> bool:
    """True for real ints only (bool is an int subclass and is excluded)."""
    return isinstance(value, int) and not isinstance(value, bool)


def is_storable_amount(value) -> bool:
    """True for whole cents in 1..MAX_MINOR_UNITS."""
    return is_whole_cents(value) and 0 < value <= MAX_MINOR_UNITS


def normalize_currency_code(code) -> str:
    """Uppercase and validate a 3-letter ISO currency code."""
    normalized = str(code or "").strip().upper()
    if not _CURRENCY_RE.match(normalized):
        raise SplitValidationError(
            "currency_code must be a 3-letter ISO code, e.g. USD",
            code="invalid_currency",
        )
    return normalized


@dataclass(frozen=True)
class Money:
    """An amount of integer minor units in one currency."""
    amount_minor_units: int
    currency_code: str

    def __post_init__(self):
        if not is_whole_cents(self.amount_minor_units):
            raise SplitValidationError("amount must be an integer number of cents", code="invalid_amount")
        object.__setattr__(self, "currency_code", normalize_currency_code(self.currency_code))

    @classmethod
    def positive(cls, amount_cents, currency_code: str) -> "Money":
        """Build an expense total, which must be > 0 and fit a money column."""
        money = cls(amount_cents, currency_code)
        if not is_storable_amount(money.amount_minor_units):
            raise SplitValidationError(
                f"amount_cents must be a positive integer up to {MAX_MINOR_UNITS}", code="invalid_amount"
            )
        return money

    def __str__(self) -> str:
        sign = "-" if self.amount_minor_units < 0 else ""
        major, minor = divmod(abs(self.amount_minor_units), 100)
        return f"{sign}{major}.{minor:02d} {self.currency_code}"
