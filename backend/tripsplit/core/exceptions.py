"""
Domain exceptions raised by the ledger engine and services.

Each exception carries a short machine-readable ``code`` naming the rule that
failed and a human-readable ``message``. Exception handlers registered in
``tripsplit.main`` turn them into JSON responses.
"""


class TripsplitError(Exception):
    """Base class for all domain errors."""

    status_code = 400
    default_code = "error"

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class SplitValidationError(TripsplitError):
    """Invalid expense amount or participant split."""

    default_code = "invalid_split"


class SettlementValidationError(TripsplitError):
    """Proposed settlement is inconsistent with the current ledger."""

    default_code = "invalid_settlement"


class TripAccessError(TripsplitError):
    """Caller is not allowed to act on the trip."""

    status_code = 403
    default_code = "no_access"


class NotFoundError(TripsplitError):
    """Referenced record does not exist."""

    status_code = 404
    default_code = "not_found"
