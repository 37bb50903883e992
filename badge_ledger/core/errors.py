"""Ledger error taxonomy.

Every command validates all of its preconditions before touching storage
and raises the first violated one as a LedgerError subclass.  A raised
LedgerError always means "nothing was written".  None of these are fatal:
the HTTP layer maps each kind to a 4xx response.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for all rejected ledger commands."""

    kind = "LedgerError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthorizedError(LedgerError):
    kind = "Unauthorized"


class NotFoundError(LedgerError):
    kind = "NotFound"


class AlreadyExistsError(LedgerError):
    kind = "AlreadyExists"


class InvalidInputError(LedgerError):
    """Bad length, range, or a zero/negative amount."""

    kind = "InvalidInput"


class InsufficientBalanceError(LedgerError):
    kind = "InsufficientBalance"


class AlreadyRevokedError(LedgerError):
    kind = "AlreadyRevoked"


class ExpiredError(LedgerError):
    kind = "Expired"


class TransferFailedError(LedgerError):
    kind = "TransferFailed"


class RewardUnavailableError(LedgerError):
    """Reward is inactive or out of stock."""

    kind = "RewardUnavailable"
