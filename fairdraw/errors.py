"""Error taxonomy raised by the lottery engine.

Every error carries a stable ``code`` so callers at the transport boundary can
report a precise label without parsing messages.
"""

from __future__ import annotations

from typing import Optional


class LotteryError(Exception):
    """Base class for all engine errors."""

    code: str = "LOTTERY_ERROR"

    def __init__(self, message: str, *, round_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.round_id = round_id

    def to_json(self) -> dict:
        return {"code": self.code, "message": self.message, "round_id": self.round_id}


class NotFound(LotteryError, LookupError):
    code = "NOT_FOUND"


class RoundNotFound(NotFound):
    """Raised when a round id does not exist."""

    def __init__(self, round_id: int) -> None:
        super().__init__(f"Round {round_id} does not exist", round_id=round_id)


class InvalidInput(LotteryError, ValueError):
    code = "INVALID_INPUT"


class NumberOutOfRange(InvalidInput):
    code = "NUMBER_OUT_OF_RANGE"


class PaymentMismatch(InvalidInput):
    code = "PAYMENT_MISMATCH"


class CommitmentMismatch(InvalidInput):
    """The revealed value does not open the commitment recorded at creation."""

    code = "COMMITMENT_MISMATCH"


class RoundClosed(LotteryError):
    code = "ROUND_CLOSED"


class TooEarly(LotteryError):
    code = "TOO_EARLY"


class AlreadySettled(LotteryError):
    code = "ALREADY_SETTLED"


class Unauthorized(LotteryError, PermissionError):
    code = "UNAUTHORIZED"


class NotProvisioned(LotteryError):
    """No deployment record exists yet."""

    code = "NOT_PROVISIONED"


__all__ = [
    "LotteryError",
    "NotFound",
    "RoundNotFound",
    "InvalidInput",
    "NumberOutOfRange",
    "PaymentMismatch",
    "CommitmentMismatch",
    "RoundClosed",
    "TooEarly",
    "AlreadySettled",
    "Unauthorized",
    "NotProvisioned",
]
