"""Ticket purchase rules: timing, number range, and payment."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from .draw.winning_number import validate_number
from .errors import PaymentMismatch, RoundClosed
from .models.utils import normalize_identity, require_int
from .snapshots import TicketSnapshot
from .store import RoundStore

logger = logging.getLogger(__name__)


class RegistrationService:
    """The only write path for tickets."""

    def __init__(self, session: Session, *, store: Optional[RoundStore] = None) -> None:
        self._session = session
        self._store = store or RoundStore(session)

    def buy_ticket(
        self,
        round_id: int,
        buyer: str,
        number: int,
        amount: int,
        *,
        now: int,
    ) -> TicketSnapshot:
        """Validate and record one ticket purchase.

        Checks run in a fixed order and all of them happen before the store is
        touched, so a rejected purchase leaves the round unchanged.

        Parameters
        ----------
        round_id : int
            Round to register against.
        buyer : str
            Identity of the registrant; canonicalized before storage.
        number : int
            Guess number in [1000, 9999].
        amount : int
            Payment attached to the ticket; must equal the round's ticket price.
        now : int
            Epoch seconds read once by the caller for this purchase.

        Returns
        -------
        TicketSnapshot
            The recorded ticket.

        Raises
        ------
        RoundNotFound
            If the round does not exist.
        RoundClosed
            If the round is settled or ``now`` is at or past its draw time.
        NumberOutOfRange
            If ``number`` is outside [1000, 9999].
        PaymentMismatch
            If ``amount`` differs from the round's ticket price.
        InvalidInput
            If ``buyer`` is empty or a numeric field is not an integer.
        """

        round_ = self._store.get_round_model(round_id)
        if not round_.accepts_tickets_at(now):
            reason = "is settled" if round_.is_settled else "is past its draw time"
            raise RoundClosed(
                f"Round {round_id} {reason}; registration is closed",
                round_id=round_id,
            )
        validate_number(number)
        require_int(amount, "amount")
        if amount != round_.ticket_price:
            raise PaymentMismatch(
                f"amount {amount} does not match ticket price {round_.ticket_price}",
                round_id=round_id,
            )
        canonical_buyer = normalize_identity(buyer)

        ticket = self._store.append_ticket(
            round_id,
            buyer=canonical_buyer,
            number=number,
            amount=amount,
            now=now,
        )
        logger.debug(
            "Ticket %s registered for round %s by %s", ticket.seq, round_id, canonical_buyer
        )
        return TicketSnapshot.from_model(ticket)


__all__ = ["RegistrationService"]
