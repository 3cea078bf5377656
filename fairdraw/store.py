"""Structural persistence operations over rounds and tickets.

The store enforces the data-model invariants only. Timing, pricing, and
authorization rules live in the services that call it.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from .errors import AlreadySettled, InvalidInput, RoundNotFound
from .models import ROUND_SETTLED, Round, Ticket
from .models.utils import epoch_to_datetime, require_int
from .snapshots import RoundSnapshot

logger = logging.getLogger(__name__)

ROUND_NAME_MAX_LENGTH = 255


class RoundStore:
    """Append-only collection of :class:`Round` rows bound to a session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create_round(
        self,
        name: str,
        draw_time: int,
        *,
        now: int,
        ticket_price: int,
        commitment: Optional[str] = None,
        commitment_scheme: Optional[str] = None,
    ) -> int:
        """Append a new open round and return its id.

        Parameters
        ----------
        name : str
            Human readable label; surrounding whitespace is trimmed.
        draw_time : int
            Epoch seconds. Must be strictly later than ``now``.
        now : int
            Epoch seconds read once by the caller for this operation.
        ticket_price : int
            Non-negative price of one ticket in the smallest currency unit.
        commitment, commitment_scheme : Optional[str]
            Optional reveal binding. Both or neither must be supplied.

        Returns
        -------
        int
            The new round id, equal to the number of rounds that existed before.

        Raises
        ------
        InvalidInput
            If the name is blank or too long, ``draw_time`` is not in the future,
            the price is negative, or the commitment fields are inconsistent.
        """

        if not isinstance(name, str) or not name.strip():
            raise InvalidInput("Round name must not be empty")
        name = name.strip()
        if len(name) > ROUND_NAME_MAX_LENGTH:
            raise InvalidInput(
                f"Round name must be at most {ROUND_NAME_MAX_LENGTH} characters"
            )
        require_int(draw_time, "draw_time")
        require_int(ticket_price, "ticket_price")
        if draw_time <= now:
            raise InvalidInput(
                f"draw_time {draw_time} must be later than the current time {now}"
            )
        if ticket_price < 0:
            raise InvalidInput("ticket_price must not be negative")
        if (commitment is None) != (commitment_scheme is None):
            raise InvalidInput(
                "commitment and commitment_scheme must be supplied together"
            )

        round_id = self.count()
        round_ = Round(
            id=round_id,
            name=name,
            draw_time=draw_time,
            ticket_price=ticket_price,
            commitment=commitment,
            commitment_scheme=commitment_scheme,
            created_at=epoch_to_datetime(now),
        )
        self._session.add(round_)
        self._session.flush()
        logger.debug("Stored round %s (draw_time=%s)", round_id, draw_time)
        return round_id

    def append_ticket(
        self,
        round_id: int,
        *,
        buyer: str,
        number: int,
        amount: int,
        now: int,
    ) -> Ticket:
        """Append a ticket to the round and bump its running totals."""

        round_ = self._load(round_id)
        ticket = Ticket(
            buyer=buyer,
            number=number,
            amount=amount,
            seq=round_.ticket_count,
            purchased_at=now,
        )
        round_.tickets.append(ticket)
        round_.ticket_count += 1
        round_.total_amount += amount
        self._session.flush()
        return ticket

    def settle_round(
        self,
        round_id: int,
        winning_number: int,
        winner_count: int,
        *,
        now: int,
    ) -> Round:
        """Freeze the round with its winning number and cached winner count.

        ``settled_at`` is taken from ``now``, the clock reading of the draw call.
        """

        round_ = self._load(round_id)
        if round_.is_settled:
            raise AlreadySettled(
                f"Round {round_id} is already settled", round_id=round_id
            )
        round_.state = ROUND_SETTLED
        round_.winning_number = winning_number
        round_.winner_count = winner_count
        round_.settled_at = epoch_to_datetime(now)
        self._session.flush()
        return round_

    def get_round(self, round_id: int, *, include_tickets: bool = True) -> RoundSnapshot:
        return RoundSnapshot.from_model(
            self._load(round_id, with_tickets=include_tickets),
            include_tickets=include_tickets,
        )

    def get_round_model(self, round_id: int) -> Round:
        """Return the live ORM row. Services use this; callers outside get snapshots."""
        return self._load(round_id)

    def count(self) -> int:
        return Round.count(self._session)

    def _load(self, round_id: int, *, with_tickets: bool = False) -> Round:
        if isinstance(round_id, bool) or not isinstance(round_id, int):
            raise RoundNotFound(round_id)
        # Round and tickets come from one SELECT so the snapshot is consistent.
        options = [joinedload(Round.tickets)] if with_tickets else None
        round_ = self._session.get(Round, round_id, options=options)
        if round_ is None:
            raise RoundNotFound(round_id)
        return round_


__all__ = ["RoundStore"]
