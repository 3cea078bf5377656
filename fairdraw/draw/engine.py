"""Settlement engine: accepts one reveal per round and computes its winners."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from sqlalchemy.orm import Session

from .commitment import CommitmentRegistry, DEFAULT_COMMITMENT_REGISTRY
from .winning_number import validate_number
from ..access import AccessControl
from ..errors import AlreadySettled, CommitmentMismatch, TooEarly
from ..models import SettlementEvent, Ticket
from ..store import RoundStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrawOutcome:
    """Value object describing a completed settlement.

    Attributes
    ----------
    round_id : int
        Settled round.
    winning_number : int
        The revealed number, now authoritative for the round.
    winner_count : int
        Number of tickets whose number equals ``winning_number``.
    winners : tuple[str, ...]
        Buyer of each winning ticket in purchase order. A buyer holding several
        winning tickets appears once per ticket.
    """

    round_id: int
    winning_number: int
    winner_count: int
    winners: tuple[str, ...]

    def to_json(self) -> dict:
        return {
            "round_id": self.round_id,
            "winning_number": self.winning_number,
            "winner_count": self.winner_count,
            "winners": list(self.winners),
        }


def match_winners(tickets: list[Ticket], winning_number: int) -> tuple[str, ...]:
    """Return the buyers of tickets matching ``winning_number`` in purchase order."""
    return tuple(t.buyer for t in tickets if t.number == winning_number)


class DrawEngine:
    """Engine that validates reveals, computes winners, and settles rounds."""

    def __init__(
        self,
        session: Session,
        access: AccessControl,
        *,
        store: Optional[RoundStore] = None,
        registry: Optional[CommitmentRegistry] = None,
    ) -> None:
        """Create a draw engine bound to a SQLAlchemy session.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session used for lookups and persistence.
        access : AccessControl
            Gate consulted before any state is read.
        store : Optional[RoundStore], default: None
            Store sharing ``session``; created on demand when omitted.
        registry : Optional[CommitmentRegistry], default: None
            Registry holding the commitment schemes rounds may reference.
            Typically omitted, in which case the default registry is used.
        """

        self._session = session
        self._access = access
        self._store = store or RoundStore(session)
        self._registry = registry or DEFAULT_COMMITMENT_REGISTRY

    def draw(
        self,
        round_id: int,
        winning_number: int,
        caller: str,
        *,
        now: int,
        salt: Optional[str] = None,
    ) -> DrawOutcome:
        """Reveal ``winning_number`` for ``round_id`` and settle the round.

        Parameters
        ----------
        round_id : int
            Round to settle.
        winning_number : int
            Revealed value. It must have been chosen independently of the
            tickets sold; when the round carries a commitment, it must open it.
        caller : str
            Identity performing the draw; must be the admin.
        now : int
            Epoch seconds read once by the caller for this draw.
        salt : Optional[str], default: None
            Reveal salt for rounds created with a commitment.

        Returns
        -------
        DrawOutcome
            Winning number, winner count, and winner list.

        Notes
        -----
        The steps run in this order, and nothing is written until all checks
        pass:

        1. Authorize ``caller``.
        2. Load the round; a settled round is rejected outright.
        3. Enforce ``now >= draw_time`` and the number range.
        4. Verify the reveal against the round's commitment, if one exists.
        5. Scan the tickets once for matches.
        6. Freeze the round and append a :class:`SettlementEvent`.

        Raises
        ------
        Unauthorized
            If ``caller`` is not the admin.
        RoundNotFound
            If the round does not exist.
        AlreadySettled
            If the round was settled by an earlier draw.
        TooEarly
            If ``now`` is before the round's draw time.
        NumberOutOfRange
            If ``winning_number`` is outside [1000, 9999].
        CommitmentMismatch
            If the reveal does not open the round's commitment.
        """

        self._access.require_admin(caller, action="draw")

        round_ = self._store.get_round_model(round_id)
        if round_.is_settled:
            raise AlreadySettled(
                f"Round {round_id} was already drawn with {round_.winning_number}",
                round_id=round_id,
            )
        if now < round_.draw_time:
            raise TooEarly(
                f"Round {round_id} cannot be drawn before {round_.draw_time} (now {now})",
                round_id=round_id,
            )
        validate_number(winning_number)
        self._verify_commitment(
            round_id,
            round_.commitment,
            round_.commitment_scheme,
            winning_number,
            salt,
        )

        # The number is fixed above; the ticket set is only read from here on.
        winners = match_winners(round_.tickets, winning_number)

        settled = self._store.settle_round(
            round_id, winning_number, len(winners), now=now
        )
        event = SettlementEvent(
            round_id=round_id,
            winning_number=winning_number,
            winner_count=len(winners),
            settled_by=self._access.admin,
            occurred_at=settled.settled_at,
        )
        self._session.add(event)
        self._session.flush()

        logger.info(
            "Round %s settled: winning_number=%s winner_count=%s",
            round_id,
            winning_number,
            len(winners),
        )
        return DrawOutcome(
            round_id=round_id,
            winning_number=winning_number,
            winner_count=len(winners),
            winners=winners,
        )

    def _verify_commitment(
        self,
        round_id: int,
        commitment: Optional[str],
        scheme_key: Optional[str],
        winning_number: int,
        salt: Optional[str],
    ) -> None:
        if commitment is None:
            # No binding recorded: admin authorization is the only control.
            return
        try:
            scheme = self._registry.get(scheme_key or "")
        except KeyError as exc:
            raise CommitmentMismatch(
                f"Round {round_id} uses unknown commitment scheme {scheme_key!r}",
                round_id=round_id,
            ) from exc
        if not scheme.verify(commitment, winning_number, salt):
            raise CommitmentMismatch(
                f"Reveal for round {round_id} does not match its commitment",
                round_id=round_id,
            )


__all__ = ["DrawEngine", "DrawOutcome", "match_winners"]
