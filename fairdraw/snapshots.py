"""Immutable read-side views handed out across the engine boundary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .models.utils import dt_iso

if TYPE_CHECKING:
    from .models import Round, Ticket


@dataclass(frozen=True)
class TicketSnapshot:
    """Read-only copy of a :class:`~fairdraw.models.Ticket`."""

    round_id: int
    seq: int
    buyer: str
    number: int
    amount: int
    purchased_at: int

    @classmethod
    def from_model(cls, ticket: "Ticket") -> "TicketSnapshot":
        return cls(
            round_id=ticket.round_id,
            seq=ticket.seq,
            buyer=ticket.buyer,
            number=ticket.number,
            amount=ticket.amount,
            purchased_at=ticket.purchased_at,
        )

    def to_json(self) -> dict:
        return {
            "round_id": self.round_id,
            "seq": self.seq,
            "buyer": self.buyer,
            "number": self.number,
            "amount": self.amount,
            "purchased_at": self.purchased_at,
        }


@dataclass(frozen=True)
class RoundSnapshot:
    """Read-only copy of a :class:`~fairdraw.models.Round`.

    Attributes
    ----------
    id : int
        Sequential round id.
    name : str
        Human readable label.
    draw_time : int
        Epoch seconds at which registration closes and the draw may run.
    ticket_price : int
        Price of one ticket in the smallest currency unit.
    state : str
        ``"open"`` or ``"settled"``.
    winning_number : Optional[int]
        Revealed winning number, ``None`` while open.
    ticket_count, total_amount, winner_count : int
        Round totals. ``winner_count`` is ``0`` until settlement.
    has_commitment : bool
        ``True`` when the round was bound to a commitment at creation.
    tickets : tuple[TicketSnapshot, ...]
        Tickets in purchase order. Empty for summaries.
    """

    id: int
    name: str
    draw_time: int
    ticket_price: int
    state: str
    winning_number: Optional[int]
    ticket_count: int
    total_amount: int
    winner_count: int
    has_commitment: bool
    created_at: Optional[str]
    settled_at: Optional[str]
    tickets: tuple[TicketSnapshot, ...] = ()

    @property
    def is_settled(self) -> bool:
        return self.state == "settled"

    @classmethod
    def from_model(cls, round_: "Round", *, include_tickets: bool = True) -> "RoundSnapshot":
        tickets: tuple[TicketSnapshot, ...] = ()
        if include_tickets:
            tickets = tuple(TicketSnapshot.from_model(t) for t in round_.tickets)
        return cls(
            id=round_.id,
            name=round_.name,
            draw_time=round_.draw_time,
            ticket_price=round_.ticket_price,
            state=round_.state,
            winning_number=round_.winning_number,
            ticket_count=round_.ticket_count,
            total_amount=round_.total_amount,
            winner_count=round_.winner_count,
            has_commitment=round_.commitment is not None,
            created_at=dt_iso(round_.created_at),
            settled_at=dt_iso(round_.settled_at),
            tickets=tickets,
        )

    def to_json(self, *, include_tickets: bool = False) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "draw_time": self.draw_time,
            "ticket_price": self.ticket_price,
            "state": self.state,
            "drawn": self.is_settled,
            "winning_number": self.winning_number,
            "ticket_count": self.ticket_count,
            "total_amount": self.total_amount,
            "winner_count": self.winner_count,
            "has_commitment": self.has_commitment,
            "created_at": self.created_at,
            "settled_at": self.settled_at,
        }
        if include_tickets:
            data["tickets"] = [t.to_json() for t in self.tickets]
        return data


@dataclass(frozen=True)
class LotteryStats:
    """Aggregate figures across every round."""

    active_rounds: int
    settled_rounds: int
    total_amount: int
    total_tickets: int
    total_winners: int

    def to_json(self) -> dict:
        return {
            "active_rounds": self.active_rounds,
            "settled_rounds": self.settled_rounds,
            "total_amount": self.total_amount,
            "total_tickets": self.total_tickets,
            "total_winners": self.total_winners,
        }


__all__ = ["LotteryStats", "RoundSnapshot", "TicketSnapshot"]
