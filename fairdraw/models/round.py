"""Database models for lottery rounds and their tickets."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
    select,
)
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from .base import Base

ROUND_OPEN = "open"
ROUND_SETTLED = "settled"


class Round(Base):
    """A single lottery instance with its own deadline, tickets, and outcome."""

    __tablename__ = "rounds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    """Sequential round id assigned by the store (0, 1, 2, ...)."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    """Human readable label shown by the display layer."""

    draw_time: Mapped[int] = mapped_column(BigInteger, nullable=False)
    """Epoch seconds; tickets are accepted strictly before this instant."""

    ticket_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    """Price of one ticket in the smallest currency unit, fixed for the round."""

    state: Mapped[str] = mapped_column(String(20), nullable=False, default=ROUND_OPEN)
    """Lifecycle state, ``"open"`` or ``"settled"``."""

    winning_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    """Revealed winning number; ``None`` until settlement."""

    ticket_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    winner_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    commitment: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    """Binding recorded at creation that the reveal must open, if any."""

    commitment_scheme: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    """Key of the commitment scheme used to verify ``commitment``."""

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    """Engine clock reading of the call that created the round."""

    settled_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    tickets: Mapped[list["Ticket"]] = relationship(
        back_populates="round",
        order_by="Ticket.seq",
        cascade="all, delete-orphan",
    )
    """Tickets in purchase order."""

    __table_args__ = (
        CheckConstraint("state IN ('open','settled')", name="state_enum"),
        CheckConstraint(
            "(state = 'open' AND winning_number IS NULL) OR "
            "(state = 'settled' AND winning_number IS NOT NULL)",
            name="winning_number_on_settle",
        ),
        Index("ix_rounds_draw_time", "draw_time"),
    )

    def __init__(
        self,
        *,
        id: int,
        name: str,
        draw_time: int,
        ticket_price: int,
        commitment: Optional[str] = None,
        commitment_scheme: Optional[str] = None,
        created_at: datetime,
    ) -> None:
        # All columns are populated at construction, never defaulted on read.
        self.id = id
        self.name = name
        self.draw_time = draw_time
        self.ticket_price = ticket_price
        self.state = ROUND_OPEN
        self.winning_number = None
        self.ticket_count = 0
        self.total_amount = 0
        self.winner_count = 0
        self.commitment = commitment
        self.commitment_scheme = commitment_scheme
        self.created_at = created_at
        self.settled_at = None

    def __repr__(self) -> str:
        return (
            f"<Round(id={self.id}, name={self.name!r}, state={self.state}, "
            f"draw_time={self.draw_time}, ticket_count={self.ticket_count})>"
        )

    @property
    def is_open(self) -> bool:
        return self.state == ROUND_OPEN

    @property
    def is_settled(self) -> bool:
        return self.state == ROUND_SETTLED

    def accepts_tickets_at(self, now: int) -> bool:
        """Return ``True`` when a purchase at ``now`` falls inside the open window."""
        return self.is_open and now < self.draw_time

    def winning_tickets(self) -> list["Ticket"]:
        """Return the tickets matching the winning number, in purchase order."""
        if self.winning_number is None:
            return []
        return [t for t in self.tickets if t.number == self.winning_number]

    @classmethod
    def count(cls, session: Session) -> int:
        return session.scalar(select(func.count()).select_from(cls)) or 0


class Ticket(Base):
    """One registration of a guess number against a round."""

    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    round_id: Mapped[int] = mapped_column(
        ForeignKey("rounds.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    """Owning round."""

    seq: Mapped[int] = mapped_column(Integer, nullable=False)
    """Zero-based purchase position within the round."""

    buyer: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)

    purchased_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    """Epoch seconds read from the engine clock for the purchase call."""

    round: Mapped["Round"] = relationship(back_populates="tickets")

    __table_args__ = (
        UniqueConstraint("round_id", "seq", name="uq_ticket_round_seq"),
        CheckConstraint("number BETWEEN 1000 AND 9999", name="number_range"),
        CheckConstraint("amount >= 0", name="amount_non_negative"),
        Index("ix_tickets_round_number", "round_id", "number"),
    )

    def __init__(
        self,
        *,
        buyer: str,
        number: int,
        amount: int,
        seq: int,
        purchased_at: int,
        round: Optional[Round] = None,
        round_id: Optional[int] = None,
    ) -> None:
        self.buyer = buyer
        self.number = number
        self.amount = amount
        self.seq = seq
        self.purchased_at = purchased_at
        if round is not None:
            self.round = round
        if round_id is not None:
            self.round_id = round_id

    def __repr__(self) -> str:
        return (
            f"<Ticket(round_id={self.round_id}, seq={self.seq}, buyer={self.buyer}, "
            f"number={self.number}, amount={self.amount})>"
        )


__all__ = ["ROUND_OPEN", "ROUND_SETTLED", "Round", "Ticket"]
