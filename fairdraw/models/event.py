from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from .base import Base
from .utils import dt_iso

if TYPE_CHECKING:
    from .round import Round


class SettlementEvent(Base):
    """Append-only record emitted when a round is settled.

    External observers pull these rows; nothing is pushed.
    """

    __tablename__ = "settlement_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    round_id: Mapped[int] = mapped_column(
        ForeignKey("rounds.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )
    winning_number: Mapped[int] = mapped_column(Integer, nullable=False)
    winner_count: Mapped[int] = mapped_column(Integer, nullable=False)
    settled_by: Mapped[str] = mapped_column(String(64), nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    """Engine clock reading of the draw call, equal to the round's ``settled_at``."""

    round: Mapped["Round"] = relationship("Round")

    def __repr__(self) -> str:
        return (
            f"<SettlementEvent(round_id={self.round_id}, "
            f"winning_number={self.winning_number}, winner_count={self.winner_count})>"
        )

    def to_json(self) -> dict:
        return {
            "round_id": self.round_id,
            "winning_number": self.winning_number,
            "winner_count": self.winner_count,
            "settled_by": self.settled_by,
            "occurred_at": dt_iso(self.occurred_at),
        }

    @classmethod
    def for_round(cls, session: Session, round_id: int) -> Optional["SettlementEvent"]:
        return session.scalar(select(cls).where(cls.round_id == round_id))
