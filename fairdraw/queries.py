"""Side-effect-free projections consumed by the display layer."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models import ROUND_OPEN, ROUND_SETTLED, Round, SettlementEvent
from .snapshots import LotteryStats, RoundSnapshot
from .store import RoundStore


class QueryService:
    """Read-only views over the rounds visible to ``session``."""

    def __init__(self, session: Session, *, store: Optional[RoundStore] = None) -> None:
        self._session = session
        self._store = store or RoundStore(session)

    def list_rounds(self) -> list[RoundSnapshot]:
        """Return round summaries, latest ``draw_time`` first (newest id breaks ties)."""
        stmt = select(Round).order_by(Round.draw_time.desc(), Round.id.desc())
        return [
            RoundSnapshot.from_model(r, include_tickets=False)
            for r in self._session.scalars(stmt).all()
        ]

    def get_round(self, round_id: int) -> RoundSnapshot:
        return self._store.get_round(round_id)

    def rounds_count(self) -> int:
        return self._store.count()

    def get_winners(self, round_id: int) -> list[str]:
        """Return the buyer of every winning ticket, in purchase order.

        Open rounds and rounds without a match return an empty list.
        """
        round_ = self._store.get_round_model(round_id)
        if not round_.is_settled or round_.winner_count == 0:
            return []
        return [ticket.buyer for ticket in round_.winning_tickets()]

    def aggregate_stats(self) -> LotteryStats:
        """Fold every round into totals with a single query."""
        stmt = select(
            func.count().filter(Round.state == ROUND_OPEN),
            func.count().filter(Round.state == ROUND_SETTLED),
            func.coalesce(func.sum(Round.total_amount), 0),
            func.coalesce(func.sum(Round.ticket_count), 0),
            func.coalesce(func.sum(Round.winner_count), 0),
        ).select_from(Round)
        active, settled, amount, tickets, winners = self._session.execute(stmt).one()
        return LotteryStats(
            active_rounds=int(active or 0),
            settled_rounds=int(settled or 0),
            total_amount=int(amount),
            total_tickets=int(tickets),
            total_winners=int(winners),
        )

    def settlement_events(self, round_id: Optional[int] = None) -> list[SettlementEvent]:
        """Return settlement events in emission order, optionally for one round."""
        if round_id is not None:
            event = SettlementEvent.for_round(self._session, round_id)
            return [event] if event is not None else []
        stmt = select(SettlementEvent).order_by(SettlementEvent.id.asc())
        return list(self._session.scalars(stmt).all())


__all__ = ["QueryService"]
