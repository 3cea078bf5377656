"""Verifiable lottery engine: rounds, tickets, commit/reveal draws, and queries."""

from .access import AccessControl
from .draw import DrawEngine, DrawOutcome, make_commitment
from .lottery import Lottery
from .queries import QueryService
from .registration import RegistrationService
from .snapshots import LotteryStats, RoundSnapshot, TicketSnapshot
from .store import RoundStore

__all__ = [
    "AccessControl",
    "DrawEngine",
    "DrawOutcome",
    "Lottery",
    "LotteryStats",
    "QueryService",
    "RegistrationService",
    "RoundSnapshot",
    "RoundStore",
    "TicketSnapshot",
    "make_commitment",
]
