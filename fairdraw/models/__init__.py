from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .round import ROUND_OPEN, ROUND_SETTLED, Round, Ticket  # noqa: F401
from .deployment import Deployment  # noqa: F401
from .event import SettlementEvent  # noqa: F401

__all__ = [
    "Base",
    "ROUND_OPEN",
    "ROUND_SETTLED",
    "Round",
    "Ticket",
    "Deployment",
    "SettlementEvent",
]
