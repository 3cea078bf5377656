"""Environment-driven settings for provisioning and the engine facade."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_TICKET_PRICE = 10
DEFAULT_NETWORK = "local"


@dataclass(frozen=True)
class Settings:
    """Values read from the environment (and ``.env`` when present).

    Attributes
    ----------
    db_url : Optional[str]
        SQLAlchemy URL; ``None`` falls back to the SQLite default in
        :mod:`fairdraw.db.engine`.
    admin_address : Optional[str]
        Identity allowed to create and draw rounds. Only read at provisioning.
    ticket_price : int
        Default ticket price in the smallest currency unit.
    engine_address : Optional[str]
        Address or interface identifier published to the display layer.
    network : str
        Label of the network the engine is reachable on.
    beacon_base_url : Optional[str]
        Base URL of the randomness beacon used by the operator tooling.
    """

    db_url: Optional[str]
    admin_address: Optional[str]
    ticket_price: int
    engine_address: Optional[str]
    network: str
    beacon_base_url: Optional[str]

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        raw_price = os.getenv("LOTTERY_TICKET_PRICE")
        try:
            ticket_price = int(raw_price) if raw_price else DEFAULT_TICKET_PRICE
        except ValueError as exc:
            raise ValueError(
                f"LOTTERY_TICKET_PRICE must be an integer, got {raw_price!r}"
            ) from exc
        return cls(
            db_url=os.getenv("DB_URL") or None,
            admin_address=os.getenv("LOTTERY_ADMIN_ADDRESS") or None,
            ticket_price=ticket_price,
            engine_address=os.getenv("LOTTERY_ENGINE_ADDRESS") or None,
            network=os.getenv("LOTTERY_NETWORK") or DEFAULT_NETWORK,
            beacon_base_url=os.getenv("BEACON_BASE_URL") or None,
        )


__all__ = ["DEFAULT_NETWORK", "DEFAULT_TICKET_PRICE", "Settings"]
