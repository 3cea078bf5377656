"""Provisioning workflows run once per deployment."""

from __future__ import annotations

import json
import logging
import secrets
from pathlib import Path
from typing import Any, Optional

from sqlalchemy.orm import Session

from .errors import InvalidInput
from .models import Deployment
from .models.utils import normalize_identity, require_int

logger = logging.getLogger(__name__)

# Operations exposed to the display layer. ``auth`` marks calls that need the
# caller identity; ``admin`` marks calls gated on the admin identity.
INTERFACE_DESCRIPTION: list[dict[str, Any]] = [
    {
        "name": "createRound",
        "inputs": [{"name": "name", "type": "string"}, {"name": "drawTime", "type": "uint64"}],
        "outputs": [{"name": "roundId", "type": "uint256"}],
        "auth": True,
        "admin": True,
    },
    {
        "name": "buyTicket",
        "inputs": [
            {"name": "roundId", "type": "uint256"},
            {"name": "number", "type": "uint16"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [],
        "auth": True,
        "admin": False,
    },
    {
        "name": "draw",
        "inputs": [
            {"name": "roundId", "type": "uint256"},
            {"name": "winningNumber", "type": "uint16"},
            {"name": "salt", "type": "string", "optional": True},
        ],
        "outputs": [{"name": "winnerCount", "type": "uint256"}],
        "auth": True,
        "admin": True,
    },
    {
        "name": "getRound",
        "inputs": [{"name": "roundId", "type": "uint256"}],
        "outputs": [{"name": "round", "type": "Round"}],
        "auth": False,
        "admin": False,
    },
    {
        "name": "listRounds",
        "inputs": [],
        "outputs": [{"name": "rounds", "type": "Round[]"}],
        "auth": False,
        "admin": False,
    },
    {
        "name": "roundsCount",
        "inputs": [],
        "outputs": [{"name": "count", "type": "uint256"}],
        "auth": False,
        "admin": False,
    },
    {
        "name": "getWinners",
        "inputs": [{"name": "roundId", "type": "uint256"}],
        "outputs": [{"name": "winners", "type": "address[]"}],
        "auth": False,
        "admin": False,
    },
    {
        "name": "aggregateStats",
        "inputs": [],
        "outputs": [{"name": "stats", "type": "Stats"}],
        "auth": False,
        "admin": False,
    },
    {
        "name": "admin",
        "inputs": [],
        "outputs": [{"name": "admin", "type": "address"}],
        "auth": False,
        "admin": False,
    },
]


def generate_engine_address() -> str:
    """Return a random 20-byte hex address for a new engine instance."""
    return "0x" + secrets.token_hex(20)


def provision_deployment(
    session: Session,
    *,
    admin_address: str,
    ticket_price: int,
    engine_address: Optional[str] = None,
    network: Optional[str] = None,
) -> Deployment:
    """Create the single deployment record that fixes the admin identity.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session.
    admin_address : str
        Identity allowed to create and draw rounds. It cannot be changed later.
    ticket_price : int
        Default ticket price in the smallest currency unit.
    engine_address : Optional[str]
        Address or interface identifier of the engine. A random one is
        generated when omitted.
    network : Optional[str]
        Label of the network the engine is reachable on.

    Returns
    -------
    Deployment
        The persisted deployment record.

    Raises
    ------
    InvalidInput
        If a deployment already exists or an argument is malformed.
    """

    existing = Deployment.current(session)
    if existing is not None:
        raise InvalidInput(
            f"Engine already provisioned at {existing.engine_address}; "
            "the admin identity is immutable"
        )
    require_int(ticket_price, "ticket_price")
    if ticket_price < 0:
        raise InvalidInput("ticket_price must not be negative")

    deployment = Deployment(
        engine_address=engine_address or generate_engine_address(),
        admin_address=normalize_identity(admin_address),
        default_ticket_price=ticket_price,
        network=network,
    )
    session.add(deployment)
    session.flush()
    logger.info(
        "Provisioned engine %s with admin %s",
        deployment.engine_address,
        deployment.admin_address,
    )
    return deployment


def build_display_config(deployment: Deployment) -> dict[str, Any]:
    """Return the configuration document consumed by the display layer."""
    return {
        "network": deployment.network,
        "engineAddress": deployment.engine_address,
        "deployer": deployment.admin_address,
        "ticketPrice": deployment.default_ticket_price,
        "interface": INTERFACE_DESCRIPTION,
    }


def publish_display_config(deployment: Deployment, config_dir: Path) -> Optional[Path]:
    """Write ``config.json`` for the display layer into ``config_dir``.

    Returns the written path, or ``None`` when ``config_dir`` does not exist
    (the display layer is not checked out next to the engine).
    """

    config_dir = Path(config_dir)
    if not config_dir.is_dir():
        logger.warning("Display config directory %s does not exist; skipping", config_dir)
        return None
    target = config_dir / "config.json"
    target.write_text(
        json.dumps(build_display_config(deployment), indent=2) + "\n",
        encoding="utf-8",
    )
    logger.info("Wrote display config to %s", target)
    return target


__all__ = [
    "INTERFACE_DESCRIPTION",
    "build_display_config",
    "generate_engine_address",
    "provision_deployment",
    "publish_display_config",
]
