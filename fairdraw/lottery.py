"""Engine facade: the request/response surface of the lottery."""

from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
import time
from typing import Callable, Iterator, Optional

from sqlalchemy.orm import Session, sessionmaker

from .access import AccessControl
from .draw.commitment import (
    CommitmentRegistry,
    DEFAULT_COMMITMENT_REGISTRY,
    SHA256_SALTED,
)
from .draw.engine import DrawEngine, DrawOutcome
from .errors import InvalidInput, NotProvisioned
from .models import Deployment
from .queries import QueryService
from .registration import RegistrationService
from .snapshots import LotteryStats, RoundSnapshot, TicketSnapshot
from .store import RoundStore

logger = logging.getLogger(__name__)


def epoch_now() -> int:
    """Return the current wall-clock time in whole epoch seconds."""
    return int(time.time())


class Lottery:
    """One provisioned lottery engine bound to a database.

    Every call goes through a single sequential lane. A mutating call holds a
    process-wide lock, reads the clock once, and runs inside its own
    transaction, so a rejected call rolls back with no partial effect. Reads
    take the same lock, so they never observe a write in progress. A read made
    on the thread that is currently writing reuses the write's session and
    never commits it.

    Parameters
    ----------
    session_factory : sessionmaker
        Factory returned by :func:`fairdraw.db.engine.get_sessionmaker`.
    clock : Optional[Callable[[], int]], default: None
        Source of epoch seconds. Defaults to :func:`epoch_now`.
    registry : Optional[CommitmentRegistry], default: None
        Commitment schemes available to rounds. Defaults to
        :data:`~fairdraw.draw.commitment.DEFAULT_COMMITMENT_REGISTRY`.

    Raises
    ------
    NotProvisioned
        If no :class:`~fairdraw.models.Deployment` exists in the database.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        clock: Optional[Callable[[], int]] = None,
        registry: Optional[CommitmentRegistry] = None,
    ) -> None:
        self._Session = session_factory
        self._clock = clock or epoch_now
        self._registry = registry or DEFAULT_COMMITMENT_REGISTRY
        self._lane = threading.Lock()
        self._active = threading.local()

        with self._Session() as session:
            deployment = Deployment.current(session)
            if deployment is None:
                raise NotProvisioned(
                    "No deployment found; run the provisioning workflow first"
                )
            self._access = AccessControl(deployment.admin_address)
            self._default_ticket_price = deployment.default_ticket_price
            self._engine_address = deployment.engine_address

    @property
    def admin(self) -> str:
        return self._access.admin

    @property
    def engine_address(self) -> str:
        return self._engine_address

    @property
    def default_ticket_price(self) -> int:
        return self._default_ticket_price

    def is_admin(self, identity: str) -> bool:
        return self._access.is_admin(identity)

    # -------- state-changing calls --------
    def create_round(
        self,
        name: str,
        draw_time: int,
        caller: str,
        *,
        ticket_price: Optional[int] = None,
        commitment: Optional[str] = None,
        commitment_scheme: Optional[str] = None,
    ) -> int:
        """Open a new round and return its id.

        ``ticket_price`` defaults to the deployment's configured price. When
        ``commitment`` is given, the draw must later reveal a number (and salt)
        that opens it under ``commitment_scheme``.
        """
        self._access.require_admin(caller, action="create_round")
        if commitment is not None and commitment_scheme is None:
            commitment_scheme = SHA256_SALTED
        if commitment_scheme is not None:
            if commitment_scheme not in self._registry:
                raise InvalidInput(f"Unknown commitment scheme {commitment_scheme!r}")
            if not self._registry.get(commitment_scheme).accepts(commitment):
                raise InvalidInput(
                    f"Commitment is not a valid {commitment_scheme} commitment"
                )
        price = self._default_ticket_price if ticket_price is None else ticket_price

        with self._write() as (session, now):
            round_id = RoundStore(session).create_round(
                name,
                draw_time,
                now=now,
                ticket_price=price,
                commitment=commitment,
                commitment_scheme=commitment_scheme,
            )
        logger.info("Round %s created (draw_time=%s, price=%s)", round_id, draw_time, price)
        return round_id

    def buy_ticket(
        self, round_id: int, buyer: str, number: int, amount: int
    ) -> TicketSnapshot:
        with self._write() as (session, now):
            return RegistrationService(session).buy_ticket(
                round_id, buyer, number, amount, now=now
            )

    def draw(
        self,
        round_id: int,
        winning_number: int,
        caller: str,
        *,
        salt: Optional[str] = None,
    ) -> DrawOutcome:
        with self._write() as (session, now):
            engine = DrawEngine(session, self._access, registry=self._registry)
            return engine.draw(round_id, winning_number, caller, now=now, salt=salt)

    # -------- reads --------
    def list_rounds(self) -> list[RoundSnapshot]:
        with self._read() as session:
            return QueryService(session).list_rounds()

    def get_round(self, round_id: int) -> RoundSnapshot:
        with self._read() as session:
            return QueryService(session).get_round(round_id)

    def rounds_count(self) -> int:
        with self._read() as session:
            return QueryService(session).rounds_count()

    def get_winners(self, round_id: int) -> list[str]:
        with self._read() as session:
            return QueryService(session).get_winners(round_id)

    def aggregate_stats(self) -> LotteryStats:
        with self._read() as session:
            return QueryService(session).aggregate_stats()

    def settlement_events(self, round_id: Optional[int] = None) -> list[dict]:
        with self._read() as session:
            return [
                event.to_json()
                for event in QueryService(session).settlement_events(round_id)
            ]

    # -------- session helpers --------
    @contextmanager
    def _write(self) -> Iterator[tuple[Session, int]]:
        with self._lane:
            now = self._clock()
            with self._Session.begin() as session:
                self._active.session = session
                try:
                    yield session, now
                finally:
                    self._active.session = None

    @contextmanager
    def _read(self) -> Iterator[Session]:
        writing = getattr(self._active, "session", None)
        if writing is not None:
            yield writing
            return
        with self._lane:
            with self._Session() as session:
                with session.begin():
                    yield session


__all__ = ["Lottery", "epoch_now"]
