import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import urljoin

import requests
from dotenv import load_dotenv

from ..draw.winning_number import winning_number_from_randomness

logger = logging.getLogger(__name__)

DEFAULT_BEACON_BASE_URL = "https://api.drand.sh"


@dataclass(frozen=True)
class BeaconRound:
    """One published round of a drand-style randomness beacon."""

    round: int
    randomness: str
    signature: Optional[str] = None

    @property
    def winning_number(self) -> int:
        """The beacon output mapped onto the four-digit ticket space."""
        return winning_number_from_randomness(self.randomness)

    @property
    def reveal_salt(self) -> str:
        """Reveal value for rounds committed under the ``drand_round`` scheme."""
        if not self.signature:
            raise RuntimeError(f"Beacon round {self.round} carries no signature")
        return f"{self.round}:{self.signature}"


@dataclass(frozen=True)
class BeaconInfo:
    """Chain parameters published at ``/info``."""

    genesis_time: int
    period: int
    hash: Optional[str] = None

    def round_time(self, round_number: int) -> int:
        """Epoch seconds at which ``round_number`` is published."""
        return self.genesis_time + (round_number - 1) * self.period

    def round_at(self, timestamp: int) -> int:
        """Return the first round published at or after ``timestamp``.

        A round planned this way for a lottery's ``draw_time`` cannot be known
        by anyone while tickets are on sale.
        """
        if timestamp <= self.genesis_time:
            return 1
        elapsed = timestamp - self.genesis_time
        return -(-elapsed // self.period) + 1


class BeaconClient:
    """HTTP client for a public randomness beacon.

    The operator plans the first beacon round published at or after a
    lottery's ``draw_time`` with :meth:`planned_round` and records it as a
    ``drand_round`` commitment. Once that round is out, its signature is
    revealed through ``draw``. BLS signature verification is left to the
    beacon's own tooling; the client only fetches and parses rounds.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 45,
        session: Optional[requests.Session] = None,
    ):
        load_dotenv()
        url = base_url or os.getenv("BEACON_BASE_URL") or DEFAULT_BEACON_BASE_URL
        self.base_url = url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # -------- headers --------
    @property
    def public_headers(self) -> Mapping[str, str]:
        return {"Accept": "application/json"}

    # -------- core request --------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
    ) -> Any:
        url = urljoin(self.base_url + "/", path.lstrip("/"))
        r = self.session.request(
            method=method.upper(),
            url=url,
            headers=self.public_headers,
            params=params,
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json() if r.content else None

    # -------- API callers --------
    def chain_info(self) -> BeaconInfo:
        payload = self._request("GET", "/info")
        if not isinstance(payload, dict):
            raise RuntimeError(f"Unexpected beacon info: {payload!r}")
        try:
            info = BeaconInfo(
                genesis_time=int(payload["genesis_time"]),
                period=int(payload["period"]),
                hash=payload.get("hash"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RuntimeError(f"Malformed beacon info: {payload!r}") from exc
        if info.period <= 0:
            raise RuntimeError(f"Beacon period must be positive, got {info.period}")
        return info

    def planned_round(self, draw_time: int) -> int:
        """Beacon round whose output will decide a round drawn at ``draw_time``."""
        return self.chain_info().round_at(draw_time)

    def latest(self) -> BeaconRound:
        return self._parse_round(self._request("GET", "/public/latest"))

    def get_round(self, round_number: int) -> BeaconRound:
        if round_number < 1:
            raise ValueError("beacon rounds start at 1")
        return self._parse_round(self._request("GET", f"/public/{round_number}"))

    @staticmethod
    def _parse_round(payload: Any) -> BeaconRound:
        if not isinstance(payload, dict):
            raise RuntimeError(f"Unexpected beacon response: {payload!r}")
        try:
            beacon_round = BeaconRound(
                round=int(payload["round"]),
                randomness=str(payload["randomness"]),
                signature=payload.get("signature"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RuntimeError(f"Malformed beacon round: {payload!r}") from exc
        logger.debug("Fetched beacon round %s", beacon_round.round)
        return beacon_round
