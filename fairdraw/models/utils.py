"""Utility helpers for the models package."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from ..errors import InvalidInput

IDENTITY_MAX_LENGTH = 64
_HEX_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_identity(identity: str) -> str:
    """Return the canonical form of a participant or admin identity.

    Hex addresses (``0x`` followed by 40 hex digits) are lower-cased so that
    checksummed and plain encodings compare equal. Other identifiers are kept
    opaque apart from trimming surrounding whitespace.
    """

    if not isinstance(identity, str):
        raise InvalidInput("identity must be a string")
    normalized = identity.strip()
    if not normalized:
        raise InvalidInput("identity must not be empty")
    if len(normalized) > IDENTITY_MAX_LENGTH:
        raise InvalidInput(
            f"identity must be at most {IDENTITY_MAX_LENGTH} characters"
        )
    if _HEX_ADDRESS_RE.match(normalized):
        return normalized.lower()
    return normalized


def require_int(value: object, field: str) -> int:
    """Return ``value`` if it is a plain integer, otherwise raise ``InvalidInput``."""

    # bool is an int subclass; a flag is never a valid amount or timestamp
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{field} must be an integer")
    return value


def dt_iso(dt: Optional[datetime]) -> Optional[str]:
    """Convert a datetime to an ISO 8601 string in UTC, or return None."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        # SQLite drops tzinfo on the way back; stored values are always UTC.
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def epoch_to_datetime(seconds: int) -> datetime:
    """Return the aware UTC datetime for epoch ``seconds`` from the engine clock."""
    return datetime.fromtimestamp(seconds, timezone.utc)
