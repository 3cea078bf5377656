"""Draw subsystem: number validation, commitment schemes, and settlement."""

from .commitment import (
    CommitmentRegistry,
    CommitmentScheme,
    DEFAULT_COMMITMENT_REGISTRY,
    DRAND_ROUND,
    SHA256_SALTED,
    beacon_commitment,
    make_commitment,
)
from .engine import DrawEngine, DrawOutcome, match_winners
from .winning_number import (
    NUMBER_MAX,
    NUMBER_MIN,
    validate_number,
    winning_number_from_randomness,
)

__all__ = [
    "CommitmentRegistry",
    "CommitmentScheme",
    "DEFAULT_COMMITMENT_REGISTRY",
    "DRAND_ROUND",
    "SHA256_SALTED",
    "beacon_commitment",
    "make_commitment",
    "DrawEngine",
    "DrawOutcome",
    "match_winners",
    "NUMBER_MAX",
    "NUMBER_MIN",
    "validate_number",
    "winning_number_from_randomness",
]
