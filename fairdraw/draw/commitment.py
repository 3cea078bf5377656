"""Commitment schemes that bind a round to its winning number before tickets sell."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import hmac
from typing import Callable, Dict, Optional

from .winning_number import winning_number_from_randomness

SHA256_SALTED = "sha256_salted"
DRAND_ROUND = "drand_round"


@dataclass(frozen=True)
class CommitmentScheme:
    """Definition of a commitment scheme.

    Attributes
    ----------
    key : str
        Registry key stored on the round as ``commitment_scheme``.
    verifier : Callable[[str, int, Optional[str]], bool]
        Callable that takes the stored commitment, the revealed number, and the
        optional reveal salt, and returns ``True`` when the reveal opens the
        commitment.
    committer : Optional[Callable[[int, str], str]]
        Callable producing a commitment from a number and a salt, when the
        scheme supports building commitments locally.
    description : Optional[str]
        Human-readable summary of the scheme.
    shape : Optional[Callable[[str], bool]]
        Check applied to a commitment when a round is created. Rounds whose
        commitment fails it could never be drawn, so they are refused.
    """

    key: str
    verifier: Callable[[str, int, Optional[str]], bool]
    committer: Optional[Callable[[int, str], str]] = None
    description: Optional[str] = None
    shape: Optional[Callable[[str], bool]] = None

    def accepts(self, commitment: str) -> bool:
        if not isinstance(commitment, str):
            return False
        return self.shape is None or bool(self.shape(commitment))

    def verify(self, commitment: str, number: int, salt: Optional[str] = None) -> bool:
        return bool(self.verifier(commitment, number, salt))

    def commit(self, number: int, salt: str) -> str:
        if self.committer is None:
            raise NotImplementedError(
                f"Commitment scheme '{self.key}' cannot build commitments"
            )
        return self.committer(number, salt)


class CommitmentRegistry:
    """Mutable registry mapping scheme keys to definitions."""

    def __init__(self) -> None:
        self._schemes: Dict[str, CommitmentScheme] = {}

    def register(self, scheme: CommitmentScheme, *, replace: bool = False) -> None:
        """Register a commitment scheme under its key.

        Parameters
        ----------
        scheme : CommitmentScheme
            Scheme to add to the registry.
        replace : bool, default: False
            When ``True`` an existing registration with the same key is
            overwritten. Otherwise a duplicate raises :class:`ValueError`.
        """
        if not replace and scheme.key in self._schemes:
            raise ValueError(f"Commitment scheme '{scheme.key}' is already registered")
        self._schemes[scheme.key] = scheme

    def get(self, key: str) -> CommitmentScheme:
        """Return the scheme registered under ``key``."""
        try:
            return self._schemes[key]
        except KeyError as exc:
            raise KeyError(f"Unknown commitment scheme '{key}'") from exc

    def __contains__(self, key: object) -> bool:
        return key in self._schemes

    def available_schemes(self) -> Dict[str, CommitmentScheme]:
        """Return a copy of the registered schemes keyed by identifier."""
        return dict(self._schemes)


def _sha256_preimage(number: int, salt: str) -> bytes:
    try:
        return f"{number}:{salt}".encode("ascii")
    except UnicodeEncodeError as exc:
        raise ValueError("commitment salt must contain only ASCII characters") from exc


def _sha256_commit(number: int, salt: str) -> str:
    if not salt:
        raise ValueError("commitment salt must not be empty")
    return hashlib.sha256(_sha256_preimage(number, salt)).hexdigest()


def _sha256_verify(commitment: str, number: int, salt: Optional[str]) -> bool:
    if not salt or not salt.isascii():
        return False
    expected = hashlib.sha256(_sha256_preimage(number, salt)).hexdigest()
    return hmac.compare_digest(expected, commitment.strip().lower())


def _sha256_shape(commitment: str) -> bool:
    digest = commitment.strip().lower()
    return len(digest) == 64 and all(c in "0123456789abcdef" for c in digest)


def _drand_shape(commitment: str) -> bool:
    text = commitment.strip()
    return text.isascii() and text.isdigit() and int(text) >= 1


def _drand_verify(commitment: str, number: int, salt: Optional[str]) -> bool:
    # Reveal is "<round>:<signature hex>"; drand randomness is sha256(signature).
    if not salt or not _drand_shape(commitment):
        return False
    round_text, sep, signature = salt.strip().partition(":")
    if not sep or not _drand_shape(round_text) or int(round_text) != int(commitment):
        return False
    try:
        signature_bytes = bytes.fromhex(signature)
    except ValueError:
        return False
    if not signature_bytes:
        return False
    randomness = hashlib.sha256(signature_bytes).hexdigest()
    return winning_number_from_randomness(randomness) == number


def beacon_commitment(round_number: int) -> str:
    """Build the ``drand_round`` commitment binding a lottery to a beacon round."""
    if isinstance(round_number, bool) or not isinstance(round_number, int):
        raise ValueError("beacon round must be an integer")
    if round_number < 1:
        raise ValueError("beacon rounds start at 1")
    return str(round_number)


def make_commitment(
    number: int,
    salt: str,
    *,
    scheme: str = SHA256_SALTED,
    registry: Optional[CommitmentRegistry] = None,
) -> str:
    """Build the commitment an operator records when creating a round."""
    active_registry = registry or DEFAULT_COMMITMENT_REGISTRY
    return active_registry.get(scheme).commit(number, salt)


DEFAULT_COMMITMENT_REGISTRY = CommitmentRegistry()
DEFAULT_COMMITMENT_REGISTRY.register(
    CommitmentScheme(
        key=SHA256_SALTED,
        verifier=_sha256_verify,
        committer=_sha256_commit,
        description=(
            "Hex SHA-256 digest of '<number>:<salt>'. The salt is disclosed "
            "together with the number at draw time."
        ),
        shape=_sha256_shape,
    )
)
DEFAULT_COMMITMENT_REGISTRY.register(
    CommitmentScheme(
        key=DRAND_ROUND,
        verifier=_drand_verify,
        description=(
            "Decimal number of a future drand beacon round. The reveal salt is "
            "'<round>:<signature hex>' and the winning number is derived from "
            "sha256(signature)."
        ),
        shape=_drand_shape,
    )
)

__all__ = [
    "CommitmentRegistry",
    "CommitmentScheme",
    "DEFAULT_COMMITMENT_REGISTRY",
    "DRAND_ROUND",
    "SHA256_SALTED",
    "beacon_commitment",
    "make_commitment",
]
