"""Helpers for validating ticket and winning numbers."""

from __future__ import annotations

from ..errors import NumberOutOfRange
from ..models.utils import require_int

NUMBER_MIN = 1000
NUMBER_MAX = 9999
NUMBER_SPACE = NUMBER_MAX - NUMBER_MIN + 1


def validate_number(number: int) -> int:
    """Return ``number`` if it lies in the closed range [1000, 9999].

    Raises
    ------
    InvalidInput
        If ``number`` is not an integer.
    NumberOutOfRange
        If ``number`` is outside the four-digit space.
    """

    require_int(number, "number")
    if number < NUMBER_MIN or number > NUMBER_MAX:
        raise NumberOutOfRange(
            f"number {number} is outside [{NUMBER_MIN}, {NUMBER_MAX}]"
        )
    return number


def winning_number_from_randomness(randomness: str) -> int:
    """Map a hex-encoded random beacon value onto the four-digit number space.

    Parameters
    ----------
    randomness : str
        Hex digest published by a randomness beacon, with or without ``0x``.

    Returns
    -------
    int
        A number in [1000, 9999].
    """

    if not isinstance(randomness, str):
        raise TypeError("randomness must be a hex string")
    text = randomness.strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    if not text:
        raise ValueError("randomness must not be empty")
    try:
        value = int(text, 16)
    except ValueError as exc:
        raise ValueError("randomness must be hex encoded") from exc
    return NUMBER_MIN + value % NUMBER_SPACE


__all__ = [
    "NUMBER_MAX",
    "NUMBER_MIN",
    "NUMBER_SPACE",
    "validate_number",
    "winning_number_from_randomness",
]
