"""Exact conversion of atomic token balances into decimal strings.

Balances are handled as digit strings end to end; floats only appear in
``to_number``, which is a bounded projection for filtering and sorting.
"""

from __future__ import annotations

import math
import re
from typing import Any

DEFAULT_DECIMALS = 18
MAX_DECIMALS = 36
# Longest prefix of a decimal string handed to float()
PROJECTION_MAX_CHARS = 24

_HEX_RE = re.compile(r"0x[0-9a-fA-F]+")
_DEC_RE = re.compile(r"[0-9]+")

# int -> str is capped at 4300 digits; large values are rendered in chunks below that
_CHUNK_DIGITS = 1000
_CHUNK_BASE = 10 ** _CHUNK_DIGITS


def _int_to_digits(value: int) -> str:
    if value < _CHUNK_BASE:
        return str(value)
    chunks = []
    while value >= _CHUNK_BASE:
        value, low = divmod(value, _CHUNK_BASE)
        chunks.append(str(low).zfill(_CHUNK_DIGITS))
    chunks.append(str(value))
    return "".join(reversed(chunks))


def atomic_digits(atomic: Any) -> str:
    """Base-10 digits of a ``0x`` hex or base-10 atomic balance; anything else is "0"."""

    if not isinstance(atomic, str):
        return "0"
    if _HEX_RE.fullmatch(atomic):
        return _int_to_digits(int(atomic[2:], 16))
    if _DEC_RE.fullmatch(atomic):
        return atomic.lstrip("0") or "0"
    return "0"


def clamp_decimals(decimals: Any) -> int:
    """Clamp to [0, 36]; non-numeric or non-finite input becomes 18."""

    if isinstance(decimals, bool) or not isinstance(decimals, (int, float)):
        return DEFAULT_DECIMALS
    if isinstance(decimals, float):
        if not math.isfinite(decimals):
            return DEFAULT_DECIMALS
        decimals = int(decimals)
    return max(0, min(MAX_DECIMALS, decimals))


def format_units(atomic: Any, decimals: Any) -> str:
    """Render ``atomic`` scaled by ``10**-decimals`` without precision loss.

    >>> format_units("1500000000000000000", 18)
    '1.5'
    >>> format_units("0x0f4240", 6)
    '1'
    """

    digits = atomic_digits(atomic)
    places = clamp_decimals(decimals)
    if places == 0:
        return digits
    digits = digits.zfill(places + 1)
    whole, frac = digits[:-places], digits[-places:].rstrip("0")
    return f"{whole}.{frac}" if frac else whole


def to_number(decimal_str: str) -> float:
    """Float projection of an exact decimal string, for comparisons only.

    The string is cut to 24 characters before parsing, so balances with very
    long fractional parts can project to 0 even when they are nonzero.
    """

    trimmed = decimal_str[:PROJECTION_MAX_CHARS] if len(decimal_str) > PROJECTION_MAX_CHARS else decimal_str
    try:
        number = float(trimmed)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0
