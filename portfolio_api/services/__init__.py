"""Service layer helpers"""

from .positions import build_position, build_snapshot, pick_usd_price, resolve_decimals
from .units import atomic_digits, format_units, to_number

__all__ = [
    "build_position",
    "build_snapshot",
    "pick_usd_price",
    "resolve_decimals",
    "format_units",
    "atomic_digits",
    "to_number",
]
