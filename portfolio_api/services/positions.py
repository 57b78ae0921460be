"""Turn raw tokens-by-wallet records into a ranked portfolio snapshot.

Everything here is synchronous and free of I/O; bad fields on a single record
fall back to defaults instead of failing the whole snapshot.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Sequence

from ..types import PortfolioSnapshot, Position, TokenPrice, TokenRecord
from .units import DEFAULT_DECIMALS, clamp_decimals, format_units, to_number

logger = logging.getLogger(__name__)

NATIVE_SYMBOL = "ETH"
UNKNOWN_SYMBOL = "TOKEN"


def _parse_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def resolve_decimals(raw: Any) -> int:
    """Decimals from token metadata, 18 when missing or unusable."""

    if isinstance(raw, bool) or raw is None:
        return DEFAULT_DECIMALS
    if isinstance(raw, int):
        return clamp_decimals(raw)
    number = _parse_float(raw.strip() if isinstance(raw, str) else raw)
    if number is None or not number.is_integer():
        return DEFAULT_DECIMALS
    return clamp_decimals(int(number))


def pick_usd_price(prices: Optional[Sequence[TokenPrice]]) -> Optional[float]:
    """First USD quote (case-insensitive) as a float, or None."""

    for entry in prices or ():
        if (entry.currency or "").lower() == "usd":
            return _parse_float(entry.value)
    return None


def build_position(record: TokenRecord, network: str) -> Position:
    meta = record.token_metadata
    decimals = resolve_decimals(meta.decimals if meta else None)
    balance = format_units(record.token_balance, decimals)

    price_usd = pick_usd_price(record.token_prices)
    value_usd = to_number(balance) * price_usd if price_usd is not None else None
    if value_usd is not None and not math.isfinite(value_usd):
        value_usd = None

    symbol = meta.symbol if meta and meta.symbol is not None else None
    if symbol is None:
        symbol = NATIVE_SYMBOL if record.is_native else UNKNOWN_SYMBOL

    return Position(
        network=record.network or network,
        contract_address=record.token_address,
        symbol=symbol,
        name=meta.name if meta else None,
        logo=meta.logo if meta else None,
        decimals=decimals,
        balance=balance,
        price_usd=price_usd,
        value_usd=value_usd,
    )


def rank_positions(positions: Iterable[Position]) -> List[Position]:
    """Drop zero/dust balances and order by USD value; unpriced positions count as 0."""

    kept = [p for p in positions if to_number(p.balance) > 0]
    kept.sort(key=lambda p: p.value_usd or 0.0, reverse=True)
    return kept


def total_value(positions: Iterable[Position]) -> float:
    return sum((p.value_usd or 0.0) for p in positions)


def build_snapshot(
    address: str,
    network: str,
    records: Sequence[TokenRecord],
    computed_at: Optional[datetime] = None,
) -> PortfolioSnapshot:
    positions = rank_positions(build_position(r, network) for r in records)

    logger.debug(
        "positions normalized",
        extra={
            "address": address,
            "records": len(records),
            "kept": len(positions),
            "dropped": len(records) - len(positions),
        },
    )

    return PortfolioSnapshot(
        address=address,
        network=network,
        positions=positions,
        total_value=total_value(positions),
        computed_at=computed_at or datetime.now(timezone.utc),
    )
