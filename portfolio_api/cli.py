#!/usr/bin/env python3
"""Terminal viewer for wallet portfolios"""

import argparse
import asyncio
import sys
from typing import Callable, Dict, List, Optional

from .config import settings
from .errors import PortfolioError
from .logging_config import setup_logging
from .services.units import to_number
from .tools.portfolio import get_portfolio
from .types import PortfolioSnapshot, Position

SORT_KEYS = ("symbol", "name", "balance", "price", "value", "weight")


def usd(amount: float) -> str:
    return f"${amount:,.2f}"


def sort_positions(
    snapshot: PortfolioSnapshot,
    key: Optional[str],
    descending: bool = False,
) -> List[Position]:
    """Re-order positions for display only; the snapshot itself is untouched.

    Missing numbers compare as 0 and text columns compare case-insensitively.
    Without a key the snapshot's own order (highest value first) is kept.
    """

    positions = list(snapshot.positions)
    if not key:
        return positions

    extractors: Dict[str, Callable[[Position], object]] = {
        "symbol": lambda p: p.symbol.lower(),
        "name": lambda p: (p.name or "").lower(),
        "balance": lambda p: to_number(p.balance),
        "price": lambda p: p.price_usd or 0.0,
        "value": lambda p: p.value_usd or 0.0,
        "weight": snapshot.weight_of,
    }
    if key not in extractors:
        raise ValueError(f"Unknown sort key '{key}', expected one of {', '.join(SORT_KEYS)}")

    return sorted(positions, key=extractors[key], reverse=descending)


def print_portfolio(snapshot: PortfolioSnapshot, positions: List[Position]) -> None:
    """Pretty print the KPIs and the positions table"""

    top_symbols = " · ".join(p.symbol for p in snapshot.positions[:3]) or "—"

    print("\nPortfolio Overview")
    print("=" * 72)
    print(f"Address: {snapshot.address}")
    print(f"Network: {snapshot.network}")
    print(f"Total Value: {usd(snapshot.total_value)} USD")
    print(f"Tokens discovered: {snapshot.token_count}")
    print(f"Top value tokens: {top_symbols}")

    if not positions:
        print("\nNo balances found.")
        return

    print()
    print(f"{'#':>3}  {'Token':<10} {'Balance':>24} {'Price':>14} {'Value':>16} {'Weight':>7}")
    print("-" * 72)
    for i, position in enumerate(positions, 1):
        price = usd(position.price_usd) if position.price_usd is not None else "—"
        value = usd(position.value_usd) if position.value_usd is not None else "—"
        weight = f"{snapshot.weight_of(position) * 100:.1f}%"
        print(f"{i:>3}  {position.symbol[:10]:<10} {position.balance[:24]:>24} {price:>14} {value:>16} {weight:>7}")
        if position.name and position.name != position.symbol:
            print(f"     {position.name}")

    print(f"\nComputed at {snapshot.computed_at.isoformat()}")


async def cli_portfolio(address: str, network: Optional[str], sort: Optional[str], descending: bool) -> int:
    """CLI command to get portfolio"""
    print(f"Fetching portfolio for {address}...")

    try:
        snapshot = await get_portfolio(address, network)
    except PortfolioError as e:
        print(f"Error [{e.kind}]: {e.message}", file=sys.stderr)
        detail = getattr(e, "detail", None)
        if detail:
            print(detail, file=sys.stderr)
        return 1

    print_portfolio(snapshot, sort_positions(snapshot, sort, descending))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wallet portfolio viewer")
    subparsers = parser.add_subparsers(dest="command")

    portfolio_parser = subparsers.add_parser("portfolio", help="Show balances, prices and totals")
    portfolio_parser.add_argument("address", help="Wallet address (0x + 40 hex)")
    portfolio_parser.add_argument("--network", default=None, help=f"Network (default: {settings.default_network})")
    portfolio_parser.add_argument("--sort", choices=SORT_KEYS, default=None, help="Column to sort the table by")
    portfolio_parser.add_argument("--desc", action="store_true", help="Sort descending")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=settings.host)
    serve_parser.add_argument("--port", type=int, default=settings.port)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "portfolio":
        setup_logging("WARNING")
        return asyncio.run(cli_portfolio(args.address, args.network, args.sort, args.desc))

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "portfolio_api.main:app",
            host=args.host,
            port=args.port,
            log_level=settings.log_level.lower(),
        )
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
