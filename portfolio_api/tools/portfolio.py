import logging
from datetime import datetime, timezone
from typing import Optional

from ..config import settings
from ..errors import ConfigurationError
from ..providers.alchemy import AlchemyProvider
from ..providers.base import BalancesProvider
from ..services.address import require_address, require_network
from ..services.positions import build_snapshot
from ..types import PortfolioSnapshot

logger = logging.getLogger(__name__)


async def get_portfolio(
    address: str,
    network: Optional[str] = None,
    provider: Optional[BalancesProvider] = None,
) -> PortfolioSnapshot:
    """Get the ranked, priced portfolio for an address on one network.

    Raises ValidationError before any upstream call, ConfigurationError when
    the provider has no credentials, and UpstreamError when any page fails.
    """

    address = require_address(address)
    network = require_network(network, settings.default_network)

    provider = provider or AlchemyProvider()
    if not await provider.ready():
        raise ConfigurationError("Alchemy provider not configured: set ALCHEMY_API_KEY")

    started = datetime.now(timezone.utc)
    records = await provider.get_tokens_by_wallet(address, network)
    snapshot = build_snapshot(address, network, records)

    latency_ms = int((datetime.now(timezone.utc) - started).total_seconds() * 1000)
    logger.info(
        "portfolio computed",
        extra={
            "address": address,
            "network": network,
            "positions": snapshot.token_count,
            "total_value": snapshot.total_value,
            "latency_ms": latency_ms,
        },
    )
    return snapshot
