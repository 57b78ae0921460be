from fastapi import APIRouter
from typing import Dict, Any
from ..providers.alchemy import AlchemyProvider
from ..providers.node_relay import NodeRelayProvider

router = APIRouter()


@router.get("/healthz")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint that verifies provider status"""

    provider_status = {
        "alchemy": await AlchemyProvider().health_check(),
        "node_relay": await NodeRelayProvider().health_check(),
    }

    # The balances provider is the one the portfolio pipeline cannot work without
    balances_ready = provider_status["alchemy"]["status"] == "configured"
    any_errors = any(status["status"] == "error" for status in provider_status.values())

    return {
        "status": "healthy" if balances_ready and not any_errors else "degraded",
        "providers": provider_status,
    }
