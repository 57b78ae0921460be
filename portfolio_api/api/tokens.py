from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from ..tools.portfolio import get_portfolio
from ..types import ErrorResponse, PortfolioRequest, PortfolioSnapshot

router = APIRouter(prefix="/api")

_NO_STORE = {"cache-control": "no-store"}
_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid or missing address"},
    500: {"model": ErrorResponse, "description": "Provider not configured"},
    502: {"model": ErrorResponse, "description": "Balances provider failed"},
}


def _snapshot_response(snapshot: PortfolioSnapshot) -> JSONResponse:
    return JSONResponse(
        content=snapshot.model_dump(mode="json", by_alias=True),
        headers=_NO_STORE,
    )


@router.post("/tokens", responses=_ERRORS)
async def post_tokens(request: PortfolioRequest) -> JSONResponse:
    """Load positions and totals for the address in the request body"""

    snapshot = await get_portfolio(request.address, request.network)
    return _snapshot_response(snapshot)


@router.get("/tokens", responses=_ERRORS)
async def get_tokens(
    address: str = Query(..., description="Wallet address to analyze"),
    network: Optional[str] = Query(None, description="Network tag, e.g. eth-mainnet"),
) -> JSONResponse:
    snapshot = await get_portfolio(address, network)
    return _snapshot_response(snapshot)
