from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..errors import ConfigurationError, ValidationError
from ..providers.node_relay import NodeRelayProvider

router = APIRouter(prefix="/api")


@router.post("/rpc")
async def relay_rpc(request: Request) -> JSONResponse:
    """Forward a raw JSON-RPC body to the configured node and relay its answer."""

    provider = NodeRelayProvider()
    if not await provider.ready():
        raise ConfigurationError("Missing ALCHEMY_RPC_URL in server env")

    try:
        payload = await request.json()
    except ValueError as exc:
        raise ValidationError("Invalid JSON body") from exc

    status, data = await provider.forward(payload)
    return JSONResponse(content=data, status_code=status, headers={"cache-control": "no-store"})
