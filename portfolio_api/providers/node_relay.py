"""Pass-through JSON-RPC relay to a single configured node endpoint."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Tuple

import httpx

from ..config import settings
from ..errors import ConfigurationError, UpstreamError
from .base import Provider

logger = logging.getLogger(__name__)


class NodeRelayProvider(Provider):
    """Forwards request bodies verbatim; keeps the node URL (and its key) server side."""

    name = "node_relay"
    timeout_s = 30

    def __init__(self, rpc_url: Optional[str] = None, timeout_s: Optional[int] = None):
        self.rpc_url = settings.alchemy_rpc_url if rpc_url is None else rpc_url
        self.timeout_s = timeout_s or settings.request_timeout_seconds

    async def ready(self) -> bool:
        return bool(self.rpc_url)

    async def health_check(self) -> Dict[str, Any]:
        if not await self.ready():
            return {"status": "unavailable", "reason": "Node RPC URL not configured"}

        started = time.perf_counter()
        try:
            status, body = await self.forward({"jsonrpc": "2.0", "id": 1, "method": "eth_chainId", "params": []})
        except UpstreamError as exc:
            return {"status": "error", "reason": exc.message}
        if status >= 400 or not isinstance(body, dict) or "error" in body:
            return {"status": "error", "reason": f"node answered with status {status}"}
        return {"status": "healthy", "latency_ms": int((time.perf_counter() - started) * 1000)}

    async def forward(self, payload: Any) -> Tuple[int, Any]:
        """POST ``payload`` to the node and return ``(status, decoded JSON)``.

        Raises UpstreamError when the node is unreachable or answers with
        something that is not JSON.
        """

        if not self.rpc_url:
            raise ConfigurationError("Missing ALCHEMY_RPC_URL in server env")

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                response = await client.post(
                    self.rpc_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.RequestError as exc:
            raise UpstreamError(f"Node request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.warning("node returned non-JSON", extra={"status": response.status_code})
            raise UpstreamError(
                "Upstream returned non-JSON",
                upstream_status=response.status_code,
                detail=response.text,
            ) from exc

        status = 200 if response.is_success else (response.status_code or 502)
        return status, data
