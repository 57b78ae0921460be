"""Alchemy Data API client for the tokens-by-wallet endpoint.

Docs: https://docs.alchemy.com/reference/get-tokens-by-address
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..errors import UpstreamError
from ..types import TokenRecord
from .base import BalancesProvider

logger = logging.getLogger(__name__)


class AlchemyProvider(BalancesProvider):
    """Alchemy Data API provider for wallet balances, metadata and prices"""

    name = "alchemy"
    timeout_s = 30

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        max_pages: Optional[int] = None,
        timeout_s: Optional[int] = None,
    ):
        self.api_key = settings.alchemy_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.alchemy_data_base_url).rstrip("/")
        self.max_pages = max_pages or settings.max_pages
        self.timeout_s = timeout_s or settings.request_timeout_seconds

    @property
    def tokens_url(self) -> str:
        return f"{self.base_url}/{self.api_key}/assets/tokens/by-address"

    async def ready(self) -> bool:
        return bool(self.api_key) and settings.enable_alchemy

    async def health_check(self) -> Dict[str, Any]:
        if not await self.ready():
            return {
                "status": "unavailable",
                "reason": "API key not configured or provider disabled"
            }
        return {"status": "configured", "base_url": self.base_url}

    def _page_body(self, address: str, network: str, page_key: Optional[str]) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "addresses": [{"address": address, "networks": [network]}],
            "withMetadata": True,
            "withPrices": True,
            "includeNativeTokens": True,
            "includeErc20Tokens": True,
        }
        if page_key:
            body["pageKey"] = page_key
        return body

    async def _fetch_page(
        self,
        client: httpx.AsyncClient,
        body: Dict[str, Any],
    ) -> Dict[str, Any]:
        try:
            response = await client.post(
                self.tokens_url,
                json=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.RequestError as exc:
            raise UpstreamError(f"Alchemy Data request failed: {exc}") from exc

        if not response.is_success:
            raise UpstreamError(
                "Alchemy Data error",
                upstream_status=response.status_code,
                detail=response.text,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(
                "Alchemy Data returned non-JSON",
                upstream_status=response.status_code,
                detail=response.text,
            ) from exc

        if not isinstance(payload, dict):
            raise UpstreamError(
                "Alchemy Data returned an unexpected body",
                upstream_status=response.status_code,
            )
        return payload

    @staticmethod
    def _parse_tokens(payload: Dict[str, Any]) -> List[TokenRecord]:
        data = payload.get("data") or {}
        raw_tokens = data.get("tokens") if isinstance(data, dict) else None
        if raw_tokens is None:
            return []
        if not isinstance(raw_tokens, list):
            raise UpstreamError("Alchemy Data returned tokens in an unexpected shape")
        try:
            return [TokenRecord.model_validate(item) for item in raw_tokens]
        except PydanticValidationError as exc:
            raise UpstreamError("Alchemy Data returned a malformed token record", detail=str(exc)) from exc

    @staticmethod
    def _next_page_key(payload: Dict[str, Any]) -> Optional[str]:
        data = payload.get("data")
        if not isinstance(data, dict):
            return None
        page_key = data.get("pageKey")
        return page_key if isinstance(page_key, str) and page_key else None

    async def get_tokens_by_wallet(self, address: str, network: str) -> List[TokenRecord]:
        """Fetch every page for ``address`` on ``network`` and concatenate the tokens.

        Pages are requested one after another since each page key only arrives
        with the previous response. Any failed page aborts the whole fetch.
        """

        tokens: List[TokenRecord] = []
        page_key: Optional[str] = None
        pages = 0

        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            while True:
                if pages >= self.max_pages:
                    raise UpstreamError(
                        f"Alchemy Data pagination exceeded {self.max_pages} pages"
                    )

                payload = await self._fetch_page(client, self._page_body(address, network, page_key))
                page_tokens = self._parse_tokens(payload)
                tokens.extend(page_tokens)
                pages += 1

                logger.debug(
                    "tokens page fetched",
                    extra={"page": pages, "count": len(page_tokens), "network": network},
                )

                page_key = self._next_page_key(payload)
                if page_key is None:
                    break

        logger.info(
            "tokens by wallet fetched",
            extra={"address": address, "network": network, "pages": pages, "tokens": len(tokens)},
        )
        return tokens
