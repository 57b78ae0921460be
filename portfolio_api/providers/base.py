from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..types import TokenRecord


class Provider(ABC):
    """Base provider interface"""

    name: str
    timeout_s: int = 10

    @abstractmethod
    async def ready(self) -> bool:
        """Check if provider is ready to serve requests"""
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Return provider health status"""
        pass


class BalancesProvider(Provider):
    """Provider for wallet balances enriched with metadata and prices"""

    @abstractmethod
    async def get_tokens_by_wallet(self, address: str, network: str) -> List[TokenRecord]:
        """Get every token record held by an address on one network, across all pages"""
        pass
