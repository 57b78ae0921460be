from typing import Optional
from pydantic import BaseModel, Field


class PortfolioRequest(BaseModel):
    address: str = Field(description="Wallet address to load (0x + 40 hex)")
    network: Optional[str] = Field(default=None, description="Network to query; defaults to the configured network")
