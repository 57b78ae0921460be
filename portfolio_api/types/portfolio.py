from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class Position(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    network: str = Field(description="Network the balance lives on")
    contract_address: Optional[str] = Field(default=None, description="Token contract address (None for the native asset)")
    symbol: str = Field(description="Token symbol (e.g. ETH, USDC)")
    name: Optional[str] = Field(default=None, description="Full token name")
    logo: Optional[str] = Field(default=None, description="Logo URL")
    decimals: int = Field(ge=0, le=36, description="Token decimal places")
    balance: str = Field(description="Exact human readable balance")
    price_usd: Optional[float] = Field(default=None, description="Price per token in USD")
    value_usd: Optional[float] = Field(default=None, description="Total value in USD")


class PortfolioSnapshot(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    address: str = Field(description="Wallet address")
    network: str = Field(description="Network queried")
    positions: List[Position] = Field(default_factory=list, description="Non-dust positions, highest value first")
    total_value: float = Field(default=0.0, description="Sum of position values in USD")
    computed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the snapshot was computed",
    )

    @computed_field
    @property
    def token_count(self) -> int:
        return len(self.positions)

    def weight_of(self, position: Position) -> float:
        """Share of the total USD value held in ``position`` (0 when unpriced)."""
        if self.total_value <= 0 or position.value_usd is None:
            return 0.0
        return position.value_usd / self.total_value

    def weights(self) -> List[float]:
        return [self.weight_of(p) for p in self.positions]
