from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TokenPrice(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    currency: Optional[str] = Field(default=None, description="Quote currency code (e.g. usd)")
    value: Any = Field(default=None, description="Unit price as a decimal string")

    @field_validator("currency", mode="before")
    @classmethod
    def _currency_as_text(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None


class TokenMetadata(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    decimals: Any = Field(default=None, description="Raw decimals; may be missing, null or malformed")
    symbol: Optional[str] = Field(default=None, description="Token symbol")
    name: Optional[str] = Field(default=None, description="Token name")
    logo: Optional[str] = Field(default=None, description="Logo URL")

    @field_validator("symbol", "name", "logo", mode="before")
    @classmethod
    def _text_or_none(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None


class TokenRecord(BaseModel):
    """One token entry from a tokens-by-wallet page, kept close to the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    network: Optional[str] = Field(default=None, description="Network tag, e.g. eth-mainnet")
    address: Optional[str] = Field(default=None, description="Wallet address the balance belongs to")
    token_address: Optional[str] = Field(default=None, description="Contract address; None for the native asset")
    token_balance: str = Field(default="0", description="Atomic balance, hex (0x) or base-10")
    token_metadata: Optional[TokenMetadata] = Field(default=None)
    token_prices: Optional[List[TokenPrice]] = Field(default=None)

    @field_validator("token_balance", mode="before")
    @classmethod
    def _balance_as_text(cls, value: Any) -> str:
        if value is None:
            return "0"
        # Booleans and floats are not valid atomic encodings; they fall through to 0 later.
        if isinstance(value, (bool, float)):
            return ""
        return str(value)

    @field_validator("token_metadata", mode="before")
    @classmethod
    def _metadata_or_none(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    @field_validator("token_prices", mode="before")
    @classmethod
    def _prices_or_none(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return None
        return [entry for entry in value if isinstance(entry, dict)]

    @field_validator("network", "address", "token_address", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) and value else None

    @property
    def is_native(self) -> bool:
        return self.token_address is None
