from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Normalize URLs so path joins never produce double slashes."""

        super().model_post_init(__context)

        if self.alchemy_data_base_url.endswith("/"):
            object.__setattr__(self, "alchemy_data_base_url", self.alchemy_data_base_url.rstrip("/"))

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # External API Keys
    alchemy_api_key: str = Field(default="", description="Alchemy API key")

    # Upstream Endpoints
    alchemy_data_base_url: str = Field(
        default="https://api.g.alchemy.com/data/v1",
        description="Base URL of the Alchemy Data API (tokens by wallet)",
    )
    alchemy_rpc_url: str = Field(
        default="",
        description="Full node endpoint used by the JSON-RPC relay",
        validation_alias=AliasChoices(
            "alchemy_rpc_url",
            "ALCHEMY_RPC_URL",
            "alchemy_api_url_eth_mainnet",
            "ALCHEMY_API_URL_ETH_MAINNET",
        ),
    )
    default_network: str = Field(default="eth-mainnet", description="Network queried when none is given")

    # Request Limits
    request_timeout_seconds: int = Field(default=30, description="Request timeout")
    max_pages: int = Field(
        default=100,
        ge=1,
        description="Upper bound on tokens-by-wallet pages fetched for one address",
    )

    # Provider Toggles
    enable_alchemy: bool = Field(default=True, description="Enable Alchemy provider")


# Global settings instance
settings = Settings()
