"""Helpers for normalizing network identifiers and validating wallet addresses."""

from __future__ import annotations

import re
from typing import Any

from ..errors import ValidationError

_EVM_ADDRESS_RE = re.compile(r"0x[a-fA-F0-9]{40}")

_NETWORK_ALIASES = {
    "eth": "eth-mainnet",
    "ethereum": "eth-mainnet",
    "mainnet": "eth-mainnet",
    "eth-mainnet": "eth-mainnet",
    "sepolia": "eth-sepolia",
    "eth-sepolia": "eth-sepolia",
    "matic": "polygon-mainnet",
    "polygon": "polygon-mainnet",
    "polygon-mainnet": "polygon-mainnet",
    "base": "base-mainnet",
    "base-mainnet": "base-mainnet",
    "arbitrum": "arb-mainnet",
    "arb-mainnet": "arb-mainnet",
    "optimism": "opt-mainnet",
    "opt-mainnet": "opt-mainnet",
}

# Networks the tokens-by-wallet endpoint is queried for.
_SUPPORTED_NETWORKS = set(_NETWORK_ALIASES.values())


def normalize_network(network: str | None, default: str = "eth-mainnet") -> str:
    """Collapse user-provided network identifiers into provider network tags."""

    if not network:
        return default
    key = network.lower().strip()
    return _NETWORK_ALIASES.get(key, key)


def is_supported_network(network: str) -> bool:
    return network in _SUPPORTED_NETWORKS


def is_valid_evm_address(address: Any) -> bool:
    return isinstance(address, str) and bool(_EVM_ADDRESS_RE.fullmatch(address))


def require_address(address: Any) -> str:
    if address is None or address == "":
        raise ValidationError("Missing address")
    if not is_valid_evm_address(address):
        raise ValidationError("Invalid address: expected 0x followed by 40 hex characters")
    return address


def require_network(network: str | None, default: str = "eth-mainnet") -> str:
    normalized = normalize_network(network, default)
    if not is_supported_network(normalized):
        raise ValidationError(f"Unsupported network '{network}'")
    return normalized
