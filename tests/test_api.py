import json

import pytest
from fastapi.testclient import TestClient

from portfolio_api.config import settings
from portfolio_api.errors import UpstreamError
from portfolio_api.main import app
from portfolio_api.providers import node_relay
from portfolio_api.tools import portfolio as portfolio_tool
from portfolio_api.types import TokenRecord

client = TestClient(app)

ADDRESS = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"


class _StubAlchemy:
    records = []
    error = None
    calls = 0

    async def ready(self):
        return bool(settings.alchemy_api_key)

    async def get_tokens_by_wallet(self, address, network):
        _StubAlchemy.calls += 1
        if _StubAlchemy.error is not None:
            raise _StubAlchemy.error
        return _StubAlchemy.records


@pytest.fixture(autouse=True)
def stub_alchemy(monkeypatch):
    monkeypatch.setattr(settings, "alchemy_api_key", "test-key")
    monkeypatch.setattr(portfolio_tool, "AlchemyProvider", _StubAlchemy)
    _StubAlchemy.records = [
        TokenRecord.model_validate(
            {
                "network": "eth-mainnet",
                "tokenAddress": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
                "tokenBalance": "2500000",
                "tokenMetadata": {"decimals": 6, "symbol": "USDC", "name": "USD Coin"},
                "tokenPrices": [{"currency": "usd", "value": "1"}],
            }
        ),
        TokenRecord.model_validate({"network": "eth-mainnet", "tokenBalance": "0x6f05b59d3b20000"}),
    ]
    _StubAlchemy.error = None
    _StubAlchemy.calls = 0
    yield


def test_post_tokens_returns_snapshot():
    resp = client.post("/api/tokens", json={"address": ADDRESS})

    assert resp.status_code == 200
    assert resp.headers["cache-control"] == "no-store"
    data = resp.json()
    assert data["address"] == ADDRESS
    assert data["network"] == "eth-mainnet"
    assert data["totalValue"] == pytest.approx(2.5)
    assert [p["symbol"] for p in data["positions"]] == ["USDC", "ETH"]

    usdc, eth = data["positions"]
    assert usdc["balance"] == "2.5"
    assert usdc["priceUsd"] == 1.0
    assert eth["balance"] == "0.5"
    assert eth["contractAddress"] is None
    assert eth["valueUsd"] is None
    assert "computedAt" in data


def test_get_tokens_accepts_query_parameters():
    resp = client.get("/api/tokens", params={"address": ADDRESS, "network": "eth"})
    assert resp.status_code == 200
    assert resp.json()["network"] == "eth-mainnet"


@pytest.mark.parametrize("body", [{"address": "0x123"}, {"address": ""}, {}, {"address": 42}])
def test_bad_address_is_400_without_upstream_call(body):
    resp = client.post("/api/tokens", json=body)

    assert resp.status_code == 400
    assert resp.json()["error"]["kind"] == "validation_error"
    assert _StubAlchemy.calls == 0


def test_missing_api_key_is_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "alchemy_api_key", "")

    resp = client.post("/api/tokens", json={"address": ADDRESS})

    assert resp.status_code == 500
    assert resp.json()["error"]["kind"] == "configuration_error"
    assert _StubAlchemy.calls == 0


def test_upstream_failure_is_502_with_detail():
    _StubAlchemy.error = UpstreamError("Alchemy Data error", upstream_status=500, detail='{"message":"boom"}')

    resp = client.post("/api/tokens", json={"address": ADDRESS})

    assert resp.status_code == 502
    error = resp.json()["error"]
    assert error["kind"] == "upstream_error"
    assert error["upstreamStatus"] == 500
    assert error["detail"] == '{"message":"boom"}'
    assert "positions" not in resp.json()


def test_root_and_health():
    root = client.get("/").json()
    assert root["health"] == "/healthz"

    health = client.get("/healthz").json()
    assert health["providers"]["alchemy"]["status"] == "configured"
    assert health["providers"]["node_relay"]["status"] == "unavailable"


# =============================================================================
# JSON-RPC relay
# =============================================================================

class _RelayResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def is_success(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise json.JSONDecodeError("Expecting value", self.text, 0)
        return self._payload


class _RelayClient:
    response = None
    requests = []

    def __init__(self, *_, **__):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def post(self, url, json=None, headers=None):
        _RelayClient.requests.append({"url": url, "json": json})
        return _RelayClient.response


@pytest.fixture
def relay(monkeypatch):
    monkeypatch.setattr(settings, "alchemy_rpc_url", "https://node.example/v2/key")
    monkeypatch.setattr(node_relay.httpx, "AsyncClient", _RelayClient)
    _RelayClient.requests = []
    return _RelayClient


def test_rpc_relay_forwards_body_verbatim(relay):
    relay.response = _RelayResponse(200, {"jsonrpc": "2.0", "id": 7, "result": "0x1"})
    body = {"jsonrpc": "2.0", "id": 7, "method": "eth_blockNumber", "params": []}

    resp = client.post("/api/rpc", json=body)

    assert resp.status_code == 200
    assert resp.json() == {"jsonrpc": "2.0", "id": 7, "result": "0x1"}
    assert relay.requests == [{"url": "https://node.example/v2/key", "json": body}]


def test_rpc_relay_keeps_upstream_error_status(relay):
    relay.response = _RelayResponse(429, {"error": {"code": 429, "message": "slow down"}})

    resp = client.post("/api/rpc", json={"jsonrpc": "2.0", "id": 1, "method": "eth_chainId"})

    assert resp.status_code == 429
    assert resp.json()["error"]["message"] == "slow down"


def test_rpc_relay_non_json_upstream_is_502(relay):
    relay.response = _RelayResponse(503, None, text="<html>down</html>")

    resp = client.post("/api/rpc", json={"jsonrpc": "2.0", "id": 1, "method": "eth_chainId"})

    assert resp.status_code == 502
    error = resp.json()["error"]
    assert error["message"] == "Upstream returned non-JSON"
    assert error["upstreamStatus"] == 503


def test_rpc_relay_rejects_invalid_json(relay):
    resp = client.post("/api/rpc", content=b"{not json", headers={"content-type": "application/json"})

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Invalid JSON body"
    assert relay.requests == []


def test_rpc_relay_requires_node_url(monkeypatch):
    monkeypatch.setattr(settings, "alchemy_rpc_url", "")

    resp = client.post("/api/rpc", json={"jsonrpc": "2.0", "id": 1, "method": "eth_chainId"})

    assert resp.status_code == 500
    assert resp.json()["error"]["kind"] == "configuration_error"


def test_rpc_relay_checks_node_url_before_parsing_body(monkeypatch):
    monkeypatch.setattr(settings, "alchemy_rpc_url", "")

    resp = client.post("/api/rpc", content=b"{not json", headers={"content-type": "application/json"})

    assert resp.status_code == 500
    assert resp.json()["error"]["kind"] == "configuration_error"
