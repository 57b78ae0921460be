import pytest

from portfolio_api import cli
from portfolio_api.errors import UpstreamError
from portfolio_api.services.positions import build_snapshot
from portfolio_api.types import TokenRecord

ADDRESS = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda *_: None)


def _snapshot():
    def rec(symbol, balance, price=None, name=None):
        payload = {
            "network": "eth-mainnet",
            "tokenAddress": f"0x{symbol.lower():0>40}",
            "tokenBalance": balance,
            "tokenMetadata": {"decimals": 0, "symbol": symbol, "name": name},
        }
        if price is not None:
            payload["tokenPrices"] = [{"currency": "usd", "value": price}]
        return TokenRecord.model_validate(payload)

    return build_snapshot(
        ADDRESS,
        "eth-mainnet",
        [rec("bbb", "10", "1"), rec("AAA", "2", "4", "Alpha"), rec("CCC", "100")],
    )


def test_default_order_is_snapshot_order():
    snapshot = _snapshot()
    assert [p.symbol for p in cli.sort_positions(snapshot, None)] == ["bbb", "AAA", "CCC"]


def test_sort_by_symbol_is_case_insensitive():
    snapshot = _snapshot()
    assert [p.symbol for p in cli.sort_positions(snapshot, "symbol")] == ["AAA", "bbb", "CCC"]
    assert [p.symbol for p in cli.sort_positions(snapshot, "symbol", descending=True)] == ["CCC", "bbb", "AAA"]


def test_sort_by_numbers_treats_missing_as_zero():
    snapshot = _snapshot()
    assert [p.symbol for p in cli.sort_positions(snapshot, "balance")] == ["AAA", "bbb", "CCC"]
    assert [p.symbol for p in cli.sort_positions(snapshot, "price")] == ["CCC", "bbb", "AAA"]
    assert [p.symbol for p in cli.sort_positions(snapshot, "weight", descending=True)] == ["bbb", "AAA", "CCC"]


def test_display_sort_leaves_snapshot_untouched():
    snapshot = _snapshot()
    cli.sort_positions(snapshot, "symbol")
    assert [p.symbol for p in snapshot.positions] == ["bbb", "AAA", "CCC"]


def test_unknown_sort_key():
    with pytest.raises(ValueError):
        cli.sort_positions(_snapshot(), "volume")


def test_portfolio_command_prints_table(monkeypatch, capsys):
    async def fake_get_portfolio(address, network=None):
        return _snapshot()

    monkeypatch.setattr(cli, "get_portfolio", fake_get_portfolio)

    assert cli.main(["portfolio", ADDRESS, "--sort", "symbol"]) == 0

    out = capsys.readouterr().out
    assert "Total Value: $18.00 USD" in out
    assert "Tokens discovered: 3" in out
    assert "Top value tokens: bbb · AAA · CCC" in out
    assert out.index("AAA") < out.index("CCC")
    assert "Alpha" in out


def test_portfolio_command_reports_errors(monkeypatch, capsys):
    async def failing_get_portfolio(address, network=None):
        raise UpstreamError("Alchemy Data error", upstream_status=500, detail="boom")

    monkeypatch.setattr(cli, "get_portfolio", failing_get_portfolio)

    assert cli.main(["portfolio", ADDRESS]) == 1
    err = capsys.readouterr().err
    assert "upstream_error" in err
    assert "boom" in err


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "portfolio" in capsys.readouterr().out
