"""Pytest configuration and fixtures."""

import pytest

from bitget_bridge.exchanges.registry import MarketRegistry


@pytest.fixture
def api_key():
    """Test API key."""
    return "test_api_key_123456"


@pytest.fixture
def api_secret():
    """Test API secret."""
    return "test_api_secret_789012"


@pytest.fixture
def passphrase():
    """Test passphrase."""
    return "test_passphrase_345678"


@pytest.fixture
def spot_market_record():
    """Raw spot symbol record."""
    return {
        "base_currency": "btc",
        "quote_currency": "usdt",
        "symbol": "btc_usdt",
        "tick_size": "2",
        "size_increment": "4",
        "status": "1",
        "base_asset_precision": "8",
    }


@pytest.fixture
def swap_market_record():
    """Raw swap contract record."""
    return {
        "symbol": "btcusd",
        "underlying_index": "BTC",
        "quote_currency": "USD",
        "coin": "BTC",
        "contract_val": "1",
        "listing": None,
        "delivery": ["07:00:00", "15:00:00", "23:00:00"],
        "size_increment": "0",
        "tick_size": "1",
        "forwardContractFlag": False,
        "priceEndStep": 5,
    }


@pytest.fixture
def spot_listing(spot_market_record):
    """Enveloped spot listing response."""
    return {
        "status": "ok",
        "ts": 1595538241474,
        "data": [
            spot_market_record,
            {
                "base_currency": "eth",
                "quote_currency": "btc",
                "symbol": "eth_btc",
                "tick_size": "6",
                "size_increment": "3",
                "status": "0",
            },
        ],
    }


@pytest.fixture
def swap_listing(swap_market_record):
    """Array-root swap listing response."""
    return [swap_market_record]


@pytest.fixture
def registry(spot_listing, swap_listing):
    """Registry holding btc_usdt, eth_btc and btcusd."""
    return MarketRegistry.load_all(spot_listing, swap_listing, {"status": "ok", "data": ["btc", "usdt", "eth"]})
