"""Static lookup tables shared by the normalizers and the client.

Everything here is configuration data: read-only mappings built once at
import time. Per-family field tables list the raw keys to try, in order, for
each logical field, so the spot and swap schemas can be read side by side.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

SPOT = "spot"
SWAP = "swap"
FAMILIES = (SPOT, SWAP)

FieldTable = Mapping[str, tuple[str, ...]]


def _frozen(data: dict) -> Mapping:
    return MappingProxyType(
        {
            key: _frozen(value) if isinstance(value, dict) else value
            for key, value in data.items()
        }
    )


# Raw order state code -> normalized status. Codes outside the table pass through.
ORDER_STATUSES: Mapping[str, str] = _frozen({
    "-2": "failed",
    "-1": "canceled",
    "0": "open",
    "1": "open",
    "2": "closed",
    "3": "open",
    "4": "canceled",
})

# Swap order type code -> side (1 open long, 2 open short, 3 close long, 4 close short).
ORDER_SIDES: Mapping[str, str] = _frozen({
    "1": "buy",
    "2": "sell",
    "3": "sell",
    "4": "buy",
})

# Order state filters accepted by the order list endpoints.
ORDER_STATE_FILTERS: Mapping[str, str] = _frozen({
    "canceled": "-1",
    "unfilled": "0",
    "partially_filled": "1",
    "filled": "2",
    "open": "3",
    "closed": "4",
    "all": "5",
})

LEDGER_ENTRY_TYPES: Mapping[str, str] = _frozen({
    "transfer": "transfer",
    "trade": "trade",
    "rebate": "rebate",
    "match": "trade",
    "fee": "fee",
    "settlement": "trade",
    "liquidation": "trade",
    "funding": "fee",
    "margin": "margin",
})

TRANSACTION_STATUSES: Mapping[str, str] = _frozen({
    "-3": "pending",
    "-2": "pending",
    "-1": "failed",
    "0": "pending",
    "1": "pending",
    "2": "ok",
    "3": "pending",
    "4": "pending",
    "5": "pending",
})

TIMEFRAMES: Mapping[str, Mapping[str, str]] = _frozen({
    SPOT: {
        "1m": "1min",
        "5m": "5min",
        "15m": "15min",
        "30m": "30min",
        "1h": "60min",
        "2h": "120min",
        "4h": "240min",
        "6h": "360min",
        "12h": "720min",
        "1d": "1day",
        "1w": "1week",
    },
    SWAP: {
        "1m": "60",
        "5m": "300",
        "15m": "900",
        "30m": "1800",
        "1h": "3600",
        "2h": "7200",
        "4h": "14400",
        "6h": "21600",
        "12h": "43200",
        "1d": "86400",
        "1w": "604800",
    },
})

# Where each family's candle keeps its volume: a dict key for spot candles,
# a list position for swap candles.
OHLCV_VOLUME: Mapping[str, str | int] = _frozen({
    SPOT: "amount",
    SWAP: 5,
})

TRADING_FEES: Mapping[str, Mapping[str, float]] = _frozen({
    SPOT: {"taker": 0.002, "maker": 0.002},
    SWAP: {"taker": 0.0006, "maker": 0.0004},
})

COMMON_CURRENCIES: Mapping[str, str] = _frozen({
    "XBT": "BTC",
    "BCC": "BCH",
    "BCHABC": "BCH",
    "BCHSV": "BSV",
    "DRK": "DASH",
})

# Delimiter used by each family's native instrument ids (btc_usdt vs BTC-USD).
MARKET_ID_DELIMITERS: Mapping[str, str] = _frozen({
    SPOT: "_",
    SWAP: "-",
})

TAKER_OR_MAKER: Mapping[str, str] = _frozen({
    "M": "maker",
    "T": "taker",
})

SUCCESS_CODES = frozenset({"0", "00000"})

TICKER_FIELDS: Mapping[str, FieldTable] = _frozen({
    SPOT: {
        "market_id": ("symbol",),
        "timestamp": ("timestamp", "id"),
        "last": ("close",),
        "open": ("open",),
        "high": ("high",),
        "low": ("low",),
        "bid": ("bid",),
        "ask": ("ask",),
        "base_volume": ("amount",),
        "quote_volume": ("vol",),
    },
    SWAP: {
        "market_id": ("instrument_id", "symbol"),
        "timestamp": ("timestamp",),
        "last": ("last",),
        "open": ("open",),
        "high": ("high_24h",),
        "low": ("low_24h",),
        "bid": ("best_bid",),
        "ask": ("best_ask",),
        "base_volume": ("volume_24h",),
        "quote_volume": (),
    },
})

TRADE_FIELDS: Mapping[str, FieldTable] = _frozen({
    SPOT: {
        "id": ("id",),
        "market_id": ("symbol",),
        "timestamp": ("ts", "timestamp"),
        "amount": ("amount",),
        "side": ("direction",),
        "order_id": (),
        "fee": (),
        "taker_or_maker": (),
    },
    SWAP: {
        "id": ("trade_id",),
        "market_id": ("symbol", "instrument_id"),
        "timestamp": ("timestamp", "created_at"),
        "amount": ("size", "order_qty"),
        "side": ("side",),
        "order_id": ("order_id",),
        "fee": ("fee",),
        "taker_or_maker": ("exec_type", "liquidity"),
    },
})

ORDER_FIELDS: Mapping[str, FieldTable] = _frozen({
    SPOT: {
        "filled": ("filled_size",),
        "cost": ("filled_notional", "funds"),
        "average": ("price_avg",),
    },
    SWAP: {
        "filled": ("filled_qty",),
        "cost": ("filled_notional", "funds"),
        "average": ("price_avg",),
    },
})

# Keys that only appear in swap payloads of each record kind.
SWAP_MARKERS: Mapping[str, tuple[str, ...]] = _frozen({
    "ticker": ("last", "best_bid", "best_ask", "volume_24h", "instrument_id"),
    "trade": ("trade_id", "size"),
    "order": ("filled_qty", "contract_val", "pnl"),
})
