"""Normalized records produced by the parsers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class MinMax:
    min: float | None = None
    max: float | None = None


@dataclass(frozen=True, slots=True)
class Precision:
    """Decimal steps (not digit counts); ``None`` means unknown."""

    amount: float | None = None
    price: float | None = None


@dataclass(frozen=True, slots=True)
class Limits:
    amount: MinMax = field(default_factory=MinMax)
    price: MinMax = field(default_factory=MinMax)
    cost: MinMax = field(default_factory=MinMax)


@dataclass(frozen=True, slots=True)
class Market:
    """A tradable instrument in either product family."""

    id: str
    symbol: str
    base: str | None
    quote: str | None
    base_id: str | None
    quote_id: str | None
    type: str
    spot: bool
    swap: bool
    active: bool | None
    precision: Precision
    limits: Limits
    maker: float | None = None
    taker: float | None = None
    contract_size: float | None = None
    info: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Currency:
    id: str
    code: str
    name: str | None = None
    active: bool | None = None
    fee: float | None = None
    precision: float | None = None
    limits: Limits = field(default_factory=Limits)
    info: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Fee:
    cost: float | None
    currency: str | None = None


@dataclass(frozen=True, slots=True)
class Ticker:
    symbol: str | None
    timestamp: int | None
    datetime: str | None
    high: float | None
    low: float | None
    bid: float | None
    bid_volume: float | None
    ask: float | None
    ask_volume: float | None
    vwap: float | None
    open: float | None
    close: float | None
    last: float | None
    previous_close: float | None
    change: float | None
    percentage: float | None
    average: float | None
    base_volume: float | None
    quote_volume: float | None
    info: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Trade:
    id: str | None
    order: str | None
    timestamp: int | None
    datetime: str | None
    symbol: str | None
    type: str | None
    taker_or_maker: str | None
    side: str | None
    price: float | None
    amount: float | None
    cost: float | None
    fee: Fee | None
    info: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Candle:
    timestamp: int | None
    open: float | None
    high: float | None
    low: float | None
    close: float | None
    volume: float | None


@dataclass(frozen=True, slots=True)
class OrderBook:
    symbol: str | None
    bids: list[list[float]]
    asks: list[list[float]]
    timestamp: int | None
    datetime: str | None
    nonce: int | None


@dataclass(frozen=True, slots=True)
class Order:
    """Snapshot of an order as reported by the exchange."""

    id: str | None
    client_order_id: str | None
    timestamp: int | None
    datetime: str | None
    symbol: str | None
    type: str | None
    side: str | None
    price: float | None
    average: float | None
    amount: float | None
    filled: float | None
    remaining: float | None
    cost: float | None
    status: str | None
    fee: Fee | None
    last_trade_timestamp: int | None = None
    info: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Balance:
    free: float | None = None
    used: float | None = None
    total: float | None = None


@dataclass(frozen=True, slots=True)
class BalanceSet:
    """Balances of one account family.

    Spot sets are keyed by currency code, swap sets by market symbol.
    """

    family: str
    balances: dict[str, Balance]
    info: Any = field(default=None, compare=False, repr=False)

    def __getitem__(self, key: str) -> Balance:
        return self.balances[key]

    def __contains__(self, key: object) -> bool:
        return key in self.balances

    def __len__(self) -> int:
        return len(self.balances)

    @property
    def keyed_by_currency(self) -> bool:
        return self.family == "spot"


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    id: str | None
    type: str | None
    currency: str | None
    amount: float | None
    before: float | None
    after: float | None
    status: str
    reference_id: str | None
    timestamp: int | None
    datetime: str | None
    fee: Fee
    account: str | None = None
    reference_account: str | None = None
    info: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Transaction:
    id: str | None
    txid: str | None
    type: str
    currency: str | None
    amount: float | None
    address_from: str | None
    address_to: str | None
    address: str | None
    status: str | None
    timestamp: int | None
    datetime: str | None
    fee: Fee
    tag: str | None = None
    updated: int | None = None
    info: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Account:
    id: str | None
    type: str | None
    currency: str | None = None
    info: Any = field(default=None, compare=False, repr=False)
