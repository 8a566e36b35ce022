"""Normalizers for market data, transactions and ledger entries."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping

from ..errors import ExchangeError
from .models import Account, Candle, Fee, LedgerEntry, OrderBook, Ticker, Trade, Transaction
from .normalization import (
    detect_family,
    iso8601,
    parse_timestamp,
    resolve_symbol,
    safe_currency_code,
    safe_float,
    safe_integer,
    safe_string,
    safe_value,
)
from .tables import (
    LEDGER_ENTRY_TYPES,
    OHLCV_VOLUME,
    SPOT,
    TAKER_OR_MAKER,
    TICKER_FIELDS,
    TRADE_FIELDS,
    TRANSACTION_STATUSES,
)

if TYPE_CHECKING:
    from .models import Market
    from .registry import MarketRegistry

logger = logging.getLogger(__name__)


def _quote_level(raw: dict[str, Any], keys: tuple[str, ...]) -> tuple[float | None, float | None]:
    """Read a bid/ask that is either a scalar or a ``[price, volume]`` pair."""
    value = safe_value(raw, *keys)
    if isinstance(value, (list, tuple)):
        return safe_float(value, 0), safe_float(value, 1)
    return safe_float(raw, *keys), None


def parse_ticker(
    raw: dict[str, Any],
    registry: "MarketRegistry | None" = None,
    market: "Market | None" = None,
) -> Ticker:
    """Normalize a spot or swap ticker.

    Spot tickers embed volume alongside bid/ask price, swap tickers only
    report the best prices, so bid/ask volumes are only known for spot.
    """
    family = detect_family(raw, "ticker", market)
    fields = TICKER_FIELDS[family]
    resolved = resolve_symbol(safe_string(raw, *fields["market_id"]), registry, family, market)
    timestamp = parse_timestamp(safe_value(raw, *fields["timestamp"]))

    last = safe_float(raw, *fields["last"])
    open_ = safe_float(raw, *fields["open"])
    bid, bid_volume = _quote_level(raw, fields["bid"])
    ask, ask_volume = _quote_level(raw, fields["ask"])
    base_volume = safe_float(raw, *fields["base_volume"])
    quote_volume = safe_float(raw, *fields["quote_volume"])

    vwap = None
    if base_volume and quote_volume is not None:
        vwap = quote_volume / base_volume
    change = percentage = average = None
    if last is not None and open_ is not None:
        change = last - open_
        average = (open_ + last) / 2
        if open_ != 0:
            percentage = change / open_ * 100

    return Ticker(
        symbol=resolved.symbol,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        high=safe_float(raw, *fields["high"]),
        low=safe_float(raw, *fields["low"]),
        bid=bid,
        bid_volume=bid_volume,
        ask=ask,
        ask_volume=ask_volume,
        vwap=vwap,
        open=open_,
        close=last,
        last=last,
        previous_close=None,
        change=change,
        percentage=percentage,
        average=average,
        base_volume=base_volume,
        quote_volume=quote_volume,
        info=raw,
    )


def parse_trade(
    raw: dict[str, Any],
    registry: "MarketRegistry | None" = None,
    market: "Market | None" = None,
) -> Trade:
    """Normalize a public or private trade.

    The exchange reports fees as rebate-positive / charge-negative numbers,
    the normalized fee is charge-positive.
    """
    family = detect_family(raw, "trade", market)
    fields = TRADE_FIELDS[family]
    resolved = resolve_symbol(safe_string(raw, *fields["market_id"]), registry, family, market)
    timestamp = parse_timestamp(safe_value(raw, *fields["timestamp"]))
    price = safe_float(raw, "price")
    amount = safe_float(raw, *fields["amount"])
    side = safe_string(raw, *fields["side"])
    taker_or_maker = safe_string(raw, *fields["taker_or_maker"])
    taker_or_maker = TAKER_OR_MAKER.get(taker_or_maker, taker_or_maker)

    cost = None
    if amount is not None and price is not None:
        cost = amount * price

    fee = None
    fee_cost = safe_float(raw, *fields["fee"])
    if fee_cost is not None:
        fee_currency = resolved.base if side == "buy" else resolved.quote
        fee = Fee(cost=-fee_cost if fee_cost else 0.0, currency=fee_currency)

    return Trade(
        id=safe_string(raw, *fields["id"]),
        order=safe_string(raw, *fields["order_id"]),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=resolved.symbol,
        type=None,
        taker_or_maker=taker_or_maker,
        side=side,
        price=price,
        amount=amount,
        cost=cost,
        fee=fee,
        info=raw,
    )


def parse_ohlcv(
    raw: dict[str, Any] | list[Any],
    family: str = SPOT,
    volume_fields: Mapping[str, str | int] = OHLCV_VOLUME,
) -> Candle:
    """Normalize one candle.

    Spot candles are objects, swap candles are positional arrays, and the
    volume lives under a different key or index in each. ``volume_fields``
    selects it per family.
    """
    volume_key = volume_fields.get(family)
    if isinstance(raw, (list, tuple)):
        if not isinstance(volume_key, int):
            volume_key = 5
        return Candle(
            timestamp=parse_timestamp(safe_value(raw, 0)),
            open=safe_float(raw, 1),
            high=safe_float(raw, 2),
            low=safe_float(raw, 3),
            close=safe_float(raw, 4),
            volume=safe_float(raw, volume_key),
        )
    if not isinstance(volume_key, str):
        volume_key = "amount"
    return Candle(
        timestamp=parse_timestamp(safe_value(raw, "id")),
        open=safe_float(raw, "open"),
        high=safe_float(raw, "high"),
        low=safe_float(raw, "low"),
        close=safe_float(raw, "close"),
        volume=safe_float(raw, volume_key),
    )


def _book_side(levels: Any, descending: bool) -> list[list[float]]:
    result = []
    for level in levels or []:
        price = safe_float(level, 0)
        amount = safe_float(level, 1)
        if price is not None and amount is not None:
            result.append([price, amount])
    return sorted(result, key=lambda level: level[0], reverse=descending)


def parse_order_book(raw: dict[str, Any], symbol: str | None = None) -> OrderBook:
    timestamp = parse_timestamp(safe_value(raw, "timestamp", "ts"))
    return OrderBook(
        symbol=symbol,
        bids=_book_side(raw.get("bids"), descending=True),
        asks=_book_side(raw.get("asks"), descending=False),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        nonce=safe_integer(raw, "id"),
    )


def parse_transaction_status(status: str | None) -> str | None:
    if status is None:
        return None
    return TRANSACTION_STATUSES.get(status, status)


def parse_transaction(raw: dict[str, Any]) -> Transaction:
    """Normalize a deposit or withdrawal record.

    Withdrawals are recognized by ``withdrawal_id``. Their fee carries the
    currency id as a suffix (``"0.01000000eth"``), which is stripped.
    """
    withdrawal_id = safe_string(raw, "withdrawal_id")
    address_to = safe_string(raw, "to")
    if withdrawal_id is not None:
        tx_type = "withdrawal"
        tx_id = withdrawal_id
    else:
        tx_type = "deposit"
        tx_id = safe_string(raw, "payment_id", "deposit_id")
    currency_id = safe_string(raw, "currency")
    code = safe_currency_code(currency_id)
    timestamp = parse_timestamp(safe_value(raw, "timestamp"))

    fee_cost = None
    if tx_type == "deposit":
        fee_cost = 0.0
    elif currency_id is not None:
        fee_text = safe_string(raw, "fee")
        if fee_text is not None:
            fee_cost = safe_float({"fee": fee_text.lower().replace(currency_id.lower(), "")}, "fee")

    return Transaction(
        id=tx_id,
        txid=safe_string(raw, "txid"),
        type=tx_type,
        currency=code,
        amount=safe_float(raw, "amount"),
        address_from=safe_string(raw, "from"),
        address_to=address_to,
        address=address_to,
        status=parse_transaction_status(safe_string(raw, "status")),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        fee=Fee(cost=fee_cost, currency=code),
        info=raw,
    )


def parse_ledger_entry_type(entry_type: str | None) -> str | None:
    if entry_type is None:
        return None
    return LEDGER_ENTRY_TYPES.get(entry_type, entry_type)


def parse_ledger_entry(raw: dict[str, Any], currency: str | None = None) -> LedgerEntry:
    """Normalize one account/spot/margin/swap ledger record.

    The balance before the movement is never reported, so ``before`` stays
    unknown.
    """
    code = safe_currency_code(safe_string(raw, "currency")) or currency
    timestamp = parse_timestamp(safe_value(raw, "timestamp"))
    return LedgerEntry(
        id=safe_string(raw, "ledger_id"),
        type=parse_ledger_entry_type(safe_string(raw, "type")),
        currency=code,
        amount=safe_float(raw, "amount"),
        before=None,
        after=safe_float(raw, "balance"),
        status="ok",
        reference_id=safe_string(raw.get("details") or {}, "order_id"),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        fee=Fee(cost=safe_float(raw, "fee"), currency=code),
        info=raw,
    )


def parse_accounts(raw: Any) -> list[Account]:
    items = raw.get("data", []) if isinstance(raw, dict) else raw or []
    accounts = []
    for item in items:
        account_type = safe_string(item, "type")
        accounts.append(
            Account(
                id=safe_string(item, "id"),
                type=account_type.lower() if account_type else None,
                info=item,
            )
        )
    return accounts


def find_account_by_type(accounts: list[Account], account_type: str) -> Account:
    """Return the single account of ``account_type``.

    Raises:
        ExchangeError: No account or more than one account has that type
    """
    matches = [account for account in accounts if account.type == account_type]
    if not matches:
        raise ExchangeError(
            f"bitget could not find an account_id with type {account_type!r}, set account_id explicitly"
        )
    if len(matches) > 1:
        raise ExchangeError(
            f"bitget found more than one account_id with type {account_type!r}, set account_id explicitly"
        )
    return matches[0]
