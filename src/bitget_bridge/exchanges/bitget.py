"""Bitget exchange client for the spot and swap APIs."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Mapping, TypeVar

from ..errors import ArgumentsRequired, NotSupported
from .balances import parse_balance
from .base import BaseExchangeClient, ProxyConfig
from .fills import reconcile_ledger
from .models import Account, BalanceSet, Candle, Currency, Market, Order, OrderBook, Ticker, Trade, Transaction
from .normalization import RawPayload, iso8601, safe_integer
from .orders import parse_order
from .parsers import (
    find_account_by_type,
    parse_accounts,
    parse_ohlcv,
    parse_order_book,
    parse_ticker,
    parse_trade,
    parse_transaction,
)
from .precision import amount_to_precision, price_to_precision
from .registry import MarketRegistry, RegistryHolder, normalize_market_listing, parse_currencies
from .signing import ApiSection
from .tables import FAMILIES, OHLCV_VOLUME, ORDER_STATE_FILTERS, SPOT, SWAP, TIMEFRAMES

logger = logging.getLogger(__name__)

T = TypeVar("T")

TIMEFRAME_UNITS = {"m": 60, "h": 3600, "d": 86400, "w": 604800}


def parse_timeframe(timeframe: str) -> int:
    """Duration of a timeframe alias like ``"15m"`` in seconds."""
    try:
        return int(timeframe[:-1]) * TIMEFRAME_UNITS[timeframe[-1]]
    except (KeyError, ValueError):
        raise ValueError(f"Unsupported timeframe: {timeframe!r}") from None


def filter_by_since_limit(items: Iterable[T], since: int | None = None, limit: int | None = None) -> list[T]:
    result = sorted(items, key=lambda item: getattr(item, "timestamp", None) or 0)
    if since is not None:
        result = [item for item in result if (getattr(item, "timestamp", None) or 0) >= since]
    if limit is not None:
        result = result[-limit:] if since is None else result[:limit]
    return result


class BitgetClient(BaseExchangeClient):
    """Bitget client covering both product families."""

    def __init__(
        self,
        api_key: str | None = None,
        api_secret: str | None = None,
        *,
        passphrase: str | None = None,
        hostname: str = "bitget.com",
        proxy: ProxyConfig | None = None,
        timeout: float = 10.0,
        default_type: str = SPOT,
        fetch_markets: Iterable[str] = FAMILIES,
        account_id: str | None = None,
        ohlcv_volume: Mapping[str, str | int] | None = None,
        **options: Any,
    ):
        super().__init__(
            "bitget",
            api_key,
            api_secret,
            passphrase=passphrase,
            hostname=hostname,
            proxy=proxy,
            timeout=timeout,
            **options,
        )
        self.default_type = default_type
        self.market_types = tuple(fetch_markets)
        self.account_id = account_id
        self.ohlcv_volume = dict(ohlcv_volume or OHLCV_VOLUME)
        self._registry = RegistryHolder()
        self._markets_lock = asyncio.Lock()
        self._accounts: list[Account] | None = None

    # Markets

    @property
    def registry(self) -> MarketRegistry | None:
        return self._registry.current

    async def load_markets(self, reload: bool = False) -> MarketRegistry:
        """Fetch markets and currencies once and publish them as one registry.

        Concurrent callers wait for the first load instead of fetching again.
        """
        current = self._registry.current
        if current is not None and not reload:
            return current
        async with self._markets_lock:
            current = self._registry.current
            if current is not None and not reload:
                return current
            markets = await self.fetch_markets()
            currencies = await self.fetch_currencies()
            return self._registry.publish(MarketRegistry(markets, currencies))

    async def market(self, symbol: str) -> Market:
        registry = await self.load_markets()
        return registry.market(symbol)

    async def fetch_markets(self) -> list[Market]:
        markets: list[Market] = []
        for market_type in self.market_types or (self.default_type,):
            markets.extend(await self.fetch_markets_by_type(market_type))
        return markets

    async def fetch_markets_by_type(self, market_type: str) -> list[Market]:
        if market_type == SPOT:
            response = await self.request(ApiSection.DATA, "GET", "common/symbols")
        elif market_type == SWAP:
            response = await self.request(ApiSection.CAPI, "GET", "market/contracts")
        else:
            raise NotSupported(f"bitget fetch_markets does not support market type {market_type!r}")
        return normalize_market_listing(response)

    async def fetch_currencies(self) -> dict[str, Currency]:
        response = await self.request(ApiSection.DATA, "GET", "common/currencys")
        return parse_currencies(response)

    async def fetch_time(self) -> int | None:
        response = await self.request(ApiSection.DATA, "GET", "common/timestamp")
        return safe_integer(response, "data")

    # Market data

    async def fetch_ticker(self, symbol: str) -> Ticker:
        market = await self.market(symbol)
        request = {"symbol": market.id}
        if market.spot:
            response = await self.request(ApiSection.DATA, "GET", "market/detail/merged", request)
        else:
            response = await self.request(ApiSection.CAPI, "GET", "market/ticker", request)
        payload = RawPayload.from_response(response)
        raw = {"symbol": market.id, "timestamp": payload.timestamp, **payload.data}
        return parse_ticker(raw, self.registry, market)

    async def fetch_tickers(
        self,
        symbols: Iterable[str] | None = None,
        market_type: str | None = None,
    ) -> dict[str, Ticker]:
        await self.load_markets()
        market_type = market_type or self.default_type
        if market_type == SPOT:
            response = await self.request(ApiSection.DATA, "GET", "market/tickers")
        elif market_type == SWAP:
            response = await self.request(ApiSection.CAPI, "GET", "market/tickers")
        else:
            raise NotSupported(f"bitget fetch_tickers does not support market type {market_type!r}")
        payload = RawPayload.from_response(response)
        result: dict[str, Ticker] = {}
        for item in payload.items():
            ticker = parse_ticker({"timestamp": payload.timestamp, **item}, self.registry)
            result[ticker.symbol] = ticker
        if symbols is not None:
            wanted = set(symbols)
            result = {symbol: ticker for symbol, ticker in result.items() if symbol in wanted}
        return result

    async def fetch_order_book(self, symbol: str, limit: int | None = None) -> OrderBook:
        market = await self.market(symbol)
        if market.spot:
            request = {"symbol": market.id, "type": "step0"}
            response = await self.request(ApiSection.DATA, "GET", "market/depth", request)
        else:
            request = {"symbol": market.id, "limit": limit or 100}
            response = await self.request(ApiSection.CAPI, "GET", "market/depth", request)
        data = RawPayload.from_response(response).data
        return parse_order_book(data, market.symbol)

    async def fetch_trades(self, symbol: str, since: int | None = None, limit: int | None = None) -> list[Trade]:
        market = await self.market(symbol)
        request: dict[str, Any] = {"symbol": market.id}
        if market.spot:
            if limit is not None:
                request["size"] = limit
            response = await self.request(ApiSection.DATA, "GET", "market/history/trade", request)
        else:
            request["limit"] = limit or 100
            response = await self.request(ApiSection.CAPI, "GET", "market/trades", request)
        raw_trades = RawPayload.from_response(response).items("data")
        trades = [parse_trade(item, self.registry, market) for item in raw_trades]
        return filter_by_since_limit(trades, since, limit)

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: int | None = None,
        limit: int | None = None,
    ) -> list[Candle]:
        market = await self.market(symbol)
        interval = TIMEFRAMES[market.type].get(timeframe)
        if interval is None:
            raise NotSupported(f"bitget does not support timeframe {timeframe!r} for {market.type} markets")
        request: dict[str, Any] = {"symbol": market.id}
        if market.spot:
            request["period"] = interval
            if limit is not None:
                request["size"] = limit
            response = await self.request(ApiSection.DATA, "GET", "market/history/kline", request)
        else:
            duration = parse_timeframe(timeframe) * 1000
            now = self.milliseconds()
            if since is None:
                start = now - (limit or 1000) * duration
                end = now
            else:
                start = since
                end = now if limit is None else since + limit * duration
            request.update(granularity=interval, start=iso8601(start), end=iso8601(end))
            response = await self.request(ApiSection.CAPI, "GET", "market/candles", request)
        candles = [
            parse_ohlcv(item, market.type, self.ohlcv_volume)
            for item in RawPayload.from_response(response).items()
        ]
        return filter_by_since_limit(candles, since, limit)

    # Accounts

    async def fetch_accounts(self) -> list[Account]:
        response = await self.request(ApiSection.API, "GET", "account/accounts", {"method": "accounts"})
        self._accounts = parse_accounts(response)
        return self._accounts

    async def get_account_id(self, account_type: str | None = None) -> str:
        if self.account_id is not None:
            return self.account_id
        account_type = account_type or self.default_type
        accounts = self._accounts if self._accounts is not None else await self.fetch_accounts()
        account = find_account_by_type(accounts, account_type)
        return account.id

    async def fetch_balance(self, account_type: str | None = None) -> BalanceSet:
        """Fetch balances of one account family.

        Spot balances are keyed by currency, swap balances by market symbol.
        """
        registry = await self.load_markets()
        account_type = account_type or self.default_type
        if account_type == SPOT:
            account_id = await self.get_account_id(account_type)
            request = {"account_id": account_id, "method": "balance"}
            response = await self.request(ApiSection.API, "GET", "accounts/{account_id}/balance", request)
        elif account_type == SWAP:
            response = await self.request(ApiSection.SWAP, "GET", "account/accounts")
        else:
            raise NotSupported(f"bitget fetch_balance does not support the {account_type!r} account type")
        return parse_balance(account_type, response, registry)

    # Orders

    async def create_order(
        self,
        symbol: str,
        order_type: str,
        amount: float,
        price: float | None = None,
        *,
        match_price: int = 0,
        execution_type: int = 0,
        client_order_id: str | None = None,
    ) -> Order:
        """Place a swap order.

        Args:
            symbol: Swap market symbol
            order_type: 1 open long, 2 open short, 3 close long, 4 close short
            amount: Contract count
            price: Limit price, ignored by the exchange when ``match_price`` is 1
            match_price: 1 to trade at the best counterparty price
            execution_type: 0 normal, 1 post only, 2 fill or kill, 3 immediate or cancel
            client_order_id: Optional client order id

        Returns:
            The created order as acknowledged by the exchange
        """
        market = await self.market(symbol)
        if not market.swap:
            raise NotSupported("bitget create_order supports swap markets only")
        request: dict[str, Any] = {
            "symbol": market.id,
            "type": str(order_type),
            "size": str(amount_to_precision(amount, market.precision.amount)),
            "match_price": str(match_price),
            "order_type": str(execution_type),
        }
        if price is not None:
            request["price"] = str(price_to_precision(price, market.precision.price))
        elif not match_price:
            raise ArgumentsRequired("bitget create_order requires a price unless match_price is 1")
        if client_order_id is not None:
            request["client_oid"] = client_order_id
        response = await self.request(ApiSection.SWAP, "POST", "order/placeOrder", request)
        logger.info("Placed %s order on %s: %s", order_type, market.symbol, response)
        return parse_order(RawPayload.from_response(response).data, self.registry, market)

    async def cancel_order(self, order_id: str, symbol: str) -> Order:
        market = await self.market(symbol)
        if market.swap:
            request = {"symbol": market.id, "orderId": order_id}
            response = await self.request(ApiSection.SWAP, "POST", "order/cancel_order", request)
        else:
            request = {"order_id": order_id, "method": "submitcancel"}
            response = await self.request(ApiSection.API, "POST", "order/orders/{order_id}/submitcancel", request)
        data = RawPayload.from_response(response).data
        if not isinstance(data, dict):
            data = {"order_id": order_id}
        return parse_order({"order_id": order_id, **data}, self.registry, market)

    async def fetch_order(self, order_id: str, symbol: str) -> Order:
        market = await self.market(symbol)
        if market.swap:
            request = {"symbol": market.id, "orderId": order_id}
            response = await self.request(ApiSection.SWAP, "GET", "order/detail", request)
        else:
            request = {"order_id": order_id, "method": "getOrder"}
            response = await self.request(ApiSection.API, "POST", "order/orders/{order_id}", request)
        return parse_order(RawPayload.from_response(response).data, self.registry, market)

    async def fetch_orders_by_state(
        self,
        state: str,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
    ) -> list[Order]:
        """List orders in one state filter (``open``, ``closed``, ``filled``... or a raw code)."""
        market = await self.market(symbol)
        status = ORDER_STATE_FILTERS.get(state, state)
        if market.swap:
            request = {"symbol": market.id, "status": status, "from": "1", "to": "1", "limit": str(limit or 100)}
            response = await self.request(ApiSection.SWAP, "GET", "order/orders", request)
        else:
            request = {"symbol": market.id, "states": status, "method": "openOrders"}
            if limit is not None:
                request["size"] = str(limit)
            response = await self.request(ApiSection.API, "GET", "order/orders", request)
        raw_orders = RawPayload.from_response(response).items("list")
        # spot pages come back as [orders, cursor]
        if raw_orders and isinstance(raw_orders[0], list):
            raw_orders = raw_orders[0]
        orders = [parse_order(item, self.registry, market) for item in raw_orders]
        return filter_by_since_limit(orders, since, limit)

    async def fetch_open_orders(self, symbol: str, since: int | None = None, limit: int | None = None) -> list[Order]:
        return await self.fetch_orders_by_state("open", symbol, since, limit)

    async def fetch_closed_orders(self, symbol: str, since: int | None = None, limit: int | None = None) -> list[Order]:
        return await self.fetch_orders_by_state("closed", symbol, since, limit)

    async def fetch_my_trades(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        order_id: str | None = None,
    ) -> list[Trade]:
        """Fetch the user's fills.

        Spot fills arrive as ledger leg pairs and are reconciled into trades;
        swap fills are already one record per trade.
        """
        market = await self.market(symbol)
        if market.swap:
            if order_id is None:
                raise ArgumentsRequired("bitget fetch_my_trades requires an order_id for swap markets")
            request = {"symbol": market.id, "orderId": order_id}
            response = await self.request(ApiSection.SWAP, "GET", "order/fills", request)
            trades = [parse_trade(item, self.registry, market) for item in RawPayload.from_response(response).items()]
        else:
            request = {"symbol": market.id, "method": "matchresults"}
            if order_id is not None:
                request["order_id"] = order_id
            if limit is not None:
                request["size"] = str(limit)
            response = await self.request(ApiSection.API, "POST", "order/matchresults", request)
            trades = reconcile_ledger(RawPayload.from_response(response).items(), self.registry, market)
        return filter_by_since_limit(trades, since, limit)

    # Funding

    async def fetch_transactions(
        self,
        code: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        transaction_type: str | None = None,
    ) -> list[Transaction]:
        """Fetch deposits and withdrawals, optionally for one currency and one direction."""
        registry = await self.load_markets()
        directions = (transaction_type,) if transaction_type else ("deposit", "withdraw")
        transactions: list[Transaction] = []
        for direction in directions:
            request: dict[str, Any] = {"type": direction, "size": str(limit or 100), "method": "deposit_withdraw"}
            if code is not None:
                currency = registry.currencies.get(code)
                request["currency"] = currency.id if currency is not None else code.lower()
            response = await self.request(ApiSection.API, "GET", "dw/query/deposit_withdraw", request)
            transactions.extend(parse_transaction(item) for item in RawPayload.from_response(response).items())
        return filter_by_since_limit(transactions, since, limit)
