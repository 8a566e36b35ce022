"""Rebuilding trades from paired ledger legs.

The fill feed reports every execution as two legs sharing a ``trade_id``,
one per currency that moved. Only the leg in the currency the user paid
with carries a fee.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from ..errors import NotSupported
from .models import Fee, Trade
from .normalization import (
    ResolvedSymbol,
    iso8601,
    parse_timestamp,
    resolve_symbol,
    safe_currency_code,
    safe_float,
    safe_string,
    safe_value,
)
from .tables import SPOT, SWAP, TAKER_OR_MAKER

if TYPE_CHECKING:
    from .models import Market
    from .registry import MarketRegistry

logger = logging.getLogger(__name__)


def group_legs(raw_legs: Iterable[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Group legs by ``trade_id``, keeping first-seen order."""
    groups: dict[str, list[dict[str, Any]]] = {}
    for leg in raw_legs:
        trade_id = safe_string(leg, "trade_id")
        if trade_id is None:
            logger.debug("Ledger leg without trade_id: %r", leg)
            continue
        groups.setdefault(trade_id, []).append(leg)
    return groups


def user_leg_index(pair: list[dict[str, Any]]) -> int:
    """Index of the fee-bearing leg; leg 0 when neither leg has a fee."""
    for index, leg in enumerate(pair):
        if safe_float(leg, "fee"):
            return index
    return 0


def _leg_market_id(leg: dict[str, Any]) -> str | None:
    return safe_string(leg, "instrument_id", "symbol")


def _resolve_instrument(
    market_id: str | None,
    registry: "MarketRegistry | None",
    market: "Market | None",
) -> ResolvedSymbol:
    """Resolve the pair's instrument: registry, then either delimiter, then the caller's market."""
    for family in (SWAP, SPOT):
        resolved = resolve_symbol(market_id, registry, family)
        if resolved.quote is not None:
            return resolved
    if market is not None:
        return ResolvedSymbol(market.symbol, market.base, market.quote, market)
    return resolve_symbol(market_id, registry, SPOT)


def parse_my_trade(
    pair: list[dict[str, Any]],
    registry: "MarketRegistry | None" = None,
    market: "Market | None" = None,
) -> Trade:
    """Turn one two-leg group into a trade.

    When the quote currency of the pair cannot be resolved the side is
    unknown, so ``side``, ``amount`` and ``cost`` are left as ``None``.

    Raises:
        NotSupported: The legs name different instruments
    """
    first, second = pair
    market_id = _leg_market_id(first)
    if market_id != _leg_market_id(second):
        raise NotSupported(
            "bitget parse_my_trade received differing instrument_ids in one fill, the response format may have changed"
        )
    resolved = _resolve_instrument(market_id, registry, market)
    quote = resolved.quote

    index = user_leg_index(pair)
    user, other = pair[index], pair[1 - index]
    user_currency = safe_currency_code(safe_string(user, "currency"))

    side = amount = cost = None
    if quote is None:
        logger.warning("Cannot resolve the quote currency of trade %s (%s)", safe_string(first, "trade_id"), market_id)
    elif user_currency == quote:
        side = "sell"
        amount = safe_float(other, "size")
        cost = safe_float(user, "size")
    else:
        side = "buy"
        amount = safe_float(user, "size")
        cost = safe_float(other, "size")

    fee = None
    fee_cost = safe_float(user, "fee")
    if fee_cost is not None:
        fee = Fee(cost=-fee_cost if fee_cost else 0.0, currency=user_currency)

    taker_or_maker = safe_string(user, "exec_type", "liquidity")
    timestamp = parse_timestamp(safe_value(user, "timestamp", "created_at"))
    return Trade(
        id=safe_string(first, "trade_id"),
        order=safe_string(user, "order_id"),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=resolved.symbol,
        type=None,
        taker_or_maker=TAKER_OR_MAKER.get(taker_or_maker, taker_or_maker),
        side=side,
        price=safe_float(first, "price"),
        amount=amount,
        cost=cost,
        fee=fee,
        info=pair,
    )


def reconcile_ledger(
    raw_legs: Iterable[dict[str, Any]],
    registry: "MarketRegistry | None" = None,
    market: "Market | None" = None,
) -> list[Trade]:
    """Rebuild trades from raw fill legs.

    Groups that do not hold exactly two legs are truncated or malformed and
    are left out of the result. ``market`` is the instrument the fills were
    requested for, used when a leg's instrument id does not name its quote.
    """
    trades = []
    for trade_id, pair in group_legs(raw_legs).items():
        if len(pair) != 2:
            logger.debug("Dropping trade %s with %d ledger legs", trade_id, len(pair))
            continue
        trades.append(parse_my_trade(pair, registry, market))
    return trades
