"""Order normalization."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .models import Fee, Order
from .normalization import (
    detect_family,
    iso8601,
    parse_timestamp,
    resolve_symbol,
    safe_float,
    safe_string,
    safe_value,
)
from .tables import ORDER_FIELDS, ORDER_SIDES, ORDER_STATUSES

if TYPE_CHECKING:
    from .models import Market
    from .registry import MarketRegistry

logger = logging.getLogger(__name__)

ORDER_TYPES = ("limit", "market")


def parse_order_status(status: str | None) -> str | None:
    """Map a raw state code onto open/closed/canceled/failed.

    Codes missing from the table are returned unchanged.
    """
    if status is None:
        return None
    mapped = ORDER_STATUSES.get(status)
    if mapped is None:
        logger.debug("Unmapped order status %r", status)
        return status
    return mapped


def parse_order_side(code: str | None) -> str | None:
    if code is None:
        return None
    return ORDER_SIDES.get(code, code)


def parse_order_type(raw: dict[str, Any]) -> str | None:
    order_type = safe_string(raw, "type")
    if order_type in ORDER_TYPES:
        return order_type
    return "futures" if "pnl" in raw else "swap"


def parse_order(
    raw: dict[str, Any],
    registry: "MarketRegistry | None" = None,
    market: "Market | None" = None,
) -> Order:
    """Normalize an order snapshot.

    Args:
        raw: Order record from either product family
        registry: Market registry used to resolve the instrument id
        market: Market to fall back on when the record has no instrument id

    Returns:
        Order with ``amount >= filled`` and ``remaining = amount - filled``
        (zero for market orders)
    """
    family = detect_family(raw, "order", market)
    fields = ORDER_FIELDS[family]
    resolved = resolve_symbol(safe_string(raw, "instrument_id", "symbol"), registry, family, market)

    side = safe_string(raw, "side")
    if side not in ("buy", "sell"):
        side = parse_order_side(safe_string(raw, "type"))
    order_type = parse_order_type(raw)

    amount = safe_float(raw, "size")
    filled = safe_float(raw, *fields["filled"])
    remaining = None
    if amount is not None and filled is not None:
        amount = max(amount, filled)
        remaining = max(0.0, amount - filled)
    if order_type == "market":
        remaining = 0.0

    cost = safe_float(raw, *fields["cost"])
    average = safe_float(raw, *fields["average"])
    if cost is None:
        if filled is not None and average is not None:
            cost = average * filled
    elif average is None and filled:
        average = cost / filled

    fee = None
    fee_cost = safe_float(raw, "fee")
    if fee_cost is not None:
        fee = Fee(cost=fee_cost, currency=None)

    timestamp = parse_timestamp(safe_value(raw, "timestamp", "created_at"))
    return Order(
        id=safe_string(raw, "order_id"),
        client_order_id=safe_string(raw, "client_oid"),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=resolved.symbol,
        type=order_type,
        side=side,
        price=safe_float(raw, "price"),
        average=average,
        amount=amount,
        filled=filled,
        remaining=remaining,
        cost=cost,
        status=parse_order_status(safe_string(raw, "state", "status")),
        fee=fee,
        info=raw,
    )
