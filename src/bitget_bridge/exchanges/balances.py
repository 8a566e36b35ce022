"""Balance aggregation for the spot and swap account families."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..errors import NotSupported
from .models import Balance, BalanceSet
from .normalization import RawPayload, safe_currency_code, safe_float, safe_string
from .tables import SPOT, SWAP

if TYPE_CHECKING:
    from .registry import MarketRegistry

logger = logging.getLogger(__name__)

USED_LEG_TYPES = ("frozen", "lock")


def _complete(free: float | None, used: float | None, total: float | None) -> Balance:
    if total is None and free is not None and used is not None:
        total = free + used
    elif used is None and free is not None and total is not None:
        used = total - free
    elif free is None and used is not None and total is not None:
        free = total - used
    return Balance(free=free, used=used, total=total)


def parse_spot_balance(raw: Any) -> BalanceSet:
    """Fold spot balance legs into one balance per currency.

    Each leg is ``{currency, type, balance}``: the ``trade`` leg is free
    funds, ``frozen`` and ``lock`` legs add up to used funds (zero when only
    the trade leg is reported). Currencies without legs are absent from the
    result.
    """
    legs = RawPayload.from_response(raw).items("list")
    free: dict[str, float | None] = {}
    used: dict[str, float | None] = {}
    for leg in legs:
        code = safe_currency_code(safe_string(leg, "currency"))
        if code is None:
            continue
        free.setdefault(code, None)
        used.setdefault(code, None)
        leg_type = safe_string(leg, "type")
        amount = safe_float(leg, "balance")
        if leg_type == "trade":
            free[code] = amount
            # a trade leg without frozen/lock legs means nothing is held
            if used[code] is None:
                used[code] = 0.0
        elif leg_type in USED_LEG_TYPES and amount is not None:
            used[code] = (used[code] or 0.0) + amount
    balances = {code: _complete(free[code], used[code], None) for code in free}
    return BalanceSet(family=SPOT, balances=balances, info=raw)


def parse_swap_balance(raw: Any, registry: "MarketRegistry | None" = None) -> BalanceSet:
    """One balance per swap instrument, keyed by market symbol."""
    balances: dict[str, Balance] = {}
    for account in RawPayload.from_response(raw).items():
        market_id = safe_string(account, "symbol")
        if market_id is None:
            continue
        market = registry.by_native_id(market_id) if registry is not None else None
        symbol = market.symbol if market is not None else market_id
        balances[symbol] = _complete(
            safe_float(account, "total_avail_balance"),
            None,
            safe_float(account, "equity"),
        )
    return BalanceSet(family=SWAP, balances=balances, info=raw)


def parse_balance(account_family: str, raw: Any, registry: "MarketRegistry | None" = None) -> BalanceSet:
    """Normalize a balance response for ``account_family`` (spot or swap).

    Spot results are keyed by currency code, swap results by market symbol;
    check ``BalanceSet.family`` before treating keys as currencies.
    """
    if account_family == SPOT:
        return parse_spot_balance(raw)
    if account_family == SWAP:
        return parse_swap_balance(raw, registry)
    raise NotSupported(f"bitget fetch_balance does not support the {account_family!r} account type")
