"""Tick/lot encodings converted into decimal precision steps."""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from .normalization import safe_float, safe_value


def _exponent_step(exponent: Any) -> float | None:
    if exponent is None or exponent == "":
        return None
    try:
        digits = Decimal(str(exponent))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid precision exponent: {exponent!r}") from exc
    if digits != digits.to_integral_value():
        raise ValueError(f"Precision exponent must be a whole number: {exponent!r}")
    return float(Decimal(1).scaleb(-int(digits)))


def tick_size_to_precision(exponent: Any) -> float | None:
    """Turn a tick-size exponent into a price step.

    The exchange encodes tick size as a digit count: ``"2"`` means a step of
    ``10**-2``. Returns ``None`` when the exponent is absent so callers must
    deal with unknown precision themselves.
    """
    return _exponent_step(exponent)


def amount_precision(market: dict[str, Any]) -> float | None:
    """Amount step for a raw market record.

    ``size_increment`` is an exponent like ``tick_size``. Older listings
    publish a literal step under ``lot_size`` or ``trade_increment`` instead.
    """
    increment = safe_value(market, "size_increment")
    if increment is not None and increment != "":
        return _exponent_step(increment)
    return safe_float(market, "lot_size", "trade_increment")


def _quantize(value: float, step: float | None, rounding: str) -> float:
    if step is None:
        raise ValueError("Precision is unknown for this market")
    if step <= 0:
        raise ValueError(f"Precision step must be positive, got {step}")
    quantum = Decimal(str(step))
    units = (Decimal(str(value)) / quantum).to_integral_value(rounding=rounding)
    return float(units * quantum)


def amount_to_precision(amount: float, step: float | None) -> float:
    """Truncate an amount to the market's amount step."""
    return _quantize(amount, step, ROUND_DOWN)


def price_to_precision(price: float, step: float | None) -> float:
    """Round a price to the nearest tick."""
    return _quantize(price, step, ROUND_HALF_UP)
