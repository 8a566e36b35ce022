"""Field access, timestamp and symbol normalization for raw exchange payloads."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple

from .tables import COMMON_CURRENCIES, MARKET_ID_DELIMITERS, SPOT, SWAP, SWAP_MARKERS

if TYPE_CHECKING:
    from .models import Market
    from .registry import MarketRegistry

logger = logging.getLogger(__name__)


def safe_value(obj: Any, *keys: str | int, default: Any = None) -> Any:
    """Return the first present, non-None value among ``keys``.

    Works on both dicts (string keys) and lists (integer positions), so the
    same accessor reads object-shaped and array-shaped payloads.
    """
    if obj is None:
        return default
    for key in keys:
        if isinstance(obj, dict):
            value = obj.get(key)
        elif isinstance(obj, (list, tuple)) and isinstance(key, int):
            value = obj[key] if -len(obj) <= key < len(obj) else None
        else:
            value = None
        if value is not None:
            return value
    return default


def safe_string(obj: Any, *keys: str | int, default: str | None = None) -> str | None:
    value = safe_value(obj, *keys)
    if value is None:
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def safe_float(obj: Any, *keys: str | int, default: float | None = None) -> float | None:
    value = safe_value(obj, *keys)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug("Non-numeric value %r for %s", value, keys)
        return default


def safe_integer(obj: Any, *keys: str | int, default: int | None = None) -> int | None:
    value = safe_value(obj, *keys)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return default


def parse8601(value: str | None) -> int | None:
    """Parse an ISO-8601 string into epoch milliseconds."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(round(parsed.timestamp() * 1000))


def parse_timestamp(value: Any) -> int | None:
    """Normalize either timestamp encoding used by the exchange to epoch ms.

    Spot payloads carry epoch-millisecond strings; swap payloads mostly carry
    ISO-8601 strings.
    """
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value)
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    return parse8601(text)


def iso8601(timestamp: int | None) -> str | None:
    if timestamp is None:
        return None
    moment = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{timestamp % 1000:03d}Z"


def safe_currency_code(currency_id: str | None) -> str | None:
    if currency_id is None:
        return None
    code = currency_id.upper()
    return COMMON_CURRENCIES.get(code, code)


def split_market_id(market_id: str, delimiter: str) -> tuple[str, str] | None:
    """Split a native id like ``btc_usdt`` into normalized (base, quote)."""
    parts = market_id.split(delimiter)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return safe_currency_code(parts[0]), safe_currency_code(parts[1])


class ResolvedSymbol(NamedTuple):
    symbol: str | None
    base: str | None
    quote: str | None
    market: "Market | None"


def resolve_symbol(
    market_id: str | None,
    registry: "MarketRegistry | None",
    family: str,
    market: "Market | None" = None,
) -> ResolvedSymbol:
    """Resolve a native instrument id to a normalized symbol.

    Order: registry lookup by native id, then a split on the family's id
    delimiter, then the uppercased native id. A caller-supplied market is
    used when the payload carries no id at all.
    """
    if market_id is not None:
        found = registry.by_native_id(market_id) if registry is not None else None
        if found is not None:
            return ResolvedSymbol(found.symbol, found.base, found.quote, found)
        pair = split_market_id(market_id, MARKET_ID_DELIMITERS[family])
        if pair is not None:
            base, quote = pair
            return ResolvedSymbol(f"{base}/{quote}", base, quote, None)
        return ResolvedSymbol(market_id.upper(), None, None, None)
    if market is not None:
        return ResolvedSymbol(market.symbol, market.base, market.quote, market)
    return ResolvedSymbol(None, None, None, None)


def detect_family(raw: Any, kind: str, market: "Market | None" = None) -> str:
    """Guess which API family produced ``raw`` from its shape."""
    if market is not None:
        return market.type
    if isinstance(raw, dict) and any(key in raw for key in SWAP_MARKERS[kind]):
        return SWAP
    return SPOT


class PayloadKind(Enum):
    ARRAY = "array"
    ENVELOPED = "enveloped"
    OBJECT = "object"


@dataclass(frozen=True, slots=True)
class RawPayload:
    """A decoded response body with its envelope peeled off.

    Some endpoints answer with a bare array, others wrap the result in
    ``{"status": ..., "ts": ..., "data": ...}``.
    """

    kind: PayloadKind
    data: Any
    timestamp: int | None = None
    status: str | None = None

    @classmethod
    def from_response(cls, response: Any, key: str = "data") -> "RawPayload":
        if isinstance(response, list):
            return cls(PayloadKind.ARRAY, response)
        if isinstance(response, dict) and key in response:
            return cls(
                PayloadKind.ENVELOPED,
                response[key],
                timestamp=safe_integer(response, "ts"),
                status=safe_string(response, "status"),
            )
        return cls(PayloadKind.OBJECT, response)

    def items(self, *path: str) -> list[Any]:
        """Return the list found at ``path`` under the payload data."""
        current = self.data
        for key in path:
            if not isinstance(current, dict):
                break
            current = current.get(key, current)
        if isinstance(current, list):
            return current
        return []
