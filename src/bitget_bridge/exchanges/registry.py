"""In-memory market registry for both product families."""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

from ..errors import BadSymbol
from .models import Currency, Limits, Market, MinMax, Precision
from .normalization import RawPayload, safe_currency_code, safe_float, safe_string, safe_value
from .precision import amount_precision, tick_size_to_precision
from .tables import SPOT, SWAP, TRADING_FEES

logger = logging.getLogger(__name__)


def parse_market(raw: dict[str, Any]) -> Market:
    """Build a Market from one spot symbol or swap contract record."""
    market_id = safe_string(raw, "symbol", "instrument_id")
    if market_id is None:
        raise ValueError(f"Market record has no id: {raw!r}")
    contract_val = safe_float(raw, "contract_val")
    market_type = SWAP if contract_val is not None else SPOT
    base_id = safe_string(raw, "base_currency", "coin")
    quote_id = safe_string(raw, "quote_currency")
    base = safe_currency_code(base_id)
    quote = safe_currency_code(quote_id)

    if market_type == SPOT and base is not None and quote is not None:
        symbol = f"{base}/{quote}"
    else:
        # swap ids share no convention with spot ids, so they stay native
        symbol = market_id.upper()

    precision = Precision(
        amount=amount_precision(raw),
        price=tick_size_to_precision(safe_value(raw, "tick_size")),
    )
    status = safe_string(raw, "status")
    active = None if status is None else status == "1"
    fees = TRADING_FEES[market_type]

    return Market(
        id=market_id,
        symbol=symbol,
        base=base,
        quote=quote,
        base_id=base_id,
        quote_id=quote_id,
        type=market_type,
        spot=market_type == SPOT,
        swap=market_type == SWAP,
        active=active,
        precision=precision,
        limits=Limits(
            amount=MinMax(min=safe_float(raw, "min_size", "base_min_size")),
            price=MinMax(min=precision.price),
            cost=MinMax(min=precision.price),
        ),
        maker=fees["maker"],
        taker=fees["taker"],
        contract_size=contract_val,
        info=raw,
    )


def _listing_records(raw: Any) -> list[dict[str, Any]]:
    if raw is None:
        return []
    payload = RawPayload.from_response(raw)
    return [item for item in payload.items("contractApis") if isinstance(item, dict)]


def normalize_market_listing(raw: Any) -> list[Market]:
    """Parse a full listing response (array root or ``{data: [...]}``)."""
    return [parse_market(record) for record in _listing_records(raw)]


def parse_currencies(raw: Any) -> dict[str, Currency]:
    """Build the minimal currency map from the currency id listing."""
    result: dict[str, Currency] = {}
    for currency_id in RawPayload.from_response(raw).items():
        code = safe_currency_code(str(currency_id))
        result[code] = Currency(id=str(currency_id), code=code, info=currency_id)
    return result


class MarketRegistry:
    """Immutable set of markets keyed by native id and by symbol."""

    __slots__ = ("_by_id", "_by_symbol", "_currencies")

    def __init__(
        self,
        markets: Iterable[Market] = (),
        currencies: Mapping[str, Currency] | None = None,
    ):
        by_id: dict[str, Market] = {}
        by_symbol: dict[str, Market] = {}
        for market in markets:
            by_id[market.id] = market
            by_symbol[market.symbol] = market
        self._by_id = MappingProxyType(by_id)
        self._by_symbol = MappingProxyType(by_symbol)
        self._currencies = MappingProxyType(dict(currencies or {}))

    @classmethod
    def load_all(
        cls,
        raw_spot_listing: Any = None,
        raw_swap_listing: Any = None,
        raw_currencies: Any = None,
    ) -> "MarketRegistry":
        """Build a registry from the spot and swap listing responses."""
        markets = normalize_market_listing(raw_spot_listing) + normalize_market_listing(raw_swap_listing)
        currencies = parse_currencies(raw_currencies) if raw_currencies is not None else {}
        return cls(markets, currencies)

    def by_native_id(self, market_id: str) -> Market | None:
        return self._by_id.get(market_id)

    def by_symbol(self, symbol: str) -> Market | None:
        return self._by_symbol.get(symbol)

    def market(self, symbol: str) -> Market:
        """Look up by symbol, then by native id; raise BadSymbol if neither matches."""
        found = self._by_symbol.get(symbol) or self._by_id.get(symbol)
        if found is None:
            raise BadSymbol(f"bitget does not have market symbol {symbol}")
        return found

    @property
    def markets(self) -> Mapping[str, Market]:
        return self._by_symbol

    @property
    def markets_by_id(self) -> Mapping[str, Market]:
        return self._by_id

    @property
    def currencies(self) -> Mapping[str, Currency]:
        return self._currencies

    @property
    def symbols(self) -> list[str]:
        return sorted(self._by_symbol)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._by_symbol

    def __iter__(self) -> Iterator[Market]:
        return iter(self._by_symbol.values())

    def __len__(self) -> int:
        return len(self._by_symbol)


class RegistryHolder:
    """Publishes fully built registries to concurrent readers.

    A refresh builds a new registry off to the side and swaps the reference
    in one step, so readers see either the old or the new registry, never a
    partially populated one.
    """

    def __init__(self, registry: MarketRegistry | None = None):
        self._lock = threading.Lock()
        self._registry = registry

    @property
    def current(self) -> MarketRegistry | None:
        return self._registry

    @property
    def loaded(self) -> bool:
        return self._registry is not None

    def publish(self, registry: MarketRegistry) -> MarketRegistry:
        with self._lock:
            self._registry = registry
        logger.info("Published market registry with %d markets", len(registry))
        return registry

    def refresh(
        self,
        raw_spot_listing: Any = None,
        raw_swap_listing: Any = None,
        raw_currencies: Any = None,
    ) -> MarketRegistry:
        registry = MarketRegistry.load_all(raw_spot_listing, raw_swap_listing, raw_currencies)
        return self.publish(registry)
