"""Exchange adapter: registry, signing, error classification and normalizers."""

from .balances import parse_balance
from .base import BaseExchangeClient, ProxyConfig
from .bitget import BitgetClient
from .classifier import classify_error, handle_errors
from .fills import reconcile_ledger
from .orders import parse_order
from .parsers import parse_ohlcv, parse_order_book, parse_ticker, parse_trade
from .registry import MarketRegistry, RegistryHolder, normalize_market_listing
from .signing import ApiSection, Credentials, SignedRequest, sign

__all__ = [
    "ApiSection",
    "BaseExchangeClient",
    "BitgetClient",
    "Credentials",
    "MarketRegistry",
    "ProxyConfig",
    "RegistryHolder",
    "SignedRequest",
    "classify_error",
    "handle_errors",
    "normalize_market_listing",
    "parse_balance",
    "parse_ohlcv",
    "parse_order",
    "parse_order_book",
    "parse_ticker",
    "parse_trade",
    "reconcile_ledger",
    "sign",
]
