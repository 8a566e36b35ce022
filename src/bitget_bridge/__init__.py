"""bitget_bridge: normalized spot and swap access to the Bitget REST APIs."""

from .errors import ErrorKind, ExchangeError
from .exchanges import BitgetClient, MarketRegistry
from .settings import Settings

__all__ = [
    "BitgetClient",
    "ErrorKind",
    "ExchangeError",
    "MarketRegistry",
    "Settings",
]
