"""Exception taxonomy for exchange responses."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Closed set of error kinds callers can branch on."""

    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    RATE_LIMIT = "rate-limit"
    BAD_REQUEST = "bad-request"
    INSUFFICIENT_FUNDS = "insufficient-funds"
    INVALID_ORDER = "invalid-order"
    ORDER_NOT_FOUND = "order-not-found"
    ACCOUNT_SUSPENDED = "account-suspended"
    MAINTENANCE = "maintenance"
    NOT_FOUND_SYMBOL = "not-found-symbol"
    GENERIC = "generic-exchange-error"


class ExchangeError(Exception):
    """Base class for every error reported by the exchange."""

    kind = ErrorKind.GENERIC
    retryable = False

    def __init__(self, message: str = "", payload: Any = None):
        super().__init__(message)
        self.payload = payload


class AuthenticationError(ExchangeError):
    """Bad or missing credentials or signature."""

    kind = ErrorKind.AUTHENTICATION


class InvalidNonce(AuthenticationError):
    """Request timestamp rejected by the exchange."""


class PermissionDenied(ExchangeError):
    """Authenticated but not allowed to perform the request."""

    kind = ErrorKind.PERMISSION


class AccountSuspended(ExchangeError):
    kind = ErrorKind.ACCOUNT_SUSPENDED


class RateLimited(ExchangeError):
    """Throttle signal; back off and retry."""

    kind = ErrorKind.RATE_LIMIT
    retryable = True


class BadRequest(ExchangeError):
    """Malformed input; not retryable as-is."""

    kind = ErrorKind.BAD_REQUEST


class BadSymbol(BadRequest):
    kind = ErrorKind.NOT_FOUND_SYMBOL


class ArgumentsRequired(BadRequest):
    pass


class InvalidAddress(BadRequest):
    pass


class InsufficientFunds(ExchangeError):
    kind = ErrorKind.INSUFFICIENT_FUNDS


class InvalidOrder(ExchangeError):
    kind = ErrorKind.INVALID_ORDER


class OrderNotFound(InvalidOrder):
    kind = ErrorKind.ORDER_NOT_FOUND


class CancelPending(InvalidOrder):
    pass


class ExchangeNotAvailable(ExchangeError):
    """Exchange is temporarily unreachable; retry after a delay."""

    kind = ErrorKind.MAINTENANCE
    retryable = True


class OnMaintenance(ExchangeNotAvailable):
    pass


class RequestTimeout(ExchangeNotAvailable):
    pass


class NotSupported(ExchangeError):
    """Operation or payload shape this adapter does not handle."""


class UnclassifiedExchangeError(ExchangeError):
    """Error payload present but its code and message are not in the table."""


ERROR_CLASSES: dict[str, type[ExchangeError]] = {
    cls.__name__: cls
    for cls in (
        ExchangeError,
        AuthenticationError,
        InvalidNonce,
        PermissionDenied,
        AccountSuspended,
        RateLimited,
        BadRequest,
        BadSymbol,
        ArgumentsRequired,
        InvalidAddress,
        InsufficientFunds,
        InvalidOrder,
        OrderNotFound,
        CancelPending,
        ExchangeNotAvailable,
        OnMaintenance,
        RequestTimeout,
        NotSupported,
        UnclassifiedExchangeError,
    )
}
