"""Maps exchange error payloads onto the exception taxonomy."""

from __future__ import annotations

import json
import logging
from importlib import resources
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from ..errors import (
    ERROR_CLASSES,
    AuthenticationError,
    BadRequest,
    ExchangeError,
    ExchangeNotAvailable,
    PermissionDenied,
    RateLimited,
    UnclassifiedExchangeError,
)
from .normalization import safe_string
from .tables import SUCCESS_CODES

logger = logging.getLogger(__name__)

ERROR_TABLE_RESOURCE = "error_codes.yml"

HTTP_EXCEPTIONS: Mapping[int, type[ExchangeError]] = MappingProxyType({
    400: BadRequest,
    401: AuthenticationError,
    403: PermissionDenied,
    404: BadRequest,
    418: RateLimited,
    429: RateLimited,
    500: ExchangeNotAvailable,
    502: ExchangeNotAvailable,
    503: ExchangeNotAvailable,
    504: ExchangeNotAvailable,
})


def load_error_table(text: str | None = None) -> Mapping[str, type[ExchangeError]]:
    """Load the ``exact`` error table (code or message -> exception class).

    Reads the packaged ``error_codes.yml`` unless ``text`` is given.
    """
    if text is None:
        text = resources.files(__package__).joinpath(ERROR_TABLE_RESOURCE).read_text(encoding="utf-8")
    loaded = yaml.safe_load(text) or {}
    exact = loaded.get("exact") or {}
    table: dict[str, type[ExchangeError]] = {}
    for key, class_name in exact.items():
        try:
            table[str(key)] = ERROR_CLASSES[class_name]
        except KeyError:
            raise ValueError(f"Unknown exception class {class_name!r} for error {key!r}") from None
    return MappingProxyType(table)


EXACT_ERRORS = load_error_table()


def is_success(code: str | None, message: str | None) -> bool:
    return not message and (code is None or code in SUCCESS_CODES)


def classify_error(
    code: str | int | None,
    message: str | None,
    table: Mapping[str, type[ExchangeError]] = EXACT_ERRORS,
) -> type[ExchangeError] | None:
    """Return the exception class for a raw (code, message) pair.

    Exact message match wins over exact code match. Returns ``None`` on the
    success path (empty message and absent or zero code) and
    ``UnclassifiedExchangeError`` when neither key is in the table.
    """
    code = None if code is None or code == "" else str(code)
    if is_success(code, message):
        return None
    if message and message in table:
        return table[message]
    if code is not None and code not in SUCCESS_CODES and code in table:
        return table[code]
    return UnclassifiedExchangeError


def handle_errors(response: Any, http_status: int | None = None, body: str | None = None) -> None:
    """Raise the classified exception for an error response, if any.

    Args:
        response: Decoded JSON body (object or array root)
        http_status: HTTP status code, used when the body carries no error fields
        body: Raw response text, attached to the exception message

    Raises:
        ExchangeError: Subclass matching the payload's message or code
    """
    if isinstance(response, dict):
        message = safe_string(response, "err_msg")
        code = safe_string(response, "code", "err_code")
        error_class = classify_error(code, message)
        if error_class is not None:
            feedback = body if body is not None else json.dumps(response, ensure_ascii=False)
            logger.debug("Exchange error code=%s message=%s", code, message)
            raise error_class(f"bitget {feedback}", payload=response)
    if http_status is not None and http_status >= 400:
        error_class = HTTP_EXCEPTIONS.get(http_status)
        if error_class is None:
            error_class = ExchangeNotAvailable if http_status >= 500 else ExchangeError
        raise error_class(f"bitget HTTP {http_status} {body or ''}".rstrip(), payload=response)
