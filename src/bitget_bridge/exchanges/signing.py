"""Request signing for the exchange's three API families.

- data / capi: public market data, nothing to sign
- swap: timestamp + method + path (+ body or sorted query), HMAC-SHA256, base64
- api: sorted urlencoded query, HMAC-MD5 keyed by hex SHA1 of the secret
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import urlencode

from ..errors import ArgumentsRequired, AuthenticationError

_PATH_PARAM = re.compile(r"\{([^}]+)\}")


class ApiSection(str, Enum):
    DATA = "data"
    CAPI = "capi"
    SWAP = "swap"
    API = "api"

    @property
    def host_prefix(self) -> str:
        return "capi" if self in (ApiSection.CAPI, ApiSection.SWAP) else "api"

    @property
    def is_public(self) -> bool:
        return self in (ApiSection.DATA, ApiSection.CAPI)


@dataclass(frozen=True, slots=True)
class Credentials:
    api_key: str | None = None
    api_secret: str | None = None
    passphrase: str | None = None

    def require(self, *names: str) -> None:
        missing = [name for name in names if not getattr(self, name)]
        if missing:
            raise AuthenticationError(f"bitget requires {', '.join(missing)} for private endpoints")


@dataclass(frozen=True, slots=True)
class SignedRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None


def implode_params(path: str, params: dict[str, Any]) -> str:
    missing = [name for name in extract_params(path) if name not in params]
    if missing:
        raise ArgumentsRequired(f"{path} requires {', '.join(missing)}")
    return _PATH_PARAM.sub(lambda match: str(params[match.group(1)]), path)


def extract_params(path: str) -> list[str]:
    return _PATH_PARAM.findall(path)


def keysort(params: dict[str, Any]) -> dict[str, Any]:
    return {key: params[key] for key in sorted(params)}


def request_path(api: ApiSection, path: str, params: dict[str, Any], version: str = "v3") -> str:
    """Absolute request path for ``path`` under ``api``, placeholders filled."""
    request = "/" + implode_params(path, params)
    if api in (ApiSection.CAPI, ApiSection.SWAP):
        return f"/api/swap/{version}{request}"
    return f"/{api.value}/v1{request}"


def hmac_sha256_base64(secret: str, message: str) -> str:
    digest = hmac.new(secret.encode(), message.encode(), hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def hmac_md5_sha1_key(secret: str, message: str) -> str:
    key = hashlib.sha1(secret.encode()).hexdigest()
    return hmac.new(key.encode(), message.encode(), hashlib.md5).hexdigest()


def sign(
    api: ApiSection | str,
    method: str,
    path: str,
    params: dict[str, Any] | None,
    credentials: Credentials,
    timestamp: int,
    *,
    hostname: str = "bitget.com",
) -> SignedRequest:
    """Build the URL, headers and body for one request.

    Pure function of its arguments: two calls that differ only in
    ``timestamp`` differ only in the timestamp-bearing fields.

    Args:
        api: API family the endpoint belongs to
        method: HTTP method
        path: Endpoint path, may contain ``{name}`` placeholders
        params: Request parameters (placeholders are taken from here)
        credentials: API key, secret and passphrase
        timestamp: Epoch milliseconds
        hostname: Exchange hostname

    Returns:
        SignedRequest ready to be sent
    """
    api = ApiSection(api)
    method = method.upper()
    params = dict(params or {})
    request = request_path(api, path, params)
    query = {key: value for key, value in params.items() if key not in extract_params(path)}
    url = f"https://{api.host_prefix}.{hostname}{request}"
    stamp = str(timestamp)

    if api.is_public:
        if query:
            url += "?" + urlencode(query)
        return SignedRequest(method, url)

    if api is ApiSection.SWAP:
        credentials.require("api_key", "api_secret", "passphrase")
        auth = stamp + method + request
        body = None
        if method == "POST":
            body = json.dumps(query, separators=(",", ":"))
            auth += body
        elif query:
            encoded = urlencode(keysort(query))
            url += "?" + encoded
            auth += "?" + encoded
        headers = {
            "ACCESS-KEY": credentials.api_key,
            "ACCESS-SIGN": hmac_sha256_base64(credentials.api_secret, auth),
            "ACCESS-TIMESTAMP": stamp,
            "ACCESS-PASSPHRASE": credentials.passphrase,
        }
        if method == "POST":
            headers["Content-Type"] = "application/json"
        return SignedRequest(method, url, headers, body)

    credentials.require("api_key", "api_secret")
    auth = urlencode(keysort(query))
    signature = hmac_md5_sha1_key(credentials.api_secret, auth)
    signed = auth + ("&" if auth else "")
    signed += f"sign={signature}&req_time={stamp}&accesskey={credentials.api_key}"
    url += "?" + signed
    body = None
    headers: dict[str, str] = {}
    if method == "POST":
        body = auth
        headers["Content-Type"] = "application/x-www-form-urlencoded"
    return SignedRequest(method, url, headers, body)
