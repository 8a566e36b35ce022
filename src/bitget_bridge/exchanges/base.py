"""Base client class: session handling and signed requests."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import aiohttp

from ..errors import ExchangeError
from .classifier import handle_errors
from .signing import ApiSection, Credentials, sign

logger = logging.getLogger(__name__)


class ProxyConfig:
    """HTTP proxy configuration."""

    def __init__(self, url: str | None = None, username: str | None = None, password: str | None = None):
        self.url = url
        self.username = username
        self.password = password

    @property
    def proxy_url(self) -> str | None:
        if not self.url:
            return None
        if self.username and self.password:
            protocol = self.url.split("://")[0] if "://" in self.url else "http"
            rest = self.url.split("://")[1] if "://" in self.url else self.url
            return f"{protocol}://{self.username}:{self.password}@{rest}"
        return self.url


class BaseExchangeClient(ABC):
    """Shared plumbing for exchange clients."""

    def __init__(
        self,
        name: str,
        api_key: str | None = None,
        api_secret: str | None = None,
        *,
        passphrase: str | None = None,
        hostname: str = "bitget.com",
        proxy: ProxyConfig | None = None,
        timeout: float = 10.0,
        **options: Any,
    ):
        """Initialize exchange client.

        Args:
            name: Exchange name
            api_key: API key
            api_secret: API secret
            passphrase: API passphrase (required by the swap API)
            hostname: Exchange hostname the API hosts are derived from
            proxy: Proxy configuration
            timeout: Total request timeout in seconds
            **options: Additional exchange-specific options
        """
        self.name = name
        self.api_key = api_key
        self.api_secret = api_secret
        self.passphrase = passphrase
        self.hostname = hostname
        self.proxy = proxy or ProxyConfig()
        self.timeout = timeout
        self.options = options
        self.session: aiohttp.ClientSession | None = None

    @property
    def credentials(self) -> Credentials:
        return Credentials(self.api_key, self.api_secret, self.passphrase)

    @staticmethod
    def milliseconds() -> int:
        return int(time.time() * 1000)

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            connector = aiohttp.TCPConnector()
            self.session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self.session

    async def request(
        self,
        api: ApiSection | str,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Sign and send one request, raising the classified error on failure.

        Returns:
            Decoded JSON body
        """
        signed = sign(api, method, path, params, self.credentials, self.milliseconds(), hostname=self.hostname)
        session = await self._ensure_session()
        send = getattr(session, signed.method.lower())
        logger.debug("%s %s", signed.method, signed.url)

        kwargs: dict[str, Any] = {"headers": signed.headers}
        if signed.body is not None:
            kwargs["data"] = signed.body
        if self.proxy.proxy_url:
            kwargs["proxy"] = self.proxy.proxy_url

        async with send(signed.url, **kwargs) as resp:
            status = resp.status
            try:
                data = await resp.json(content_type=None)
            except ValueError as exc:
                if status >= 400:
                    handle_errors(None, status)
                raise ExchangeError(f"{self.name} returned a non-JSON response ({status})") from exc

        handle_errors(data, status)
        return data

    @abstractmethod
    async def load_markets(self, reload: bool = False) -> Any:
        """Load and cache the instrument registry."""
        ...

    async def close(self) -> None:
        """Close connections."""
        if self.session:
            await self.session.close()
            self.session = None
