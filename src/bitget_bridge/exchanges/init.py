"""Exchange client initialization from settings."""

from __future__ import annotations

import logging

from ..settings import Settings
from .base import ProxyConfig
from .bitget import BitgetClient

logger = logging.getLogger(__name__)


def create_client_from_settings(settings: Settings) -> BitgetClient:
    """Create a BitgetClient from loaded settings.

    Without credentials the client can still use the public endpoints;
    private calls then fail with AuthenticationError.
    """
    proxy = None
    if settings.proxy.enabled and settings.proxy.url:
        proxy = ProxyConfig(
            url=settings.proxy.url,
            username=settings.proxy.username,
            password=settings.proxy.password.get_secret_value() if settings.proxy.password else None,
        )

    api_key = api_secret = passphrase = None
    creds = settings.credentials
    if creds is None:
        logger.warning("No bitget credentials configured, only public endpoints are available")
    else:
        api_key = creds.api_key.get_secret_value()
        api_secret = creds.api_secret.get_secret_value()
        passphrase = creds.passphrase.get_secret_value() if creds.passphrase else None

    options = settings.exchange
    client = BitgetClient(
        api_key,
        api_secret,
        passphrase=passphrase,
        hostname=options.hostname,
        proxy=proxy,
        timeout=options.timeout,
        default_type=options.default_type,
        fetch_markets=options.fetch_markets,
        account_id=options.account_id,
        ohlcv_volume=options.ohlcv_volume,
    )
    logger.info("Initialized bitget client for %s (default type %s)", options.hostname, options.default_type)
    return client
