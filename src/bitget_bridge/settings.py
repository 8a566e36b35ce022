from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator

from .exchanges.tables import FAMILIES, OHLCV_VOLUME


class ProxySettings(BaseModel):
    enabled: bool = False
    url: str | None = None
    username: str | None = None
    password: SecretStr | None = None

    model_config = {"extra": "forbid"}


class BitgetCredentials(BaseModel):
    api_key: SecretStr
    api_secret: SecretStr
    passphrase: SecretStr | None = None

    model_config = {"extra": "forbid"}


class ExchangeOptions(BaseModel):
    hostname: str = "bitget.com"
    default_type: str = "spot"
    fetch_markets: list[str] = Field(default_factory=lambda: list(FAMILIES))
    account_id: str | None = None
    timeout: float = Field(default=10.0, gt=0)
    ohlcv_volume: dict[str, str | int] = Field(default_factory=lambda: dict(OHLCV_VOLUME))

    model_config = {"extra": "forbid"}

    @field_validator("default_type")
    @classmethod
    def _known_default_type(cls, value: str) -> str:
        if value not in FAMILIES:
            raise ValueError(f"default_type must be one of {FAMILIES}, got {value!r}")
        return value

    @field_validator("fetch_markets")
    @classmethod
    def _known_market_types(cls, value: list[str]) -> list[str]:
        unknown = [item for item in value if item not in FAMILIES]
        if unknown:
            raise ValueError(f"Unknown market types: {unknown}")
        return value


class Settings(BaseModel):
    env: str = "dev"
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    credentials: BitgetCredentials | None = None
    exchange: ExchangeOptions = Field(default_factory=ExchangeOptions)

    model_config = {"extra": "forbid"}

    def redacted(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        creds = data.get("credentials")
        if isinstance(creds, dict):
            for key in ("api_key", "api_secret", "passphrase"):
                if creds.get(key) is not None:
                    creds[key] = "***"
        proxy = data.get("proxy")
        if isinstance(proxy, dict) and proxy.get("password") is not None:
            proxy["password"] = "***"
        return data
