# cryptotrack/config.py
# Environment driven settings. Every knob has a default so the service runs
# with an empty environment.

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"


@dataclass(frozen=True)
class Settings:
    coingecko_base_url: str = DEFAULT_COINGECKO_BASE_URL
    coingecko_api_key: str | None = None
    cache_ttl_sec: float = 60.0
    upstream_timeout_sec: float = 10.0
    guest_username: str = "guest"
    guest_password: str = "password"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            coingecko_base_url=os.getenv("CT_COINGECKO_BASE_URL", DEFAULT_COINGECKO_BASE_URL).rstrip("/"),
            coingecko_api_key=os.getenv("CT_COINGECKO_API_KEY") or None,
            cache_ttl_sec=float(os.getenv("CT_CACHE_TTL_SEC", "60")),
            upstream_timeout_sec=float(os.getenv("CT_UPSTREAM_TIMEOUT_SEC", "10")),
            guest_username=os.getenv("CT_GUEST_USERNAME", "guest"),
            guest_password=os.getenv("CT_GUEST_PASSWORD", "password"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
