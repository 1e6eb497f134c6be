# cryptotrack/main.py
from __future__ import annotations

from fastapi import FastAPI

from cryptotrack.cache import TTLCache
from cryptotrack.config import Settings
from cryptotrack.errors import install_error_handlers
from cryptotrack.gateway import MarketDataGateway
from cryptotrack.logging_conf import setup_logging

# --- Observability ---
from cryptotrack.observability import metrics_endpoint, timing_middleware

# --- Routers ---
from cryptotrack.routers import market, portfolio, users, watchlist
from cryptotrack.routers import settings as settings_router
from cryptotrack.schemas import HealthResponse, VersionResponse
from cryptotrack.store import RecordStore
from cryptotrack.utils import utc_now_iso
from cryptotrack.version import SERVICE_VERSION, service_version_payload


def create_app(
    settings: Settings | None = None,
    *,
    cache: TTLCache | None = None,
    gateway: MarketDataGateway | None = None,
    store: RecordStore | None = None,
) -> FastAPI:
    """Build the app; anything not passed in is constructed from ``settings``."""
    settings = settings or Settings.from_env()

    app = FastAPI(title="CryptoTrack", version=SERVICE_VERSION)

    # --- Shared state (one instance per process) ---
    app.state.settings = settings
    app.state.cache = cache if cache is not None else TTLCache(ttl_seconds=settings.cache_ttl_sec)
    app.state.gateway = gateway if gateway is not None else MarketDataGateway(
        base_url=settings.coingecko_base_url,
        timeout=settings.upstream_timeout_sec,
        api_key=settings.coingecko_api_key,
    )
    app.state.store = store if store is not None else RecordStore(
        guest_username=settings.guest_username, guest_password=settings.guest_password
    )

    # --- Include routers ---
    app.include_router(market.router)
    app.include_router(portfolio.router)
    app.include_router(watchlist.router)
    app.include_router(settings_router.router)
    app.include_router(users.router)

    # --- Errors + observability ---
    install_error_handlers(app)
    app.middleware("http")(timing_middleware)

    # --- Utility endpoints ---
    @app.get("/api/health", response_model=HealthResponse)
    def health():
        return {"status": "ok", "timestamp": utc_now_iso()}

    @app.get("/api/version", response_model=VersionResponse)
    def version():
        return service_version_payload()

    @app.get("/metrics", include_in_schema=False)
    def metrics():
        return metrics_endpoint()

    return app


_settings = Settings.from_env()
setup_logging(_settings.log_level)
app = create_app(_settings)
