# cryptotrack/deps.py
# Routers never import the shared objects directly; create_app() puts them on
# app.state and these dependencies hand them out per request.

from fastapi import Request

from cryptotrack.cache import TTLCache
from cryptotrack.config import Settings
from cryptotrack.errors import not_found
from cryptotrack.gateway import MarketDataGateway
from cryptotrack.schemas import User
from cryptotrack.store import RecordStore


def get_cache(request: Request) -> TTLCache:
    return request.app.state.cache


def get_gateway(request: Request) -> MarketDataGateway:
    return request.app.state.gateway


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def current_user(request: Request) -> User:
    """No authentication: every request acts as the seeded guest user."""
    settings: Settings = request.app.state.settings
    user = request.app.state.store.get_user_by_username(settings.guest_username)
    if user is None:
        raise not_found("User")
    return user
