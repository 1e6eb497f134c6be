# cryptotrack/store.py
# In-memory record store for users, portfolio holdings, watchlist entries and
# settings. One instance is built at startup and handed to the routers.
#
# Invariants:
# - ids are assigned from per-entity counters starting at 1 and never reused
# - at most one watchlist entry per (user_id, coin_id)
# - exactly one settings record per user
# - values crossing the store boundary are deep copies

from __future__ import annotations

import itertools
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any, NamedTuple

from cryptotrack.schemas import (
    PortfolioCreate,
    PortfolioItem,
    User,
    UserSettings,
    WatchlistItem,
)
from cryptotrack.utils import utc_now

DEFAULT_SETTINGS: dict[str, Any] = {"theme": "dark", "currency": "usd", "preferences": {}}

# fields a caller may never overwrite on an existing record
_PROTECTED_FIELDS = frozenset({"id", "user_id", "created_at"})


class DuplicateUsernameError(ValueError):
    def __init__(self, username: str):
        super().__init__(f"username already exists: {username}")
        self.username = username


class SettingsLookup(NamedTuple):
    settings: UserSettings
    created: bool


class RecordStore:
    def __init__(
        self,
        guest_username: str = "guest",
        guest_password: str = "password",
        clock: Callable[[], datetime] = utc_now,
    ):
        self._clock = clock
        self._lock = threading.RLock()

        self._users: dict[int, User] = {}
        self._portfolio: dict[int, PortfolioItem] = {}
        self._watchlist: dict[int, WatchlistItem] = {}
        self._settings: dict[int, UserSettings] = {}

        self._user_ids = itertools.count(1)
        self._portfolio_ids = itertools.count(1)
        self._watchlist_ids = itertools.count(1)
        self._settings_ids = itertools.count(1)

        self.guest = self.create_user(guest_username, guest_password)

    # ---------- users ----------

    def create_user(self, username: str, password: str) -> User:
        with self._lock:
            if self._find_user(username) is not None:
                raise DuplicateUsernameError(username)
            user = User(id=next(self._user_ids), username=username, password=password)
            self._users[user.id] = user
            self._get_or_create_settings(user.id)
            return user.model_copy(deep=True)

    def get_user(self, user_id: int) -> User | None:
        with self._lock:
            return _copy(self._users.get(user_id))

    def get_user_by_username(self, username: str) -> User | None:
        with self._lock:
            return _copy(self._find_user(username))

    def _find_user(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    # ---------- portfolio ----------

    def list_portfolio(self, user_id: int) -> list[PortfolioItem]:
        with self._lock:
            return [p.model_copy(deep=True) for p in self._portfolio.values() if p.user_id == user_id]

    def get_portfolio_item(self, item_id: int) -> PortfolioItem | None:
        with self._lock:
            return _copy(self._portfolio.get(item_id))

    def add_portfolio_item(self, entry: PortfolioCreate, user_id: int) -> PortfolioItem:
        with self._lock:
            item = PortfolioItem(
                id=next(self._portfolio_ids),
                user_id=user_id,
                created_at=self._clock(),
                **entry.model_dump(),
            )
            self._portfolio[item.id] = item
            return item.model_copy(deep=True)

    def update_portfolio_item(self, item_id: int, fields: dict[str, Any]) -> PortfolioItem | None:
        """Merge ``fields`` into an existing holding; None if the id is unknown."""
        with self._lock:
            current = self._portfolio.get(item_id)
            if current is None:
                return None
            changes = {k: v for k, v in fields.items() if k not in _PROTECTED_FIELDS and k in PortfolioItem.model_fields}
            updated = PortfolioItem.model_validate({**current.model_dump(), **changes})
            self._portfolio[item_id] = updated
            return updated.model_copy(deep=True)

    def delete_portfolio_item(self, item_id: int) -> bool:
        with self._lock:
            return self._portfolio.pop(item_id, None) is not None

    # ---------- watchlist ----------

    def list_watchlist(self, user_id: int) -> list[WatchlistItem]:
        with self._lock:
            return [w.model_copy(deep=True) for w in self._watchlist.values() if w.user_id == user_id]

    def get_watchlist_item(self, item_id: int) -> WatchlistItem | None:
        with self._lock:
            return _copy(self._watchlist.get(item_id))

    def is_in_watchlist(self, user_id: int, coin_id: str) -> bool:
        with self._lock:
            return self._find_watch(user_id, coin_id) is not None

    def add_to_watchlist(self, user_id: int, coin_id: str) -> WatchlistItem:
        """Idempotent: an existing (user_id, coin_id) entry is returned unchanged."""
        with self._lock:
            existing = self._find_watch(user_id, coin_id)
            if existing is not None:
                return existing.model_copy(deep=True)
            item = WatchlistItem(
                id=next(self._watchlist_ids), user_id=user_id, coin_id=coin_id, created_at=self._clock()
            )
            self._watchlist[item.id] = item
            return item.model_copy(deep=True)

    def remove_from_watchlist(self, item_id: int) -> bool:
        with self._lock:
            return self._watchlist.pop(item_id, None) is not None

    def _find_watch(self, user_id: int, coin_id: str) -> WatchlistItem | None:
        return next(
            (w for w in self._watchlist.values() if w.user_id == user_id and w.coin_id == coin_id),
            None,
        )

    # ---------- settings ----------

    def get_or_create_settings(self, user_id: int) -> SettingsLookup:
        with self._lock:
            settings, created = self._get_or_create_settings(user_id)
            return SettingsLookup(settings.model_copy(deep=True), created)

    def update_settings(self, user_id: int, fields: dict[str, Any]) -> UserSettings:
        """Upsert: defaults are created first, then ``fields`` are merged over them."""
        with self._lock:
            current, _ = self._get_or_create_settings(user_id)
            changes = {k: v for k, v in fields.items() if k not in _PROTECTED_FIELDS and k in UserSettings.model_fields}
            updated = UserSettings.model_validate({**current.model_dump(), **changes})
            self._settings[user_id] = updated
            return updated.model_copy(deep=True)

    def _get_or_create_settings(self, user_id: int) -> SettingsLookup:
        existing = self._settings.get(user_id)
        if existing is not None:
            return SettingsLookup(existing, False)
        settings = UserSettings(id=next(self._settings_ids), user_id=user_id, **_default_settings())
        self._settings[user_id] = settings
        return SettingsLookup(settings, True)


def _default_settings() -> dict[str, Any]:
    return {**DEFAULT_SETTINGS, "preferences": dict(DEFAULT_SETTINGS["preferences"])}


def _copy(record):
    return record.model_copy(deep=True) if record is not None else None
