import threading

import pytest

from cryptotrack.schemas import PortfolioCreate
from cryptotrack.store import DuplicateUsernameError, RecordStore


def _btc(amount=1.5, price=20000.0) -> PortfolioCreate:
    return PortfolioCreate(coin_id="bitcoin", symbol="btc", name="Bitcoin", amount=amount, purchase_price=price)


def test_guest_user_is_seeded():
    store = RecordStore()
    guest = store.get_user_by_username("guest")
    assert guest is not None
    assert guest.id == 1
    assert store.get_user(1) == guest


def test_create_user_rejects_duplicate_username():
    store = RecordStore()
    store.create_user("alice", "pw")
    with pytest.raises(DuplicateUsernameError):
        store.create_user("alice", "other")
    # case-sensitive
    assert store.create_user("Alice", "pw").username == "Alice"


def test_create_user_creates_default_settings():
    store = RecordStore()
    user = store.create_user("bob", "pw")
    lookup = store.get_or_create_settings(user.id)
    assert lookup.created is False
    assert lookup.settings.theme == "dark"
    assert lookup.settings.currency == "usd"


def test_portfolio_crud_round_trip():
    store = RecordStore()
    item = store.add_portfolio_item(_btc(), user_id=1)
    assert item.id == 1
    assert item.created_at is not None

    read = store.get_portfolio_item(item.id)
    assert read.amount == 1.5
    assert read.purchase_price == 20000.0

    updated = store.update_portfolio_item(item.id, {"amount": 2.0})
    assert updated.amount == 2.0
    assert updated.purchase_price == 20000.0

    assert store.delete_portfolio_item(item.id) is True
    assert store.get_portfolio_item(item.id) is None
    assert store.delete_portfolio_item(item.id) is False


def test_update_cannot_change_identity_fields():
    store = RecordStore()
    item = store.add_portfolio_item(_btc(), user_id=1)
    updated = store.update_portfolio_item(item.id, {"id": 99, "user_id": 7, "amount": 3.0})
    assert updated.id == item.id
    assert updated.user_id == 1
    assert updated.created_at == item.created_at


def test_update_missing_item_returns_none():
    assert RecordStore().update_portfolio_item(42, {"amount": 1.0}) is None


def test_ids_are_never_reused_after_delete():
    store = RecordStore()
    first = store.add_portfolio_item(_btc(), user_id=1)
    store.delete_portfolio_item(first.id)
    second = store.add_portfolio_item(_btc(), user_id=1)
    assert second.id == first.id + 1


def test_returned_records_are_copies():
    store = RecordStore()
    item = store.add_portfolio_item(_btc(), user_id=1)
    item.amount = 999.0
    assert store.get_portfolio_item(item.id).amount == 1.5

    settings = store.get_or_create_settings(1).settings
    settings.preferences["leak"] = True
    assert store.get_or_create_settings(1).settings.preferences == {}


def test_watchlist_add_is_idempotent():
    store = RecordStore()
    a = store.add_to_watchlist(1, "bitcoin")
    b = store.add_to_watchlist(1, "bitcoin")
    assert a.id == b.id
    assert a.created_at == b.created_at
    assert len(store.list_watchlist(1)) == 1
    assert store.is_in_watchlist(1, "bitcoin")


def test_watchlist_same_coin_for_different_users():
    store = RecordStore()
    other = store.create_user("carol", "pw")
    a = store.add_to_watchlist(1, "bitcoin")
    b = store.add_to_watchlist(other.id, "bitcoin")
    assert a.id != b.id


def test_remove_from_watchlist():
    store = RecordStore()
    item = store.add_to_watchlist(1, "solana")
    assert store.remove_from_watchlist(item.id) is True
    assert store.remove_from_watchlist(item.id) is False
    assert not store.is_in_watchlist(1, "solana")


def test_get_or_create_settings_reports_creation():
    store = RecordStore()
    first = store.get_or_create_settings(50)
    again = store.get_or_create_settings(50)
    assert first.created is True
    assert again.created is False
    assert first.settings.id == again.settings.id


def test_update_settings_upserts_over_defaults():
    store = RecordStore()
    settings = store.update_settings(77, {"currency": "eur"})
    assert settings.user_id == 77
    assert settings.currency == "eur"
    assert settings.theme == "dark"
    assert settings.preferences == {}


def _run_threads(target, n=8):
    threads = [threading.Thread(target=target) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()


def test_concurrent_adds_get_unique_contiguous_ids():
    store = RecordStore()
    ids = []
    ids_lock = threading.Lock()

    def worker():
        for _ in range(200):
            item = store.add_portfolio_item(_btc(), user_id=1)
            with ids_lock:
                ids.append(item.id)

    _run_threads(worker)

    assert sorted(ids) == list(range(1, 8 * 200 + 1))
    assert len(store.list_portfolio(1)) == 8 * 200


def test_concurrent_watchlist_adds_keep_one_record():
    store = RecordStore()
    ids = set()
    ids_lock = threading.Lock()

    def worker():
        for _ in range(200):
            item = store.add_to_watchlist(1, "bitcoin")
            with ids_lock:
                ids.add(item.id)

    _run_threads(worker)

    assert ids == {1}
    assert len(store.list_watchlist(1)) == 1
