"""
tests/conftest.py -- Shared test fixtures for the auction backend tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for users + items
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient plus bearer tokens for two registered users
  - user_store / item_store: plain in-memory stores for unit tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
for the TestClient fixtures because route handlers run in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to
each worker thread.

The DEBUG env var must be set before any auth/core import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import NamedTuple

# CRITICAL: Set DEBUG before any auth/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auction.models import Item
from auction.store import ItemStore
from auth.models import User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password

SELLER_EMAIL = "seller@example.com"
SELLER_PASSWORD = "sellerpass123"
OTHER_EMAIL = "other@example.com"


class ApiClient(NamedTuple):
    client: TestClient
    seller_token: str
    other_token: str

    def auth(self, token: str | None = None) -> dict[str, str]:
        return {"Authorization": f"Bearer {token or self.seller_token}"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def future(hours: int = 24) -> datetime:
    return datetime.now(timezone.utc) + timedelta(hours=hours)


def past(hours: int = 1) -> datetime:
    return datetime.now(timezone.utc) - timedelta(hours=hours)


def make_item(item_id: int = 1, current_bid: float = 100, ending_time: datetime | None = None, **kw) -> Item:
    return Item(
        id=item_id,
        item_name=kw.pop("item_name", f"Item {item_id}"),
        description=kw.pop("description", "A thing for sale"),
        current_bid=current_bid,
        ending_time=ending_time or future(),
        creator=kw.pop("creator", SELLER_EMAIL),
        **kw,
    )


def _make_test_stores(db_suffix: str) -> tuple[UserStore, ItemStore]:
    """Create named shared-memory SQLite stores for test isolation.

    Both stores use the same database, as they do in production.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    url = f"sqlite:///file:test_auction_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(db_url=url), ItemStore(db_url=url)


def _patch_lifespan(user_store: UserStore, item_store: ItemStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.item_store = item_store
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[ApiClient, None, None]:
    """Yield an ApiClient for integration tests.

    The seller account (SELLER_EMAIL / SELLER_PASSWORD) exists before the
    client starts. other_token belongs to a second account that owns nothing.
    """
    user_store, item_store = _make_test_stores(request.module.__name__.replace(".", "_"))

    seller_id = user_store.create_user(
        User(full_name="Sam Seller", email=SELLER_EMAIL, hashed_password=hash_password(SELLER_PASSWORD))
    )
    other_id = user_store.create_user(
        User(full_name="Olive Other", email=OTHER_EMAIL, hashed_password=hash_password("otherpass123"))
    )
    seller_token = create_access_token(seller_id, SELLER_EMAIL, "Sam Seller")
    other_token = create_access_token(other_id, OTHER_EMAIL, "Olive Other")

    app.router.lifespan_context = _patch_lifespan(user_store, item_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiClient(client, seller_token, other_token)

    item_store.close()
    user_store.close()


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def item_store() -> Generator[ItemStore, None, None]:
    store = ItemStore("sqlite:///:memory:")
    yield store
    store.close()
