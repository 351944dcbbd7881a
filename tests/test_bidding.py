"""Unit tests for auction/bidding.py -- the bid state machine.

All tests pin the clock with an explicit `now` so the Open/Closed boundary
is exact.

Covers:
- higher bid on an open item succeeds and updates bid + bidder
- equal and lower bids are rejected with the item unchanged
- at or after ending time every attempt fails with BiddingClosed and
  is_closed is persisted (repeat attempts keep failing)
- a closed item stays closed even before its ending time
- a lost conditional write is classified (too low vs conflict)
- read paths close expired items before returning them
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from auction import bidding
from conftest import make_item
from core.errors import BidConflict, BiddingClosed, BidTooLow, ItemNotFound

NOW = datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)
ENDS = NOW + timedelta(hours=1)


@pytest.fixture
def store(item_store):
    item_store.create_item(make_item(1, current_bid=100, ending_time=ENDS))
    return item_store


class TestPlaceBid:
    def test_higher_bid_succeeds(self, store):
        item = bidding.place_bid(store, 1, 150, "bob", now=NOW)
        assert item.current_bid == 150
        assert item.highest_bidder == "bob"
        stored = store.get_item(1)
        assert (stored.current_bid, stored.highest_bidder) == (150, "bob")

    def test_example_sequence(self, store):
        """150 over 100 wins; 120 afterwards is too low and leaves 150 in place."""
        bidding.place_bid(store, 1, 150, "bob", now=NOW)
        with pytest.raises(BidTooLow):
            bidding.place_bid(store, 1, 120, "carol", now=NOW)
        stored = store.get_item(1)
        assert (stored.current_bid, stored.highest_bidder) == (150, "bob")

    def test_equal_bid_rejected(self, store):
        with pytest.raises(BidTooLow):
            bidding.place_bid(store, 1, 100, "bob", now=NOW)
        assert store.get_item(1).highest_bidder == ""

    def test_unknown_item(self, store):
        with pytest.raises(ItemNotFound):
            bidding.place_bid(store, 42, 150, "bob", now=NOW)

    def test_bid_at_ending_time_closes_item(self, store):
        with pytest.raises(BiddingClosed):
            bidding.place_bid(store, 1, 150, "bob", now=ENDS)
        stored = store.get_item(1)
        assert stored.is_closed is True
        assert stored.current_bid == 100

    def test_closed_is_terminal(self, store):
        after = ENDS + timedelta(minutes=5)
        for _ in range(3):
            with pytest.raises(BiddingClosed):
                bidding.place_bid(store, 1, 1000, "bob", now=after)
        # Even a clock that went backwards cannot reopen it.
        with pytest.raises(BiddingClosed):
            bidding.place_bid(store, 1, 1000, "bob", now=NOW)
        assert store.get_item(1).current_bid == 100

    def test_explicitly_closed_item_rejects_bids(self, item_store):
        item_store.create_item(make_item(2, current_bid=10, ending_time=ENDS, is_closed=True))
        with pytest.raises(BiddingClosed):
            bidding.place_bid(item_store, 2, 50, "bob", now=NOW)


class TestLostConditionalWrite:
    """The row changed between place_bid's read and its conditional write."""

    def _store(self, first, second):
        store = MagicMock()
        store.get_item.side_effect = [first, second]
        store.update_bid.return_value = False
        return store

    def test_outbid_in_between_is_too_low(self):
        store = self._store(
            make_item(1, current_bid=100, ending_time=ENDS),
            make_item(1, current_bid=300, ending_time=ENDS),
        )
        with pytest.raises(BidTooLow):
            bidding.place_bid(store, 1, 200, "bob", now=NOW)

    def test_still_highest_is_conflict(self):
        store = self._store(
            make_item(1, current_bid=100, ending_time=ENDS),
            make_item(1, current_bid=120, ending_time=ENDS),
        )
        with pytest.raises(BidConflict):
            bidding.place_bid(store, 1, 200, "bob", now=NOW)

    def test_closed_in_between(self):
        store = self._store(
            make_item(1, current_bid=100, ending_time=ENDS),
            make_item(1, current_bid=100, ending_time=ENDS, is_closed=True),
        )
        with pytest.raises(BiddingClosed):
            bidding.place_bid(store, 1, 200, "bob", now=NOW)

    def test_deleted_in_between(self):
        store = self._store(make_item(1, current_bid=100, ending_time=ENDS), None)
        with pytest.raises(ItemNotFound):
            bidding.place_bid(store, 1, 200, "bob", now=NOW)


class TestReadPaths:
    def test_get_item_closes_expired(self, store):
        item = bidding.get_item(store, 1, now=ENDS + timedelta(seconds=1))
        assert item.is_closed is True
        assert store.get_item(1).is_closed is True

    def test_get_item_leaves_open_item_alone(self, store):
        assert bidding.get_item(store, 1, now=NOW).is_closed is False
        assert store.get_item(1).is_closed is False

    def test_get_item_missing(self, store):
        with pytest.raises(ItemNotFound):
            bidding.get_item(store, 99, now=NOW)

    def test_list_items_closes_expired(self, store):
        store.create_item(make_item(2, ending_time=ENDS + timedelta(days=1)))
        items = bidding.list_items(store, now=ENDS)
        assert [(i.id, i.is_closed) for i in items] == [(1, True), (2, False)]
