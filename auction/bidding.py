"""
auction/bidding.py -- Bid acceptance rules and the Open -> Closed transition.

An item is Open until its ending time passes or it is explicitly closed;
Closed is terminal. Whichever path first notices that an open item has
expired (a bid attempt, a single read, or a listing) persists is_closed
before returning, so clients never see an expired item reported as open.

place_bid() evaluates one attempt against the latest read state and writes
with ItemStore.update_bid(), which only applies if the stored bid is still the
one that was validated. There is no retry loop: a lost race is reported to the
caller.

Every function accepts an optional `now` so tests can pin the clock.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from auction.models import Item
from auction.store import ItemStore
from core.errors import BidConflict, BiddingClosed, BidTooLow, ItemNotFound

logger = logging.getLogger("auction.bidding")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def has_ended(item: Item, now: datetime) -> bool:
    return item.is_closed or now >= item.ending_time


def refresh_closed(store: ItemStore, item: Item, now: Optional[datetime] = None) -> Item:
    """Close an open item whose ending time has passed, persisting the flag first."""
    now = now or _utcnow()
    if item.is_closed or now < item.ending_time:
        return item
    store.mark_closed(item.id)
    logger.info("Item %s closed (ending time %s reached)", item.id, item.ending_time.isoformat())
    return replace(item, is_closed=True)


def get_item(store: ItemStore, item_id: int, now: Optional[datetime] = None) -> Item:
    """Read one item, applying the close-on-expiry rule. Raises ItemNotFound."""
    item = store.get_item(item_id)
    if item is None:
        raise ItemNotFound()
    return refresh_closed(store, item, now)


def list_items(store: ItemStore, now: Optional[datetime] = None) -> list[Item]:
    """Read all items after closing any that have expired."""
    closed = store.close_expired(now or _utcnow())
    if closed:
        logger.info("Closed %d expired item(s)", closed)
    return store.list_items()


def place_bid(
    store: ItemStore,
    item_id: int,
    amount: float,
    bidder: str,
    now: Optional[datetime] = None,
) -> Item:
    """Attempt a bid and return the updated item.

    Raises:
        ItemNotFound  -- no item with that id.
        BiddingClosed -- the item is closed or its ending time has passed.
        BidTooLow     -- amount is not strictly greater than the current bid.
        BidConflict   -- another write changed the item between read and write
                         and this bid is still higher than the new state.
    """
    now = now or _utcnow()

    item = store.get_item(item_id)
    if item is None:
        raise ItemNotFound()

    if has_ended(item, now):
        refresh_closed(store, item, now)
        raise BiddingClosed()

    if amount <= item.current_bid:
        logger.debug("Bid %.2f on item %s rejected: current bid %.2f", amount, item_id, item.current_bid)
        raise BidTooLow()

    if store.update_bid(item_id, expected_bid=item.current_bid, new_bid=amount, bidder=bidder, now=now):
        logger.info("Item %s: new highest bid %.2f", item_id, amount)
        return replace(item, current_bid=amount, highest_bidder=bidder)

    # The conditional write matched nothing. Classify against what is stored now.
    current = store.get_item(item_id)
    if current is None:
        raise ItemNotFound()
    if has_ended(current, now):
        refresh_closed(store, current, now)
        raise BiddingClosed()
    if amount <= current.current_bid:
        raise BidTooLow()
    logger.warning("Item %s: bid %.2f lost a concurrent write", item_id, amount)
    raise BidConflict()
