"""
auction/models.py -- Domain dataclasses for auction items.

These are pure data containers with zero logic. The bid rules and the
Open -> Closed transition live in auction/bidding.py; persistence lives in
auction/store.py.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Item:
    """An item up for auction.

    id is caller-supplied (it is the item's public number, not a surrogate
    key). creator is the email of the authenticated user who posted it.
    ending_time is always timezone-aware UTC once read back from the store.

    is_closed only ever goes from False to True.
    """

    id: int
    item_name: str
    description: str
    current_bid: float
    ending_time: datetime
    creator: str
    highest_bidder: str = ""
    is_closed: bool = False
    created_at: str = ""  # ISO 8601, set by store on insert
