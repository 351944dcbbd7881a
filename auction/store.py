"""
auction/store.py -- SQLAlchemy-backed persistence layer for auction items.

Uses SQLAlchemy Core (not ORM) so the Item dataclass in auction/models.py
remains the authoritative domain representation. Swapping SQLite for
PostgreSQL is a connection string change, not a rewrite.

Pattern: Repository + Data Mapper. ItemStore is the repository; _row_to_item
is the mapper. Route handlers never touch SQL directly.

Timestamps are stored as fixed-width ISO 8601 UTC strings
(YYYY-MM-DDTHH:MM:SS.ffffff+00:00) so that string comparison in SQL orders
them the same way as datetime comparison in Python.

Usage:
    store = ItemStore("sqlite:///auction.db")
    store.create_item(item)
    store.update_bid(item.id, expected_bid=100, new_bid=150, bidder="bob@example.com", now=now)
    store.close()
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Column, Float, Integer, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine

from auction.models import Item
from core.config import get_settings

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_items = Table(
    "items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("item_name", String(255), nullable=False),
    Column("description", Text, nullable=False, server_default=""),
    Column("current_bid", Float, nullable=False, server_default="0"),
    Column("highest_bidder", String(255), nullable=False, server_default=""),
    Column("ending_time", String(32), nullable=False),
    Column("is_closed", Boolean, nullable=False, server_default="0"),
    Column("creator", String(255), nullable=False),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def as_utc(value: datetime) -> datetime:
    """Return value as an aware UTC datetime. Naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _iso(value: datetime) -> str:
    return as_utc(value).isoformat(timespec="microseconds")


def _now_iso() -> str:
    return _iso(datetime.now(timezone.utc))


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety."""
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ItemStore:
    def __init__(self, db_url: Optional[str] = None) -> None:
        db_url = db_url or get_settings().database_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            # Route handlers run in a thread pool; the same pooled connection
            # may be used from more than one thread.
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create_item(self, item: Item) -> int:
        """Insert a new item and return its id.

        Raises sqlalchemy.exc.IntegrityError if the id is already taken.
        """
        with self.engine.connect() as conn:
            conn.execute(
                _items.insert().values(
                    id=item.id,
                    item_name=item.item_name,
                    description=item.description,
                    current_bid=item.current_bid,
                    highest_bidder=item.highest_bidder,
                    ending_time=_iso(item.ending_time),
                    is_closed=item.is_closed,
                    creator=item.creator,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
        return item.id

    def get_item(self, item_id: int) -> Optional[Item]:
        """Fetch a single item by id. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_items.select().where(_items.c.id == item_id)).fetchone()
        return _row_to_item(row) if row is not None else None

    def list_items(self) -> list[Item]:
        """Return all items ordered by id."""
        with self.engine.connect() as conn:
            rows = conn.execute(_items.select().order_by(_items.c.id)).fetchall()
        return [_row_to_item(r) for r in rows]

    def replace_item(
        self,
        item_id: int,
        *,
        item_name: str,
        description: str,
        current_bid: float,
        highest_bidder: str,
        ending_time: datetime,
        is_closed: bool,
    ) -> bool:
        """Overwrite the editable fields of an item.

        creator is never touched. is_closed can be set but not cleared: a
        False value leaves the stored flag as it is.

        Returns True if a row was updated, False if item_id was not found.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _items.update()
                .where(_items.c.id == item_id)
                .values(
                    item_name=item_name,
                    description=description,
                    current_bid=current_bid,
                    highest_bidder=highest_bidder,
                    ending_time=_iso(ending_time),
                    is_closed=True if is_closed else _items.c.is_closed,
                )
            )
            conn.commit()
        return result.rowcount > 0

    def delete_item(self, item_id: int, creator: str) -> bool:
        """Delete an item owned by creator.

        Both conditions must match, so a caller who is not the creator can
        never remove the row even if the route-level check is bypassed.
        Returns True if a row was deleted.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _items.delete().where((_items.c.id == item_id) & (_items.c.creator == creator))
            )
            conn.commit()
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Bidding
    # ------------------------------------------------------------------

    def update_bid(
        self,
        item_id: int,
        expected_bid: float,
        new_bid: float,
        bidder: str,
        now: datetime,
    ) -> bool:
        """Conditionally record a new highest bid.

        The write only applies if the stored bid still equals expected_bid
        (the value the caller validated against), the item is still open and
        its ending time is still in the future. Returns False when any of
        those no longer hold; the caller decides what that means.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _items.update()
                .where(
                    (_items.c.id == item_id)
                    & (_items.c.current_bid == expected_bid)
                    & (_items.c.is_closed.is_(False))
                    & (_items.c.ending_time > _iso(now))
                )
                .values(current_bid=new_bid, highest_bidder=bidder)
            )
            conn.commit()
        return result.rowcount == 1

    def mark_closed(self, item_id: int) -> bool:
        """Set is_closed on one item. Returns True if the item exists."""
        with self.engine.connect() as conn:
            result = conn.execute(_items.update().where(_items.c.id == item_id).values(is_closed=True))
            conn.commit()
        return result.rowcount > 0

    def close_expired(self, now: datetime) -> int:
        """Close every open item whose ending time has passed. Returns the count."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _items.update()
                .where((_items.c.is_closed.is_(False)) & (_items.c.ending_time <= _iso(now)))
                .values(is_closed=True)
            )
            conn.commit()
        return result.rowcount

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        with self.engine.connect() as conn:
            conn.execute(_items.select().limit(1)).fetchall()
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern -- DB row -> domain dataclass)
# ---------------------------------------------------------------------------


def _row_to_item(row) -> Item:
    return Item(
        id=row.id,
        item_name=row.item_name,
        description=row.description or "",
        current_bid=row.current_bid,
        highest_bidder=row.highest_bidder or "",
        ending_time=as_utc(datetime.fromisoformat(row.ending_time)),
        is_closed=bool(row.is_closed),
        creator=row.creator,
        created_at=row.created_at,
    )
