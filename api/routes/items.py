"""
api/routes/items.py -- Auction item and bidding endpoints.

Routes:
  GET    /                   -- list all items (public)
  GET    /item/{id}          -- single item (public)
  POST   /post-item          -- create an item; creator = caller (requires auth)
  PUT    /update-bid         -- place a bid (public; bidder named in the body)
  DELETE /delete-item/{id}   -- delete an item (requires auth, creator only)
  PUT    /edit-item/{id}     -- replace an item's editable fields (public)

Every read goes through auction.bidding so an expired item is closed, and the
closure persisted, before it is returned.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import IntegrityError

from api.models import (
    BidRequest,
    ItemCreate,
    ItemDeletedResponse,
    ItemEdit,
    ItemEnvelope,
    ItemResponse,
    ItemUpdatedResponse,
)
from auction import bidding
from auction.models import Item
from auction.store import ItemStore
from auth.dependencies import get_current_claims
from auth.models import TokenClaims
from core.errors import DuplicateItem, Forbidden, ItemNotFound, ValidationError

logger = logging.getLogger("auction.api")

# Auth policy:
# - GET    /, /item/{id}:        public
# - POST   /post-item:           requires auth; creator taken from the token
# - PUT    /update-bid:          public
# - DELETE /delete-item/{id}:    requires auth + creator match
# - PUT    /edit-item/{id}:      public
router = APIRouter()


def _store(request: Request) -> ItemStore:
    return request.app.state.item_store


# Handlers are plain `def`: ItemStore calls block, so FastAPI runs them in the thread pool.
@router.get("/", response_model=list[ItemResponse])
def list_items(request: Request) -> list[ItemResponse]:
    """Return every item, oldest id first."""
    return [ItemResponse.from_item(i) for i in bidding.list_items(_store(request))]


@router.get("/item/{item_id}", response_model=ItemResponse)
def get_item(request: Request, item_id: int) -> ItemResponse:
    """Return one item or 404."""
    return ItemResponse.from_item(bidding.get_item(_store(request), item_id))


@router.post("/post-item", response_model=ItemEnvelope, status_code=201)
def post_item(
    request: Request,
    body: ItemCreate,
    claims: TokenClaims = Depends(get_current_claims),
) -> ItemEnvelope:
    """Create an item owned by the authenticated caller. 409 if the id is taken."""
    store = _store(request)
    item = Item(
        id=body.id,
        item_name=body.item_name,
        description=body.description,
        current_bid=body.current_bid,
        highest_bidder=body.highest_bidder,
        ending_time=body.ending_time,
        is_closed=body.is_closed,
        creator=claims.email,
    )
    try:
        store.create_item(item)
    except IntegrityError as exc:
        raise DuplicateItem() from exc

    logger.info("Item %s posted by user id=%s", item.id, claims.user_id)
    created = bidding.get_item(store, item.id)
    return ItemEnvelope(message="Item added successfully", item=ItemResponse.from_item(created))


@router.put("/update-bid", response_model=ItemEnvelope)
def update_bid(request: Request, body: BidRequest) -> ItemEnvelope:
    """Place a bid. 400 if fields are missing, the item is closed, or the bid is too low."""
    if body.item_id is None or not body.bid_amount or not body.highest_bidder:
        raise ValidationError()
    item = bidding.place_bid(_store(request), body.item_id, body.bid_amount, body.highest_bidder)
    return ItemEnvelope(message="Bid updated successfully", item=ItemResponse.from_item(item))


@router.delete("/delete-item/{item_id}", response_model=ItemDeletedResponse)
def delete_item(
    request: Request,
    item_id: int,
    claims: TokenClaims = Depends(get_current_claims),
) -> ItemDeletedResponse:
    """Delete an item. Only its creator may do so (403 otherwise)."""
    store = _store(request)
    item = bidding.get_item(store, item_id)
    if item.creator != claims.email:
        raise Forbidden("Only the item's creator can delete it.")
    # The store re-checks the creator in its WHERE clause.
    if not store.delete_item(item_id, claims.email):
        raise ItemNotFound()

    logger.info("Item %s deleted by user id=%s", item_id, claims.user_id)
    return ItemDeletedResponse(message="Item deleted successfully", deleted_item=ItemResponse.from_item(item))


@router.put("/edit-item/{item_id}", response_model=ItemUpdatedResponse)
def edit_item(request: Request, item_id: int, body: ItemEdit) -> ItemUpdatedResponse:
    """Replace an item's editable fields. The creator never changes and a closed item stays closed."""
    store = _store(request)
    updated = store.replace_item(
        item_id,
        item_name=body.item_name,
        description=body.description,
        current_bid=body.current_bid,
        highest_bidder=body.highest_bidder,
        ending_time=body.ending_time,
        is_closed=body.is_closed,
    )
    if not updated:
        raise ItemNotFound()
    return ItemUpdatedResponse(
        message="Item updated successfully",
        updated_item=ItemResponse.from_item(bidding.get_item(store, item_id)),
    )
