"""
Tests for the cart and purchase endpoints.
"""
import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock
from fastapi import HTTPException, status

from gameforge.api.routes.cart import (
    add_to_cart,
    checkout,
    clear_cart,
    get_cart_details,
    remove_from_cart,
)
from gameforge.api.routes.purchases import create_purchase, get_purchases
from gameforge.core.events import EventBus
from gameforge.schemas.cart import AddToCartRequest
from gameforge.schemas.purchase import CreatePurchaseRequest
from gameforge.services.cart_cache import CartReadCache


def make_cursor(documents):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=documents)
    return cursor


def make_store_db(cart_documents, assets=None, bundles=None):
    """Mock database backed by small in-memory collections."""
    mock_db = MagicMock()
    mock_db.rows = list(cart_documents)
    mock_db.purchase_rows = []

    mock_db.cart_items.find = MagicMock(side_effect=lambda query: make_cursor(
        [row for row in mock_db.rows if row["user_id"] == query["user_id"]]
    ))

    async def delete_many(query):
        before = len(mock_db.rows)
        mock_db.rows = [row for row in mock_db.rows if row["user_id"] != query["user_id"]]
        return MagicMock(deleted_count=before - len(mock_db.rows))

    async def insert_purchase(document):
        mock_db.purchase_rows.append(document)
        return MagicMock(inserted_id=document["_id"])

    mock_db.cart_items.delete_many = AsyncMock(side_effect=delete_many)
    mock_db.purchases.insert_one = AsyncMock(side_effect=insert_purchase)
    mock_db.assets.find = MagicMock(return_value=make_cursor(assets or []))
    mock_db.bundles.find = MagicMock(return_value=make_cursor(bundles or []))
    return mock_db


def make_cache(events):
    cache = CartReadCache(cart_ttl=60, catalog_ttl=60)
    cache.attach(events)
    return cache


CART_ROW = {
    "_id": "c1", "user_id": "user-1", "asset_id": "a1", "bundle_id": None,
    "quantity": 2, "created_at": datetime(2024, 1, 1)
}
ASSET_A1 = {"_id": "a1", "name": "Epic Fantasy Orchestra", "category": "music", "price": 500}


class TestCartDetails:
    """Test the enhanced cart endpoint."""

    @pytest.mark.asyncio
    async def test_details_include_totals(self):
        mock_db = make_store_db([CART_ROW], assets=[ASSET_A1])
        cache = make_cache(EventBus())

        view = await get_cart_details(user_id="user-1", db=mock_db, cache=cache)

        assert view.total_price == 1000
        assert view.item_count == 2
        assert view.items[0].name == "Epic Fantasy Orchestra"

    @pytest.mark.asyncio
    async def test_read_failure_returns_500(self):
        mock_db = MagicMock()
        cursor = make_cursor([])
        cursor.to_list = AsyncMock(side_effect=RuntimeError("down"))
        mock_db.cart_items.find = MagicMock(return_value=cursor)

        with pytest.raises(HTTPException) as exc_info:
            await get_cart_details(user_id="user-1", db=mock_db, cache=CartReadCache())

        assert exc_info.value.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert exc_info.value.detail == "Failed to fetch cart items"


class TestCartMutations:
    """Test add, remove and clear endpoints."""

    @pytest.mark.asyncio
    async def test_add_to_cart(self):
        mock_db = MagicMock()
        mock_db.cart_items.insert_one = AsyncMock(return_value=MagicMock())
        mock_db.counters.find_one_and_update = AsyncMock(return_value={"_id": "cart_items", "seq": 1})

        response = await add_to_cart(
            request=AddToCartRequest(user_id="user-1", bundle_id="b1"),
            db=mock_db,
            events=EventBus()
        )

        assert response.message == "Item added to cart"
        assert response.item.bundle_id == "b1"
        assert response.item.quantity == 1

    @pytest.mark.asyncio
    async def test_add_failure_returns_500(self):
        mock_db = MagicMock()
        mock_db.cart_items.insert_one = AsyncMock(side_effect=RuntimeError("down"))
        mock_db.counters.find_one_and_update = AsyncMock(return_value={"_id": "cart_items", "seq": 1})

        with pytest.raises(HTTPException) as exc_info:
            await add_to_cart(
                request=AddToCartRequest(user_id="user-1", asset_id="a1"),
                db=mock_db,
                events=EventBus()
            )

        assert exc_info.value.detail == "Failed to add item to cart"

    @pytest.mark.asyncio
    async def test_remove_missing_item_succeeds(self):
        mock_db = MagicMock()
        mock_db.cart_items.delete_one = AsyncMock(return_value=MagicMock(deleted_count=0))

        response = await remove_from_cart(user_id="user-1", item_id="nope", db=mock_db, events=EventBus())

        assert response.message == "Item removed from cart"
        assert response.removed == 0

    @pytest.mark.asyncio
    async def test_clear_empty_cart_succeeds(self):
        mock_db = make_store_db([])

        response = await clear_cart(user_id="user-1", db=mock_db, events=EventBus())

        assert response.message == "Cart cleared"
        assert response.removed == 0

    @pytest.mark.asyncio
    async def test_mutation_invalidates_cached_view(self):
        """Test a clear is visible on the next details read."""
        events = EventBus()
        cache = make_cache(events)
        mock_db = make_store_db([CART_ROW], assets=[ASSET_A1])

        before = await get_cart_details(user_id="user-1", db=mock_db, cache=cache)
        await clear_cart(user_id="user-1", db=mock_db, events=events)
        after = await get_cart_details(user_id="user-1", db=mock_db, cache=cache)

        assert before.is_empty is False
        assert after.is_empty is True
        assert after.total_price == 0


class TestCheckoutEndpoint:
    """Test the checkout endpoint."""

    @pytest.mark.asyncio
    async def test_checkout_creates_purchases_and_empties_cart(self):
        events = EventBus()
        cache = make_cache(events)
        mock_db = make_store_db([CART_ROW], assets=[ASSET_A1])

        response = await checkout(user_id="user-1", db=mock_db, events=events, cache=cache)

        assert response.message.startswith("Checkout successful")
        assert response.total_amount == 1000
        assert len(response.purchases) == 1
        assert response.purchases[0].asset_id == "a1"
        assert response.purchases[0].amount == 1000
        assert response.purchases[0].status.value == "completed"
        assert mock_db.rows == []

        view = await get_cart_details(user_id="user-1", db=mock_db, cache=cache)
        assert view.is_empty is True

    @pytest.mark.asyncio
    async def test_checkout_empty_cart_returns_400(self):
        events = EventBus()
        mock_db = make_store_db([])

        with pytest.raises(HTTPException) as exc_info:
            await checkout(user_id="user-1", db=mock_db, events=events, cache=make_cache(events))

        assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST
        mock_db.purchases.insert_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_checkout_failure_returns_500_and_keeps_cart(self):
        events = EventBus()
        mock_db = make_store_db([CART_ROW], assets=[ASSET_A1])
        mock_db.purchases.insert_one = AsyncMock(side_effect=RuntimeError("write failed"))

        with pytest.raises(HTTPException) as exc_info:
            await checkout(user_id="user-1", db=mock_db, events=events, cache=make_cache(events))

        assert exc_info.value.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert "Checkout failed" in exc_info.value.detail
        assert len(mock_db.rows) == 1


class TestPurchaseEndpoints:
    """Test the purchase ledger endpoints."""

    @pytest.mark.asyncio
    async def test_create_purchase(self):
        mock_db = make_store_db([])

        response = await create_purchase(
            request=CreatePurchaseRequest(user_id="user-1", bundle_id="b1", amount=4999),
            db=mock_db,
            events=EventBus()
        )

        assert response.bundle_id == "b1"
        assert response.amount == 4999
        assert response.status.value == "completed"
        assert mock_db.purchase_rows[0]["status"] == "completed"

    @pytest.mark.asyncio
    async def test_get_purchases(self):
        mock_db = MagicMock()
        mock_db.purchases.find = MagicMock(return_value=make_cursor([
            {"_id": "p1", "user_id": "user-1", "asset_id": "a1", "bundle_id": None,
             "amount": 1000, "status": "completed", "created_at": datetime(2024, 1, 1)},
            {"_id": "p2", "user_id": "user-1", "asset_id": None, "bundle_id": "b1",
             "amount": 0, "status": "failed", "created_at": datetime(2024, 1, 2)},
        ]))

        purchases = await get_purchases(user_id="user-1", db=mock_db)

        assert [purchase.id for purchase in purchases] == ["p1", "p2"]
        assert purchases[1].status.value == "failed"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
