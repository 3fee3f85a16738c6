import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from gameforge.api.deps import get_db, get_events, get_cart_cache
from gameforge.core.events import EventBus
from gameforge.schemas.cart import (
    AddToCartRequest,
    CartItemResponse,
    CartMutationResponse,
    CartView
)
from gameforge.schemas.purchase import CheckoutResponse, PurchaseResponse
from gameforge.services.cart_aggregator import CartAggregator
from gameforge.services.cart_cache import CartReadCache
from gameforge.services.cart_service import CartService
from gameforge.services.checkout_service import CheckoutService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{user_id}", response_model=List[CartItemResponse])
async def get_cart_items(
    user_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Get the raw cart rows of a user, in the order they were added."""
    try:
        items = await CartService.get_items(user_id, db)
    except Exception as e:
        logger.error(f"Error fetching cart items for user {user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch cart items"
        )
    return [CartItemResponse(**item.model_dump()) for item in items]


@router.get("/{user_id}/details", response_model=CartView)
async def get_cart_details(
    user_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    cache: CartReadCache = Depends(get_cart_cache)
):
    """
    Get the cart of a user resolved against the catalog.

    Returns:
    - Each row with its resolved name, unit price, thumbnail and type
    - item_count (sum of quantities) and total_price in cents
    - is_empty when the cart has no rows
    """
    view = await CartAggregator.get_cart_view(user_id, db, cache)
    if view.status == "error":
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=view.error
        )
    return view


@router.post("", response_model=CartMutationResponse, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    request: AddToCartRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
    events: EventBus = Depends(get_events)
):
    """
    Add an asset or a bundle to a cart.

    Each call creates a new cart row, even when the same asset or bundle
    is already in the cart.
    """
    try:
        item = await CartService.add_item(
            user_id=request.user_id,
            asset_id=request.asset_id,
            bundle_id=request.bundle_id,
            quantity=request.quantity,
            db=db,
            events=events
        )
    except Exception as e:
        logger.error(f"Error adding to cart for user {request.user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add item to cart"
        )

    return CartMutationResponse(
        message="Item added to cart",
        item=CartItemResponse(**item.model_dump())
    )


@router.delete("/{user_id}/{item_id}", response_model=CartMutationResponse)
async def remove_from_cart(
    user_id: str,
    item_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    events: EventBus = Depends(get_events)
):
    """
    Remove an item from a cart.

    Removing an item that is not in the cart succeeds and changes nothing.
    """
    try:
        removed = await CartService.remove_item(user_id, item_id, db, events)
    except Exception as e:
        logger.error(f"Error removing item {item_id} from cart of user {user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to remove item from cart"
        )

    return CartMutationResponse(message="Item removed from cart", removed=int(removed))


@router.delete("/{user_id}", response_model=CartMutationResponse)
async def clear_cart(
    user_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    events: EventBus = Depends(get_events)
):
    """Clear all items from a cart."""
    try:
        removed = await CartService.clear_cart(user_id, db, events)
    except Exception as e:
        logger.error(f"Error clearing cart of user {user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to clear cart"
        )

    return CartMutationResponse(message="Cart cleared", removed=removed)


@router.post("/{user_id}/checkout", response_model=CheckoutResponse)
async def checkout(
    user_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    events: EventBus = Depends(get_events),
    cache: CartReadCache = Depends(get_cart_cache)
):
    """
    Check out the whole cart of a user.

    Creates one completed purchase per cart row, in cart order, then
    empties the cart. No payment is captured.
    """
    # Resolve from the store, not from a cached view
    cache.invalidate_user(user_id)
    view = await CartAggregator.get_cart_view(user_id, db, cache)

    if view.status == "error":
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=view.error
        )
    if view.is_empty:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cart is empty"
        )

    result = await CheckoutService.checkout(user_id, view.items, db, events)

    if not result["success"]:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=result["message"]
        )

    return CheckoutResponse(
        message=result["message"],
        purchases=[PurchaseResponse(**purchase.model_dump()) for purchase in result["purchases"]],
        total_amount=result["total_amount"]
    )
