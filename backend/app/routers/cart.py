"""
Cart API endpoints: contents, line edits and checkout.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from app.config import settings
from app.core.exceptions import TelegramError, TelegramNotConfigured
from app.database import get_db
from app.dependencies import require_user_id
from app.models.cart import CartItem
from app.repositories import Database
from app.schemas import (
    AddCartItemRequest,
    CartResponse,
    CartTotalResponse,
    CheckoutRequest,
    CheckoutResponse,
    SuccessResponse,
    UpdateCountRequest,
)
from app.services.telegram_service import format_order_message, telegram_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _owned_item(db: Database, item_id: str, user_id: str) -> CartItem:
    """The cart item, if it exists and belongs to the caller; 403 otherwise."""
    item = db.cart.get_one(item_id)
    if not item or item.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return item


@router.get("", response_model=CartResponse)
async def get_cart(
    user_id: str = Depends(require_user_id),
    db: Database = Depends(get_db),
) -> Any:
    """Cart items (newest first) with the cart total and unit count."""
    return {
        "items": db.cart.get_all_for_user(user_id),
        "total": db.cart.get_total_for_user(user_id),
        "count": db.cart.get_count_for_user(user_id),
    }


@router.post("/add", response_model=CartItem, status_code=status.HTTP_201_CREATED)
async def add_item(
    data: AddCartItemRequest,
    user_id: str = Depends(require_user_id),
    db: Database = Depends(get_db),
) -> Any:
    return await db.cart.add_item(
        user_id,
        product_id=data.product_id,
        name=data.name,
        price=data.price,
        image=data.image,
        count=data.count,
    )


@router.post("/update", response_model=SuccessResponse)
async def update_item(
    data: UpdateCountRequest,
    user_id: str = Depends(require_user_id),
    db: Database = Depends(get_db),
) -> Any:
    """Set an item's count; zero removes the item."""
    _owned_item(db, data.item_id, user_id)

    if not await db.cart.update_count(data.item_id, data.count):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Товар не найден")
    return {"success": True}


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(
    data: CheckoutRequest,
    user_id: str = Depends(require_user_id),
    db: Database = Depends(get_db),
) -> Any:
    """
    Send the order to the shop's Telegram chat and empty the cart.

    The ordered items are only removed once Telegram has accepted the
    message. Items added while the message is in flight stay in the cart.
    """
    items = db.cart.get_all_for_user(user_id)
    if not items:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Корзина пуста")

    total = db.cart.get_total_for_user(user_id)
    text = format_order_message(
        user_id=user_id,
        phone=data.phone,
        address=data.address,
        items=items,
        total=total,
        name=data.name,
        post_card=data.post_card,
        post_card_text=data.post_card_text,
    )

    try:
        result = await telegram_service.send_message(
            settings.TG_BOT_TOKEN_ORDER, settings.TELEGRAM_CHAT_ID, text
        )
    except TelegramNotConfigured:
        logger.error("Telegram credentials missing, order not sent")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Telegram не настроен",
        )
    except TelegramError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка при отправке в Telegram",
        )

    await db.cart.remove_ordered(items)
    logger.info(f"Order sent for user {user_id}: {len(items)} items, total {total}")

    return CheckoutResponse(message="Заказ успешно отправлен", order_id=result.get("message_id"))


@router.delete("", response_model=SuccessResponse)
async def clear_cart(
    user_id: str = Depends(require_user_id),
    db: Database = Depends(get_db),
) -> Any:
    await db.cart.clear_for_user(user_id)
    return {"success": True, "message": "Корзина очищена"}


@router.get("/total", response_model=CartTotalResponse)
async def get_total(
    user_id: str = Depends(require_user_id),
    db: Database = Depends(get_db),
) -> Any:
    return {
        "total": db.cart.get_total_for_user(user_id),
        "count": db.cart.get_count_for_user(user_id),
    }


@router.delete("/{item_id}", response_model=SuccessResponse)
async def remove_item(
    item_id: str,
    user_id: str = Depends(require_user_id),
    db: Database = Depends(get_db),
) -> Any:
    _owned_item(db, item_id, user_id)

    if not await db.cart.remove_item(item_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Товар не найден")
    return {"success": True}
