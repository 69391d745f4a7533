"""
Contact form endpoint, forwarded to the shop's Telegram chat.
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request, status

from app.config import settings
from app.core.exceptions import TelegramError, TelegramNotConfigured
from app.core.rate_limit import limiter
from app.schemas import ContactRequest
from app.services.telegram_service import format_contact_message, telegram_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
@limiter.limit("5/minute")
async def send_contact_message(request: Request, data: ContactRequest) -> Any:
    text = format_contact_message(
        phone=data.phone, message=data.message, name=data.name, email=data.email
    )

    try:
        await telegram_service.send_message(
            settings.TELEGRAM_BOT_TOKEN, settings.TELEGRAM_CHAT_ID, text
        )
    except TelegramNotConfigured:
        logger.error("Telegram credentials missing, contact message not sent")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка конфигурации сервера",
        )
    except TelegramError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка при отправке сообщения",
        )

    return {"ok": True}
