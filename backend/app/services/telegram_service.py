"""
Telegram Bot API client for contact and order notifications.

Messages are sent with a single awaited request; there is no retry.
"""

import html
import logging
import re
from typing import Any, Dict, Iterable, Optional

import httpx

from app.config import settings
from app.core.exceptions import TelegramError, TelegramNotConfigured
from app.models.cart import CartItem

logger = logging.getLogger(__name__)


def _format_amount(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def sanitize_phone(phone: str) -> str:
    """Keep only digits and plus signs."""
    return re.sub(r"[^\d+]", "", phone)


def format_contact_message(
    phone: str,
    message: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
) -> str:
    """Build the text forwarded for a contact form submission."""
    lines = [
        "💐Новое сообщение с сайта:",
        "",
        f"Имя: {html.escape(name)}" if name else "Имя: Не указано",
        f"Email: {html.escape(email)}" if email else "Email: Не указано",
        f"Телефон: {html.escape(sanitize_phone(phone))}",
        f"Сообщение: {html.escape(message)}",
    ]
    return "\n".join(lines)


def format_order_message(
    user_id: str,
    phone: str,
    address: str,
    items: Iterable[CartItem],
    total: float,
    name: Optional[str] = None,
    post_card: bool = False,
    post_card_text: str = "",
) -> str:
    """Build the text forwarded to the order chat at checkout."""
    lines = [
        "🛒 Новый заказ!",
        "",
        "👤 Пользователь:",
        "",
        f"Id: {user_id}",
        f"Имя: {name}" if name else "Имя: Не указано",
        "",
        f"Телефон: {phone}",
        f"Адрес: {address}",
        "",
        "Товары:",
    ]
    for item in items:
        lines.append(
            f"• {item.name} — {item.count} шт × {_format_amount(item.price)} ₽"
            f" = {_format_amount(item.count * item.price)} ₽"
        )

    lines.append("")
    if post_card:
        lines.extend(["Открытка: Да", "Текст к открытке:", "", post_card_text])
    else:
        lines.append("Открытка: Нет")

    lines.extend(["", f"💰 Итого: {_format_amount(total)} ₽"])
    return "\n".join(lines)


class TelegramService:
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    async def send_message(
        self, bot_token: Optional[str], chat_id: Optional[str], text: str
    ) -> Dict[str, Any]:
        """
        Send `text` to `chat_id` through the bot identified by `bot_token`.

        Returns:
            The `result` object of the Telegram response (the sent message).

        Raises:
            TelegramNotConfigured: token or chat id missing.
            TelegramError: transport failure or a non-ok Telegram response.
        """
        if not bot_token or not chat_id:
            raise TelegramNotConfigured("Telegram bot token or chat id is not configured")

        url = f"{settings.TELEGRAM_API_URL}/bot{bot_token}/sendMessage"
        timeout = httpx.Timeout(settings.TELEGRAM_TIMEOUT, connect=5.0)

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.post(url, json={"chat_id": chat_id, "text": text})
            payload = response.json()
        except httpx.TimeoutException as e:
            # The URL carries the bot token, keep it out of logs
            logger.error("Telegram request timed out")
            raise TelegramError("Telegram request timed out") from e
        except httpx.RequestError as e:
            logger.error(f"Telegram request failed: {type(e).__name__}")
            raise TelegramError("Telegram request failed") from e
        except ValueError as e:
            logger.error(f"Telegram returned a non-JSON response (HTTP {response.status_code})")
            raise TelegramError("Invalid response from Telegram") from e

        if not payload.get("ok"):
            description = payload.get("description") or "Telegram rejected the message"
            logger.error(f"Telegram error: {description}")
            raise TelegramError(description)

        return payload.get("result") or {}


telegram_service = TelegramService()
