"""
Middleware for Telegram bot.

- ThrottlingMiddleware: rate limiting
- OperatorSessionMiddleware: injects the operator's scan session and language
"""

import time
import logging
from typing import Any, Awaitable, Callable, Dict
from collections import defaultdict

from aiogram import BaseMiddleware
from aiogram.types import Message, CallbackQuery, TelegramObject

from core.domain.constants import RATE_LIMIT_COMMANDS, RATE_LIMIT_INTERVAL_SECONDS
from core.services.session_registry import SessionRegistry
from core.utils.language import detect_lang
from locales import t

logger = logging.getLogger(__name__)


class ThrottlingMiddleware(BaseMiddleware):
    """
    Simple rate limiter: tracks request timestamps per user.
    Drops requests that exceed the limit within the interval.
    """

    def __init__(
        self,
        default_limit: int = RATE_LIMIT_COMMANDS,
        interval: int = RATE_LIMIT_INTERVAL_SECONDS,
    ):
        self.default_limit = default_limit
        self.interval = interval
        # {user_id: [timestamp, timestamp, ...]}
        self._requests: Dict[int, list] = defaultdict(list)

    def _cleanup(self, user_id: int, now: float):
        """Remove expired timestamps."""
        cutoff = now - self.interval
        self._requests[user_id] = [
            ts for ts in self._requests[user_id] if ts > cutoff
        ]

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        user = None
        if isinstance(event, (Message, CallbackQuery)):
            user = event.from_user

        if not user:
            return await handler(event, data)

        user_id = user.id
        now = time.monotonic()
        self._cleanup(user_id, now)

        if len(self._requests[user_id]) >= self.default_limit:
            logger.warning(f"Rate limit hit for user {user_id} (limit={self.default_limit})")
            lang = detect_lang(event)
            if isinstance(event, Message):
                await event.answer(t("rate_limited", lang))
            elif isinstance(event, CallbackQuery):
                await event.answer(t("rate_limited", lang), show_alert=False)
            return  # Drop the request

        self._requests[user_id].append(now)
        return await handler(event, data)


class OperatorSessionMiddleware(BaseMiddleware):
    """
    Looks up the scan session of the chat the event came from and injects
    `data["session"]` (None when nobody is logged in) and `data["lang"]`.
    """

    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        chat_id = None
        if isinstance(event, Message):
            chat_id = event.chat.id
        elif isinstance(event, CallbackQuery) and event.message:
            chat_id = event.message.chat.id

        data["session"] = self.registry.get(chat_id) if chat_id is not None else None
        data["lang"] = detect_lang(event)
        return await handler(event, data)
