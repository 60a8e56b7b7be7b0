"""
Centralized language detection for all handlers.

Default: English. Auto-switches to Indonesian if user's Telegram language is "id".
"""

from aiogram.types import Message, CallbackQuery
from typing import Union


def detect_lang(source: Union[Message, CallbackQuery, None] = None) -> str:
    """
    Detect operator language from Telegram settings.

    Returns "id" only if the user's Telegram language_code starts with "id",
    "en" otherwise.
    """
    if source:
        user = source.from_user if hasattr(source, 'from_user') else None
        if user and user.language_code and user.language_code.startswith("id"):
            return "id"
    return "en"
