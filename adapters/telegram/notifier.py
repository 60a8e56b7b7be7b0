"""
Pushes scan outcomes to the operator's chat.
Camera scans finish in the background, so results arrive through these listeners.
"""

import logging

from aiogram import Bot

from adapters.telegram.keyboards import get_scan_method_keyboard
from adapters.telegram.views import format_scan_result, format_error
from core.domain.errors import ScannerError
from core.domain.models import ScanResult, EntryMode
from core.services.scan_session import ScanSessionController
from locales import t

logger = logging.getLogger(__name__)


def attach_chat_listeners(session: ScanSessionController, bot: Bot, chat_id: int, lang: str = "en"):
    """Wire session result/error listeners to one chat"""

    async def on_result(result: ScanResult):
        text = format_scan_result(result, lang)
        if session.mode == EntryMode.CAMERA and not session.camera_active:
            text += f"\n\n<i>{t('camera_off_after_scan', lang)}</i>"
        await bot.send_message(
            chat_id,
            text,
            reply_markup=get_scan_method_keyboard(
                session.mode, session.camera_available, session.camera_active, lang
            ),
        )

    async def on_error(error: ScannerError):
        await bot.send_message(chat_id, f"⚠️ {format_error(error, lang)}")

    session.on_result = on_result
    session.on_error = on_error
    logger.debug(f"Listeners attached for chat {chat_id}")
