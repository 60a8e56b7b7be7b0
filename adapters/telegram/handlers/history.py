"""
History & stats handlers, plus the admin ticket QR command.
"""

import logging
from typing import Optional

from aiogram import Router, F
from aiogram.filters import Command, CommandObject
from aiogram.types import Message, CallbackQuery, BufferedInputFile

from adapters.telegram.views import format_history, format_stats
from config.settings import settings
from core.services.scan_log import ScanLogService
from core.services.scan_session import ScanSessionController
from core.utils.qr_generator import generate_ticket_qr
from locales import t

logger = logging.getLogger(__name__)

router = Router()


async def _send_history(message: Message, scan_log: ScanLogService, lang: str):
    entries = await scan_log.fetch_history()
    await message.answer(format_history(entries, lang))


async def _send_stats(message: Message, scan_log: ScanLogService, lang: str):
    stats = await scan_log.fetch_stats()
    await message.answer(format_stats(stats, lang))


@router.message(Command("history"))
async def history_command(message: Message, session: Optional[ScanSessionController], scan_log: ScanLogService, lang: str):
    if session is None:
        await message.answer(t("not_logged_in", lang))
        return
    await _send_history(message, scan_log, lang)


@router.message(Command("stats"))
async def stats_command(message: Message, session: Optional[ScanSessionController], scan_log: ScanLogService, lang: str):
    if session is None:
        await message.answer(t("not_logged_in", lang))
        return
    await _send_stats(message, scan_log, lang)


@router.callback_query(F.data.in_({"scan_history", "scan_stats"}))
async def history_callback(callback: CallbackQuery, session: Optional[ScanSessionController], scan_log: ScanLogService, lang: str):
    if session is None:
        await callback.answer(t("not_logged_in", lang), show_alert=True)
        return
    await callback.answer()
    if callback.data == "scan_history":
        await _send_history(callback.message, scan_log, lang)
    else:
        await _send_stats(callback.message, scan_log, lang)


@router.message(Command("ticket_qr"))
async def ticket_qr_command(message: Message, command: CommandObject, lang: str):
    """Admins: render the QR for a ticket order id (printing, gate tests)"""
    if message.from_user.id not in settings.admin_telegram_ids:
        await message.answer(t("admin_only", lang))
        return

    ticket_id = (command.args or "").strip()
    if not ticket_id:
        await message.answer(t("qr_usage", lang))
        return

    png = generate_ticket_qr(ticket_id)
    await message.answer_photo(
        BufferedInputFile(png, filename=f"{ticket_id}_QR.png"),
        caption=t("qr_caption", lang, ticket_id=ticket_id),
    )
    logger.info(f"Ticket QR generated for '{ticket_id}' by admin {message.from_user.id}")
