"""
Scanner handlers - manual entry, photo scans, entry mode and camera control.

Scan outcomes are delivered by the session listeners (see notifier.py), so the
handlers here only report input and device problems.
"""

import asyncio
import logging
from typing import Optional

from aiogram import Bot, Router, F
from aiogram.filters import Command, CommandObject
from aiogram.types import Message, CallbackQuery

from adapters.telegram.keyboards import get_scan_method_keyboard
from adapters.telegram.states import ScannerStates
from adapters.telegram.views import format_error
from config.features import features
from core.domain.errors import CameraError, ScannerError
from core.domain.models import EntryMode
from core.services.scan_session import ScanSessionController
from infrastructure.camera.image_decoder import decode_image
from locales import t

logger = logging.getLogger(__name__)

router = Router()


def _method_keyboard(session: ScanSessionController, lang: str):
    return get_scan_method_keyboard(session.mode, session.camera_available, session.camera_active, lang)


async def submit_ticket(message: Message, session: Optional[ScanSessionController], ticket_id: str, lang: str):
    """Manual submit with input errors answered right away"""
    if session is None:
        await message.answer(t("not_logged_in", lang))
        return
    try:
        await session.submit_manual(ticket_id)
    except ScannerError as e:
        await message.answer(f"⚠️ {format_error(e, lang)}")


@router.message(Command("scan"))
async def scan_command(message: Message, command: CommandObject, session: Optional[ScanSessionController], lang: str):
    """/scan TICKET_ID"""
    await submit_ticket(message, session, command.args or "", lang)


@router.message(ScannerStates.scanning, F.text, ~F.text.startswith("/"))
async def scan_text(message: Message, session: Optional[ScanSessionController], lang: str):
    """Any plain text while logged in is a ticket ID"""
    await submit_ticket(message, session, message.text, lang)


@router.message(F.photo)
async def scan_photo(message: Message, bot: Bot, session: Optional[ScanSessionController], lang: str):
    """Decode the barcode on a ticket photo and submit it like a typed ID"""
    if not features.PHOTO_SCAN_ENABLED:
        await message.answer(t("photo_disabled", lang))
        return
    if session is None:
        await message.answer(t("not_logged_in", lang))
        return

    try:
        buffer = await bot.download(message.photo[-1])
        loop = asyncio.get_running_loop()
        payloads = await loop.run_in_executor(None, decode_image, buffer.getvalue())
    except CameraError as e:
        await message.answer(f"⚠️ {format_error(e, lang)}")
        return
    except Exception as e:
        logger.error(f"Photo scan failed: {e}", exc_info=True)
        await message.answer(f"⚠️ {t('error_generic', lang)}")
        return

    if not payloads:
        await message.answer(t("photo_no_barcode", lang))
        return

    logger.info(f"Photo scan decoded {len(payloads)} code(s), submitting '{payloads[0]}'")
    await submit_ticket(message, session, payloads[0], lang)


# === ENTRY MODE ===

@router.callback_query(F.data.in_({"mode_manual", "mode_camera"}))
async def switch_mode(callback: CallbackQuery, session: Optional[ScanSessionController], lang: str):
    if session is None:
        await callback.answer(t("not_logged_in", lang), show_alert=True)
        return

    mode = EntryMode.CAMERA if callback.data == "mode_camera" else EntryMode.MANUAL
    try:
        await session.switch_mode(mode)
    except CameraError as e:
        await callback.answer(format_error(e, lang), show_alert=True)
        return

    await callback.answer()
    label = t("mode_camera", lang) if mode == EntryMode.CAMERA else t("mode_manual", lang)
    await callback.message.edit_text(
        t("method_header", lang, mode=label),
        reply_markup=_method_keyboard(session, lang),
    )


@router.callback_query(F.data == "camera_start")
async def camera_start(callback: CallbackQuery, session: Optional[ScanSessionController], lang: str):
    if session is None:
        await callback.answer(t("not_logged_in", lang), show_alert=True)
        return

    try:
        await session.start_camera_session()
    except CameraError as e:
        logger.warning(f"Camera start refused ({e.kind.value}): {e.detail}")
        await callback.answer(format_error(e, lang), show_alert=True)
        await callback.message.edit_reply_markup(reply_markup=_method_keyboard(session, lang))
        return
    except ScannerError as e:
        await callback.answer(format_error(e, lang), show_alert=True)
        return

    await callback.answer()
    await callback.message.edit_text(
        f"📷 {t('camera_started', lang)}",
        reply_markup=_method_keyboard(session, lang),
    )


@router.callback_query(F.data == "camera_stop")
async def camera_stop(callback: CallbackQuery, session: Optional[ScanSessionController], lang: str):
    if session is None:
        await callback.answer(t("not_logged_in", lang), show_alert=True)
        return

    await session.stop_camera_session()
    await callback.answer()
    await callback.message.edit_text(
        t("camera_stopped", lang),
        reply_markup=_method_keyboard(session, lang),
    )
