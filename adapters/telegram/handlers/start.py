"""
Start handler - /start, scanner account login and logout.
"""

import logging
from typing import Optional

from aiogram import Bot, Router, F
from aiogram.filters import Command, CommandStart, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import Message, CallbackQuery

from adapters.telegram.keyboards import get_scan_method_keyboard, get_scanner_menu_keyboard
from adapters.telegram.notifier import attach_chat_listeners
from adapters.telegram.states import LoginStates, ScannerStates
from core.domain.errors import AuthenticationError
from core.interfaces.repositories import IScannerUserRepository
from core.services.scan_session import ScanSessionController
from core.services.session_registry import SessionRegistry
from locales import t

logger = logging.getLogger(__name__)

router = Router()


@router.message(CommandStart())
async def start_command(message: Message, state: FSMContext, session: Optional[ScanSessionController], lang: str):
    """Entry point: greet and either resume the session or ask to log in"""
    if session is not None:
        await state.set_state(ScannerStates.scanning)
        await message.answer(
            t("welcome_back", lang, name=session.operator.display_name),
            reply_markup=get_scanner_menu_keyboard(lang),
        )
        return

    await message.answer(t("welcome", lang))
    await login_command(message, state, lang)


@router.message(Command("login"))
async def login_command(message: Message, state: FSMContext, lang: str):
    await state.set_state(LoginStates.waiting_username)
    await message.answer(t("login_username", lang))


@router.message(LoginStates.waiting_username, F.text)
async def process_username(message: Message, state: FSMContext, lang: str):
    await state.update_data(username=message.text.strip())
    await state.set_state(LoginStates.waiting_password)
    await message.answer(t("login_password", lang))


@router.message(LoginStates.waiting_password, F.text)
async def process_password(
    message: Message,
    state: FSMContext,
    bot: Bot,
    lang: str,
    registry: SessionRegistry,
    scanner_user_repo: IScannerUserRepository,
):
    data = await state.get_data()
    username = data.get("username", "")
    password = message.text

    # Keep the password out of the chat history
    try:
        await message.delete()
    except Exception as e:
        logger.debug(f"Could not delete password message: {e}")

    try:
        operator = await scanner_user_repo.authenticate(username, password)
    except AuthenticationError:
        await state.clear()
        await message.answer(f"❌ {t('error_login_failed', lang)}")
        return
    except Exception as e:
        logger.error(f"Scanner login failed for '{username}': {e}", exc_info=True)
        await state.clear()
        await message.answer(f"⚠️ {t('error_generic', lang)}")
        return

    if not operator.is_active:
        await state.clear()
        await message.answer(f"❌ {t('login_inactive', lang)}")
        return

    session = await registry.open(message.chat.id, operator)
    attach_chat_listeners(session, bot, message.chat.id, lang)
    await state.set_state(ScannerStates.scanning)

    await message.answer(
        t("login_success", lang, name=operator.display_name),
        reply_markup=get_scan_method_keyboard(session.mode, session.camera_available, lang=lang),
    )
    await message.answer("⬇️", reply_markup=get_scanner_menu_keyboard(lang))


async def _logout(chat_id: int, state: FSMContext, registry: SessionRegistry) -> bool:
    await state.clear()
    return await registry.close(chat_id)


@router.message(Command("logout"), StateFilter("*"))
async def logout_command(message: Message, state: FSMContext, lang: str, registry: SessionRegistry):
    await _logout(message.chat.id, state, registry)
    await message.answer(t("logout_done", lang))


@router.callback_query(F.data == "logout")
async def logout_callback(callback: CallbackQuery, state: FSMContext, lang: str, registry: SessionRegistry):
    await _logout(callback.message.chat.id, state, registry)
    await callback.answer()
    await callback.message.answer(t("logout_done", lang))
