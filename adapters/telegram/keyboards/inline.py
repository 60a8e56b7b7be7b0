"""
Inline keyboards for Telegram bot.
Kept small: gate staff tap them with gloves on.
"""

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder
from core.domain.models import EntryMode
from locales import t


def get_scan_method_keyboard(
    mode: EntryMode,
    camera_available: bool,
    camera_active: bool = False,
    lang: str = "en",
) -> InlineKeyboardMarkup:
    """Manual / Camera switch, plus start/stop while in camera mode"""
    builder = InlineKeyboardBuilder()

    manual = f"✋ {t('mode_manual', lang)}"
    camera = f"📷 {t('mode_camera', lang)}"
    if mode == EntryMode.MANUAL:
        manual = f"✓ {manual}"
    else:
        camera = f"✓ {camera}"

    builder.button(text=manual, callback_data="mode_manual")
    if camera_available:
        builder.button(text=camera, callback_data="mode_camera")

    if mode == EntryMode.CAMERA and camera_available:
        if camera_active:
            builder.button(text=f"⏹ {t('camera_stop', lang)}", callback_data="camera_stop")
        else:
            builder.button(text=f"▶️ {t('camera_start', lang)}", callback_data="camera_start")

    builder.adjust(2, 1)
    return builder.as_markup()


def get_scanner_menu_keyboard(lang: str = "en") -> InlineKeyboardMarkup:
    """History / stats / logout"""
    builder = InlineKeyboardBuilder()
    builder.button(text="🗂 History" if lang == "en" else "🗂 Riwayat", callback_data="scan_history")
    builder.button(text="📊 Stats" if lang == "en" else "📊 Statistik", callback_data="scan_stats")
    builder.button(text="🚪 Logout", callback_data="logout")
    builder.adjust(2, 1)
    return builder.as_markup()
