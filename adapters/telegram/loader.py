"""
Telegram bot loader - initializes bot, dispatcher, and services.
Everything stateful is created here and handed to handlers through the
dispatcher's workflow data.
"""

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.enums import ParseMode
from config.settings import settings
from config.features import features

# Infrastructure
from infrastructure.database import (
    SupabaseTicketScanRepository,
    SupabaseScannerUserRepository,
)
from infrastructure.camera import CameraBarcodeSource

# Core services
from core.domain.models import ScannerUser
from core.services import (
    ChangeFeed,
    ScanDebouncer,
    ScanLogService,
    ScanSessionController,
    SessionRegistry,
)


# === BOT INITIALIZATION ===
bot = Bot(token=settings.telegram_bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
storage = MemoryStorage()
dp = Dispatcher(storage=storage)


# === REPOSITORIES ===
scan_repo = SupabaseTicketScanRepository()
scanner_user_repo = SupabaseScannerUserRepository()


# === DEVICES ===
# One camera per gate station, shared by whoever starts it first
camera_source = CameraBarcodeSource(
    device_index=settings.camera_device_index,
    frame_interval=settings.camera_frame_interval,
) if features.CAMERA_ENABLED else None


# === BUSINESS SERVICES ===
scan_log = ScanLogService(scan_repo=scan_repo, history_limit=settings.history_limit)
change_feed = ChangeFeed()


def create_session(operator: ScannerUser, chat_id: int) -> ScanSessionController:
    return ScanSessionController(
        scan_repo=scan_repo,
        scan_log=scan_log,
        operator=operator,
        barcode_source=camera_source,
        debouncer=ScanDebouncer(
            cooldown=settings.scan_cooldown_seconds,
            reset_delay=settings.scan_reset_delay_seconds,
        ),
    )


registry = SessionRegistry(factory=create_session)


# === HANDLER DEPENDENCIES ===
dp.workflow_data.update(
    registry=registry,
    scan_log=scan_log,
    scanner_user_repo=scanner_user_repo,
)
