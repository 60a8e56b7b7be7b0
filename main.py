"""
Gate Scanner - Main entry point.

Ticket admission scanning for gate staff: Telegram bot for operators,
optional local camera, and a web dashboard for history and stats.
"""

import asyncio
import logging
import secrets
import sys
from aiohttp import web
from aiogram.exceptions import TelegramConflictError, TelegramUnauthorizedError
from adapters.telegram.loader import bot, dp, registry, scan_log, change_feed
from adapters.telegram.handlers import routers
from adapters.telegram.middleware import ThrottlingMiddleware, OperatorSessionMiddleware
from adapters.telegram.web.dashboard import create_dashboard_app
from config.features import features
from config.settings import settings
from core.domain.constants import TICKET_SCANS_TABLE

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("scanner.log", encoding="utf-8"),
    ],
)
logger = logging.getLogger(__name__)

# Set DEBUG level only for our app loggers, not for noisy libraries
if features.DEBUG_MODE:
    for name in ['adapters', 'core', 'infrastructure', '__main__']:
        logging.getLogger(name).setLevel(logging.DEBUG)
    # Silence noisy HTTP debug logs
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('hpack').setLevel(logging.WARNING)

# Retry settings
MAX_RETRIES = 5
RETRY_DELAY = 10  # seconds


async def run_web_server(dashboard_token: str) -> web.AppRunner:
    """Run aiohttp dashboard alongside the bot."""
    app = create_dashboard_app(scan_log, dashboard_token, change_feed)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "0.0.0.0", settings.port)
    await site.start()
    logger.info(f"Dashboard running on port {settings.port} — /stats?token={dashboard_token}")
    return runner


async def start_realtime():
    """Forward ticket_scans changes to the change feed. Never fatal."""
    from infrastructure.database.realtime import SupabaseRealtimeBridge
    bridge = SupabaseRealtimeBridge(change_feed, tables=[TICKET_SCANS_TABLE])
    try:
        await bridge.start()
    except Exception as e:
        logger.warning(f"Realtime unavailable, dashboard will refresh on demand: {e}")
        return None
    return bridge


async def main():
    """Main function - starts the bot with graceful error handling."""

    logger.info("=== Gate Scanner Starting ===")
    logger.info("Feature Flags:")
    for key, value in features.to_dict().items():
        logger.info(f"  {key}: {value}")
    logger.info(f"Debounce: cooldown={settings.scan_cooldown_seconds}s reset={settings.scan_reset_delay_seconds}s")

    # Register middlewares
    dp.message.middleware(ThrottlingMiddleware())
    dp.callback_query.middleware(ThrottlingMiddleware())

    session_middleware = OperatorSessionMiddleware(registry)
    dp.message.middleware(session_middleware)
    dp.callback_query.middleware(session_middleware)

    logger.info("Middlewares registered (throttle + operator session)")

    # Register Telegram routers
    for router in routers:
        dp.include_router(router)

    runner = None
    if features.DASHBOARD_ENABLED:
        dashboard_token = settings.dashboard_token or secrets.token_urlsafe(16)
        runner = await run_web_server(dashboard_token)

    bridge = await start_realtime() if features.REALTIME_ENABLED else None

    # Delete webhook (if exists) and start polling
    try:
        await bot.delete_webhook(drop_pending_updates=True)
    except TelegramUnauthorizedError:
        logger.error("Invalid bot token! Check TELEGRAM_BOT_TOKEN env var.")
        sys.exit(1)

    logger.info("Gate Scanner started!")

    retries = 0
    try:
        while retries < MAX_RETRIES:
            try:
                await dp.start_polling(bot)
                break  # Normal exit

            except TelegramConflictError:
                retries += 1
                if retries >= MAX_RETRIES:
                    logger.error(
                        "Another scanner instance is running with the same token. "
                        "Stop the other instance or wait 1-2 minutes for Telegram to release the connection."
                    )
                    sys.exit(1)
                logger.warning(
                    f"Conflict detected (another instance running). "
                    f"Retry {retries}/{MAX_RETRIES} in {RETRY_DELAY}s..."
                )
                await asyncio.sleep(RETRY_DELAY)

            except TelegramUnauthorizedError:
                logger.error("Bot token was revoked or is invalid.")
                sys.exit(1)

            except Exception as e:
                logger.error(f"Unexpected error: {e}")
                retries += 1
                if retries >= MAX_RETRIES:
                    raise
                await asyncio.sleep(RETRY_DELAY)
    finally:
        # Every operator session releases the camera before we exit
        await registry.close_all()
        if bridge is not None:
            await bridge.stop()
        if runner is not None:
            await runner.cleanup()
        await bot.session.close()
        logger.info("Gate Scanner stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Stopped by user")
