from core.services.debouncer import ScanDebouncer
from core.services.scan_log import ScanLogService
from core.services.scan_session import ScanSessionController
from core.services.session_registry import SessionRegistry
from core.services.change_feed import ChangeFeed

__all__ = [
    "ScanDebouncer",
    "ScanLogService",
    "ScanSessionController",
    "SessionRegistry",
    "ChangeFeed",
]
