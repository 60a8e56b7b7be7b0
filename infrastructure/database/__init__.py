from infrastructure.database.ticket_scan_repository import SupabaseTicketScanRepository
from infrastructure.database.scanner_user_repository import SupabaseScannerUserRepository

__all__ = [
    "SupabaseTicketScanRepository",
    "SupabaseScannerUserRepository",
]
