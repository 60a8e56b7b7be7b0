from core.interfaces.repositories import (
    ITicketScanRepository,
    IScannerUserRepository,
)
from core.interfaces.camera import IBarcodeSource

__all__ = [
    # Repositories
    "ITicketScanRepository",
    "IScannerUserRepository",
    # Camera
    "IBarcodeSource",
]
