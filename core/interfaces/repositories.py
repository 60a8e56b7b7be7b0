"""
Repository interfaces - abstractions for data access.
This allows swapping implementations (Supabase -> PostgreSQL, fakes in tests, etc.)
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List
from core.domain.models import (
    ScannerUser,
    ScanRequest,
    ScanResult,
    ScanHistoryEntry,
)


class ITicketScanRepository(ABC):
    """Interface for the remote ticket validator and the scan log"""

    @abstractmethod
    async def validate_and_record(self, request: ScanRequest) -> ScanResult:
        """Check the ticket, record the scan, return the validator's verdict"""
        pass

    @abstractmethod
    async def get_history(self, limit: int) -> List[ScanHistoryEntry]:
        """Most recent scans, newest first"""
        pass

    @abstractmethod
    async def count_scans(self, since: Optional[datetime] = None) -> int:
        """Count logged scans, optionally only those at or after `since`"""
        pass

    @abstractmethod
    async def get_customer_names(self) -> List[str]:
        """Customer name of every logged scan (duplicates included)"""
        pass


class IScannerUserRepository(ABC):
    """Interface for gate staff accounts"""

    @abstractmethod
    async def authenticate(self, username: str, password: str) -> ScannerUser:
        """Check credentials; raises AuthenticationError when they do not match"""
        pass
