"""
Scan log service - read-only history and statistics of past admissions.
Holds a lagging snapshot; the backend log stays the source of truth.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

from core.domain.constants import HISTORY_LIMIT
from core.domain.models import ScanHistoryEntry, ScanStats
from core.interfaces.repositories import ITicketScanRepository

logger = logging.getLogger(__name__)


def start_of_today(now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def count_unique_customers(names: List[str]) -> int:
    return len({name for name in names if name})


class ScanLogService:
    """Service for scan history and stats views"""

    def __init__(self, scan_repo: ITicketScanRepository, history_limit: int = HISTORY_LIMIT):
        self.scan_repo = scan_repo
        self.history_limit = history_limit
        self.history: List[ScanHistoryEntry] = []
        self.history_refreshed_at: Optional[datetime] = None
        self.stats = ScanStats()
        self.refresh_count = 0

    async def fetch_history(self) -> List[ScanHistoryEntry]:
        """Re-fetch the most recent scans. Keeps the old snapshot on failure."""
        try:
            self.history = await self.scan_repo.get_history(self.history_limit)
            self.history_refreshed_at = datetime.now(timezone.utc)
        except Exception as e:
            logger.error(f"[SCAN_LOG] Failed to fetch scan history: {e}")
        return self.history

    async def fetch_stats(self) -> ScanStats:
        """Re-query the counters. Keeps the old snapshot on failure."""
        try:
            total, today, names = await asyncio.gather(
                self.scan_repo.count_scans(),
                self.scan_repo.count_scans(since=start_of_today()),
                self.scan_repo.get_customer_names(),
            )
        except Exception as e:
            logger.error(f"[SCAN_LOG] Failed to fetch scan stats: {e}")
            return self.stats

        # Only admissions reach the log, so every logged scan is a successful one
        self.stats = ScanStats(
            total_scans=total,
            successful_scans=total,
            today_scans=today,
            unique_customers=count_unique_customers(names),
            refreshed_at=datetime.now(timezone.utc),
        )
        return self.stats

    def mark_stale(self):
        """Keep the data but make the next reader re-fetch it"""
        self.history_refreshed_at = None
        self.stats = self.stats.model_copy(update={"refreshed_at": None})

    async def refresh(self):
        """Re-fetch history and stats together"""
        self.refresh_count += 1
        await asyncio.gather(self.fetch_history(), self.fetch_stats())
