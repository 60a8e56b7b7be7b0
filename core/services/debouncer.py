"""
Scan debouncer - keeps a continuous camera feed from submitting one physical
ticket many times.

A payload is accepted only when no scan is being processed, the cooldown has
elapsed since the last accepted scan, and it differs from the previous accepted
payload. The processing flag is cleared on a delayed timer after the validator
answers, whatever the answer was.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from core.domain.constants import DEFAULT_SCAN_COOLDOWN_SECONDS, DEFAULT_RESET_DELAY_SECONDS

logger = logging.getLogger(__name__)


class ScanDebouncer:
    """Accept policy for decoded payloads"""

    def __init__(
        self,
        cooldown: float = DEFAULT_SCAN_COOLDOWN_SECONDS,
        reset_delay: float = DEFAULT_RESET_DELAY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.cooldown = cooldown
        self.reset_delay = reset_delay
        self._clock = clock

        self.processing = False
        self.last_payload: Optional[str] = None
        self.last_accepted_at: Optional[float] = None
        self._release_task: Optional[asyncio.Task] = None

    def should_accept(self, payload: str, now: Optional[float] = None) -> bool:
        """Pure check, records nothing"""
        payload = payload.strip()
        if not payload:
            return False
        now = self._clock() if now is None else now

        if self.processing:
            logger.debug(f"[DEBOUNCE] Ignored '{payload}': scan in progress")
            return False
        if self.last_accepted_at is not None and now - self.last_accepted_at < self.cooldown:
            logger.debug(
                f"[DEBOUNCE] Ignored '{payload}': {now - self.last_accepted_at:.2f}s since last scan"
            )
            return False
        if payload == self.last_payload:
            logger.debug(f"[DEBOUNCE] Ignored '{payload}': same as previous scan")
            return False
        return True

    def try_accept(self, payload: str, now: Optional[float] = None) -> bool:
        """Check and, on acceptance, mark processing and remember the payload"""
        now = self._clock() if now is None else now
        if not self.should_accept(payload, now):
            return False

        self.processing = True
        self.last_payload = payload.strip()
        self.last_accepted_at = now
        return True

    def release(self):
        self.processing = False

    def release_later(self) -> asyncio.Task:
        """Clear the processing flag after the reset delay"""
        if self._release_task and not self._release_task.done():
            self._release_task.cancel()
        self._release_task = asyncio.create_task(self._release_after_delay())
        return self._release_task

    @property
    def pending_release(self) -> Optional[asyncio.Task]:
        return self._release_task

    async def _release_after_delay(self):
        await asyncio.sleep(self.reset_delay)
        self.release()
        logger.debug("[DEBOUNCE] Ready for next scan")

    def reset(self):
        """Forget everything, e.g. when the operator logs out"""
        if self._release_task and not self._release_task.done():
            self._release_task.cancel()
        self._release_task = None
        self.processing = False
        self.last_payload = None
        self.last_accepted_at = None
