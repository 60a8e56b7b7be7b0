"""
Change feed - routes realtime row changes to subscribers by table name.

Delivery is best-effort and at-least-once from the backend; subscribers only
re-fetch or patch local state, so no ordering is assumed here.
"""

import logging
from collections import defaultdict
from typing import Awaitable, Callable, Dict, List

from core.domain.models import ChangeEvent

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[ChangeEvent], Awaitable[None]]


class ChangeFeed:
    """In-process fan-out of backend change notifications"""

    def __init__(self):
        self._handlers: Dict[str, List[ChangeHandler]] = defaultdict(list)

    @property
    def tables(self) -> List[str]:
        return [table for table, handlers in self._handlers.items() if handlers]

    def subscribe(self, table: str, handler: ChangeHandler) -> Callable[[], None]:
        """Register a handler; returns a callable that unsubscribes it"""
        self._handlers[table].append(handler)

        def unsubscribe():
            if handler in self._handlers[table]:
                self._handlers[table].remove(handler)

        return unsubscribe

    async def dispatch(self, event: ChangeEvent) -> int:
        """Deliver one event. A failing handler never blocks the others."""
        delivered = 0
        for handler in list(self._handlers.get(event.table, [])):
            try:
                await handler(event)
                delivered += 1
            except Exception as e:
                logger.error(f"[CHANGE_FEED] Handler failed for {event.table} {event.type.value}: {e}", exc_info=True)
        return delivered
