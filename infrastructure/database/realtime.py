"""
Supabase realtime bridge - forwards postgres_changes events into the ChangeFeed.
"""

import asyncio
import logging
from typing import List, Optional, Set

from pydantic import ValidationError as ModelValidationError
from supabase import acreate_client, AsyncClient

from config.settings import settings
from core.domain.models import ChangeEvent
from core.services.change_feed import ChangeFeed

logger = logging.getLogger(__name__)


class SupabaseRealtimeBridge:
    """Subscribes to table changes and dispatches them to the in-process feed"""

    def __init__(self, feed: ChangeFeed, tables: List[str], schema: Optional[str] = None):
        self.feed = feed
        self.tables = tables
        self.schema = schema or settings.db_schema
        self._client: Optional[AsyncClient] = None
        self._channels = []
        self._pending: Set[asyncio.Task] = set()

    def _make_callback(self, table: str):
        def callback(payload: dict):
            try:
                event = ChangeEvent.from_payload(payload, table=table)
            except ModelValidationError as e:
                logger.warning(f"[REALTIME] Ignoring malformed payload on {table}: {e}")
                return
            # Realtime invokes callbacks on the event loop; dispatch without blocking it
            task = asyncio.create_task(self.feed.dispatch(event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        return callback

    async def start(self):
        self._client = await acreate_client(settings.supabase_url, settings.supabase_api_key)
        for table in self.tables:
            channel = self._client.channel(f"{table}-changes")
            channel.on_postgres_changes(
                "*",
                schema=self.schema,
                table=table,
                callback=self._make_callback(table),
            )
            await channel.subscribe()
            self._channels.append(channel)
            logger.info(f"[REALTIME] Subscribed to {self.schema}.{table}")

    async def stop(self):
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if self._client is None:
            return
        for channel in self._channels:
            try:
                await self._client.remove_channel(channel)
            except Exception as e:
                logger.warning(f"[REALTIME] Failed to remove channel: {e}")
        self._channels = []
        self._client = None
