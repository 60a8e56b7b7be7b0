"""
Session registry - explicit container for logged-in operators' scan sessions.
Built once at the composition root; a session lives from login to logout.
"""

import logging
from typing import Callable, Dict, Optional

from core.domain.models import ScannerUser
from core.services.scan_session import ScanSessionController

logger = logging.getLogger(__name__)

SessionFactory = Callable[[ScannerUser, int], ScanSessionController]


class SessionRegistry:
    """Maps a chat (operator device) to its scan session"""

    def __init__(self, factory: SessionFactory):
        self._factory = factory
        self._sessions: Dict[int, ScanSessionController] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, chat_id: int) -> Optional[ScanSessionController]:
        return self._sessions.get(chat_id)

    async def open(self, chat_id: int, operator: ScannerUser) -> ScanSessionController:
        """Start a fresh session, closing any previous one for this chat"""
        await self.close(chat_id)
        session = self._factory(operator, chat_id)
        self._sessions[chat_id] = session
        logger.info(f"[SESSIONS] Operator '{operator.username}' logged in from chat {chat_id}")
        return session

    async def close(self, chat_id: int) -> bool:
        session = self._sessions.pop(chat_id, None)
        if session is None:
            return False
        await session.close()
        logger.info(f"[SESSIONS] Session for chat {chat_id} closed")
        return True

    async def close_all(self):
        for chat_id in list(self._sessions):
            await self.close(chat_id)
