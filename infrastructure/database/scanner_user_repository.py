"""
Supabase implementation of the scanner user repository.
Password checking happens inside the authenticate_scanner_user RPC.
"""

import logging
from typing import Optional

from core.domain.constants import AUTHENTICATE_SCANNER_RPC
from core.domain.errors import AuthenticationError
from core.domain.models import ScannerUser
from core.interfaces.repositories import IScannerUserRepository
from infrastructure.database.supabase_client import get_supabase, run_sync

logger = logging.getLogger(__name__)


class SupabaseScannerUserRepository(IScannerUserRepository):
    """Supabase implementation of scanner user repository"""

    def _to_model(self, data: dict) -> ScannerUser:
        """Convert RPC row to ScannerUser model"""
        return ScannerUser(
            id=str(data["id"]),
            username=data["username"],
            full_name=data.get("full_name"),
            is_active=bool(data.get("is_active", True)),
        )

    @run_sync
    def _authenticate_sync(self, username: str, password: str) -> Optional[dict]:
        response = get_supabase().rpc(
            AUTHENTICATE_SCANNER_RPC,
            {"_username": username, "_password": password},
        ).execute()
        return response.data[0] if response.data else None

    async def authenticate(self, username: str, password: str) -> ScannerUser:
        data = await self._authenticate_sync(username, password)
        if not data:
            logger.info(f"[SCANNER_USERS] Login failed for '{username}'")
            raise AuthenticationError(f"invalid credentials for '{username}'")
        return self._to_model(data)
