"""
Supabase implementation of the ticket scan repository.
Wraps the scan_ticket RPC (validate-and-record) and the ticket_scans log.
"""

import logging
from datetime import datetime
from typing import Optional, List

import httpx
from postgrest.exceptions import APIError
from pydantic import ValidationError as ModelValidationError

from core.domain.constants import (
    SCAN_TICKET_RPC,
    TICKET_SCANS_TABLE,
    HISTORY_SELECT,
    CUSTOMER_NAMES_SELECT,
)
from core.domain.errors import RemoteCallError
from core.domain.models import ScanRequest, ScanResult, ScanHistoryEntry, ScanStatus
from core.interfaces.repositories import ITicketScanRepository
from infrastructure.database.supabase_client import get_supabase, run_sync

logger = logging.getLogger(__name__)


def _match_label(match: Optional[dict]) -> str:
    if not match:
        return ""
    return f"{match.get('home_team', '')} vs {match.get('away_team', '')}"


def to_scan_result(rows: Optional[list]) -> ScanResult:
    """Validate the RPC's single-element answer"""
    if not rows:
        raise RemoteCallError("no response from validator")
    try:
        return ScanResult.model_validate(rows[0])
    except ModelValidationError as e:
        raise RemoteCallError(f"malformed validator response: {e.error_count()} error(s)") from e


def to_history_entry(row: dict) -> ScanHistoryEntry:
    """Flatten a ticket_scans row joined with order, ticket and match"""
    order = row.get("ticket_orders") or {}
    ticket = order.get("tickets") or {}
    return ScanHistoryEntry(
        id=row["id"],
        ticket_order_id=row["ticket_order_id"],
        customer_name=order.get("customer_name") or "",
        ticket_type=ticket.get("ticket_type") or "",
        match_label=_match_label(ticket.get("matches")),
        quantity=order.get("quantity") or 1,
        scanned_at=row["scanned_at"],
        status=ScanStatus.SUCCESS,
    )


class SupabaseTicketScanRepository(ITicketScanRepository):
    """Supabase implementation of ticket scan repository"""

    @run_sync
    def _scan_ticket_sync(self, params: dict) -> list:
        response = get_supabase().rpc(SCAN_TICKET_RPC, params).execute()
        return response.data or []

    async def validate_and_record(self, request: ScanRequest) -> ScanResult:
        try:
            rows = await self._scan_ticket_sync(request.to_rpc_params())
        except APIError as e:
            raise RemoteCallError(e.message or "validator rejected the call") from e
        except httpx.HTTPError as e:
            raise RemoteCallError(f"network error: {e}") from e
        return to_scan_result(rows)

    @run_sync
    def _get_history_sync(self, limit: int) -> List[dict]:
        response = get_supabase().table(TICKET_SCANS_TABLE)\
            .select(HISTORY_SELECT)\
            .order("scanned_at", desc=True)\
            .limit(limit)\
            .execute()
        return response.data or []

    async def get_history(self, limit: int) -> List[ScanHistoryEntry]:
        rows = await self._get_history_sync(limit)
        entries = []
        for row in rows:
            try:
                entries.append(to_history_entry(row))
            except (KeyError, ModelValidationError) as e:
                logger.warning(f"[SCAN_REPO] Skipping malformed scan row {row.get('id')}: {e}")
        return entries

    @run_sync
    def _count_sync(self, since: Optional[datetime]) -> int:
        query = get_supabase().table(TICKET_SCANS_TABLE).select("*", count="exact", head=True)
        if since is not None:
            query = query.gte("scanned_at", since.isoformat())
        response = query.execute()
        return response.count or 0

    async def count_scans(self, since: Optional[datetime] = None) -> int:
        return await self._count_sync(since)

    @run_sync
    def _get_customer_names_sync(self) -> List[str]:
        response = get_supabase().table(TICKET_SCANS_TABLE).select(CUSTOMER_NAMES_SELECT).execute()
        return [
            (row.get("ticket_orders") or {}).get("customer_name") or ""
            for row in (response.data or [])
        ]

    async def get_customer_names(self) -> List[str]:
        return await self._get_customer_names_sync()
