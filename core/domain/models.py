"""
Domain models - the core of the admission workflow.
These models are transport-agnostic (work with Telegram, the web dashboard, etc.)
and are validated at the backend boundary before entering application state.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from enum import Enum


# === ENUMS ===

class SessionState(str, Enum):
    IDLE = "idle"
    AWAITING_VALIDATION = "awaiting_validation"
    RESULT_SHOWN = "result_shown"


class EntryMode(str, Enum):
    MANUAL = "manual"
    CAMERA = "camera"


class ScanStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


# === OPERATOR ===

class ScannerUser(BaseModel):
    """Gate staff account performing admission checks"""
    id: str
    username: str
    full_name: Optional[str] = None
    is_active: bool = True

    @property
    def display_name(self) -> str:
        return self.full_name or self.username


# === SCANNING ===

class ScanRequest(BaseModel):
    """One scan attempt - never persisted locally"""
    ticket_identifier: str
    operator_id: Optional[str] = None

    def to_rpc_params(self) -> Dict[str, Any]:
        return {
            "_ticket_order_id": self.ticket_identifier,
            "_scanner_user_id": self.operator_id,
        }


class TicketInfo(BaseModel):
    customer_name: str = ""
    ticket_type: str = ""
    match_label: str = Field(default="", alias="match_info")
    match_date: Optional[str] = None
    quantity: int = 1
    scanned_at: Optional[datetime] = None

    model_config = {"populate_by_name": True}


class ScanResult(BaseModel):
    """Answer of the remote ticket validator. Advisory only."""
    success: bool
    message: str = ""
    ticket_info: Optional[TicketInfo] = None

    @field_validator("ticket_info", mode="before")
    @classmethod
    def empty_info_is_none(cls, v):
        # The RPC returns an empty json object for unknown tickets
        if v == {} or v == "":
            return None
        return v

    @property
    def badge(self) -> str:
        return "VALID" if self.success else "INVALID"


class ScanHistoryEntry(BaseModel):
    id: str
    ticket_order_id: str
    customer_name: str = ""
    ticket_type: str = ""
    match_label: str = ""
    quantity: int = 1
    scanned_at: datetime
    status: ScanStatus = ScanStatus.SUCCESS


class ScanStats(BaseModel):
    """Cached snapshot - the backend holds the authoritative counters"""
    total_scans: int = 0
    successful_scans: int = 0
    today_scans: int = 0
    unique_customers: int = 0
    refreshed_at: Optional[datetime] = None


# === CAMERA ===

class CameraDevice(BaseModel):
    index: int
    label: str = ""


# === REALTIME ===

class ChangeEvent(BaseModel):
    """Row-level change delivered by the backend change feed"""
    type: ChangeType
    table: str
    new: Dict[str, Any] = Field(default_factory=dict)
    old: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], table: Optional[str] = None) -> "ChangeEvent":
        """Build from a realtime payload (both the nested and the flat shape)"""
        data = payload.get("data", payload)
        return cls(
            type=data.get("type") or data.get("eventType"),
            table=data.get("table") or table or "",
            new=data.get("record") or data.get("new") or {},
            old=data.get("old_record") or data.get("old") or {},
        )
