"""
Error taxonomy for the admission workflow.
Every error is handled where it occurs and turned into operator text.
"""

from enum import Enum
from typing import Optional


class ScannerError(Exception):
    """Base class for failures an operator should see as a message"""

    message_key = "error_generic"


class ValidationError(ScannerError):
    """Input rejected before any remote call"""

    message_key = "error_empty_identifier"


class ScanInProgressError(ScannerError):
    """A validation round-trip is already in flight for this session"""

    message_key = "error_scan_in_progress"


class RemoteCallError(ScannerError):
    """Backend or network failure"""

    message_key = "error_remote"


class AuthenticationError(ScannerError):
    message_key = "error_login_failed"


class CameraErrorKind(str, Enum):
    UNSUPPORTED = "unsupported"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    BUSY = "busy"
    UNKNOWN = "unknown"


class CameraError(ScannerError):
    """Device or capability failure; the session falls back to manual entry"""

    def __init__(self, kind: CameraErrorKind, detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        super().__init__(detail or kind.value)

    @property
    def message_key(self) -> str:
        return f"camera_{self.kind.value}"
