"""
Scan session controller - one operator's admission workflow.

Mediates between manual entry and camera decoding, sends every accepted
identifier to the remote ticket validator, and keeps the displayed result and
the scan log snapshot in sync.

    IDLE --submit/accepted decode--> AWAITING_VALIDATION --response--> RESULT_SHOWN
    RESULT_SHOWN --next submit--> AWAITING_VALIDATION
    AWAITING_VALIDATION --validator raised--> IDLE
"""

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Optional

from core.domain.errors import (
    CameraError,
    CameraErrorKind,
    RemoteCallError,
    ScanInProgressError,
    ScannerError,
    ValidationError,
)
from core.domain.models import EntryMode, ScannerUser, ScanRequest, ScanResult, SessionState
from core.interfaces.camera import IBarcodeSource
from core.interfaces.repositories import ITicketScanRepository
from core.services.debouncer import ScanDebouncer
from core.services.scan_log import ScanLogService

logger = logging.getLogger(__name__)

ResultListener = Callable[[ScanResult], Awaitable[None]]
ErrorListener = Callable[[ScannerError], Awaitable[None]]


class ScanSessionController:
    """Service for one operator's scanning session"""

    def __init__(
        self,
        scan_repo: ITicketScanRepository,
        scan_log: ScanLogService,
        operator: Optional[ScannerUser] = None,
        barcode_source: Optional[IBarcodeSource] = None,
        debouncer: Optional[ScanDebouncer] = None,
        on_result: Optional[ResultListener] = None,
        on_error: Optional[ErrorListener] = None,
    ):
        self.scan_repo = scan_repo
        self.scan_log = scan_log
        self.operator = operator
        self.barcode_source = barcode_source
        self.debouncer = debouncer or ScanDebouncer()
        self.on_result = on_result
        self.on_error = on_error

        self.state = SessionState.IDLE
        self.mode = EntryMode.MANUAL
        self.last_result: Optional[ScanResult] = None
        self.last_error: Optional[ScannerError] = None
        self._camera_task: Optional[asyncio.Task] = None
        # The camera source may be shared by the station; only the session
        # that acquired it releases it
        self._owns_camera = False

    async def __aenter__(self) -> "ScanSessionController":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    # === STATE ===

    @property
    def camera_available(self) -> bool:
        return self.barcode_source is not None and self.barcode_source.supported

    @property
    def camera_active(self) -> bool:
        """True while this session holds the camera"""
        return self._owns_camera

    @property
    def is_busy(self) -> bool:
        return self.state == SessionState.AWAITING_VALIDATION

    @property
    def is_ready(self) -> bool:
        """Ready for the next submit; a shown result does not block it"""
        return self.state in (SessionState.IDLE, SessionState.RESULT_SHOWN)

    @property
    def operator_id(self) -> Optional[str]:
        return self.operator.id if self.operator else None

    # === ENTRY POINTS ===

    async def submit_manual(self, ticket_identifier: str) -> Optional[ScanResult]:
        """
        Validate a typed (or photographed) ticket identifier.
        Returns the validator's result, or None when the remote call failed.
        """
        ticket_identifier = (ticket_identifier or "").strip()
        if not ticket_identifier:
            raise ValidationError("empty identifier")
        if self.is_busy:
            raise ScanInProgressError("a scan is already being validated")
        return await self._validate(ticket_identifier)

    async def handle_decoded(self, payload: str) -> Optional[ScanResult]:
        """
        Route a decoded camera payload through the debouncer.
        Rejected payloads are dropped, never queued.
        """
        if self.is_busy:
            logger.debug(f"[SCAN_SESSION] Dropped decode '{payload}' while awaiting validation")
            return None
        if not self.debouncer.try_accept(payload):
            return None

        logger.info(f"[SCAN_SESSION] Barcode detected: '{payload.strip()}'")
        await self._halt_camera()
        try:
            return await self._validate(payload.strip())
        finally:
            self.debouncer.release_later()

    async def _validate(self, ticket_identifier: str) -> Optional[ScanResult]:
        self.state = SessionState.AWAITING_VALIDATION
        self.last_result = None
        self.last_error = None

        request = ScanRequest(ticket_identifier=ticket_identifier, operator_id=self.operator_id)
        try:
            result = await self.scan_repo.validate_and_record(request)
        except Exception as e:
            error = e if isinstance(e, ScannerError) else RemoteCallError(str(e))
            logger.error(f"[SCAN_SESSION] Validation of '{ticket_identifier}' failed: {e}")
            self.state = SessionState.IDLE
            self.last_error = error
            await self._notify_error(error)
            return None

        self.last_result = result
        self.state = SessionState.RESULT_SHOWN

        if result.success:
            logger.info(f"[SCAN_SESSION] Ticket '{ticket_identifier}' valid: {result.message}")
            await self.scan_log.refresh()
        else:
            logger.warning(f"[SCAN_SESSION] Ticket '{ticket_identifier}' invalid: {result.message}")

        await self._notify_result(result)
        return result

    # === MODES & CAMERA ===

    async def switch_mode(self, mode: EntryMode):
        """Change entry mode; leaving camera mode always releases the camera first"""
        if mode == self.mode:
            return
        if mode == EntryMode.CAMERA and not self.camera_available:
            raise CameraError(CameraErrorKind.UNSUPPORTED)
        if self.mode == EntryMode.CAMERA:
            await self.stop_camera_session()
        self.mode = mode
        logger.info(f"[SCAN_SESSION] Entry mode -> {mode.value}")

    async def start_camera_session(self):
        """Acquire the camera and start feeding decoded payloads into handle_decoded"""
        if not self.camera_available:
            raise CameraError(CameraErrorKind.UNSUPPORTED)
        if self.camera_active:
            return
        if self.is_busy:
            raise ScanInProgressError("a scan is still being validated")
        # A previous stream may still be winding down after a decode
        await self._drain_camera_task()

        self.mode = EntryMode.CAMERA
        try:
            stream = await self.barcode_source.start()
        except CameraError:
            self.mode = EntryMode.MANUAL
            raise
        except Exception as e:
            self.mode = EntryMode.MANUAL
            raise CameraError(CameraErrorKind.UNKNOWN, str(e)) from e

        self._owns_camera = True
        self._camera_task = asyncio.create_task(self._consume(stream))
        logger.info(f"[SCAN_SESSION] Camera session started for {self.operator_id}")

    async def stop_camera_session(self):
        """
        Release the camera. An in-flight validation is left to finish and
        still updates the result and the scan log.
        """
        await self._halt_camera()
        if not self.is_busy:
            await self._drain_camera_task()

    async def _drain_camera_task(self):
        task = self._camera_task
        if task is None or task is asyncio.current_task() or task.done():
            return
        # Stream ends on its own once the source is stopped
        try:
            await asyncio.wait_for(asyncio.shield(task), timeout=2.0)
        except asyncio.TimeoutError:
            task.cancel()
        logger.info(f"[SCAN_SESSION] Camera session stopped for {self.operator_id}")

    async def _halt_camera(self):
        if not self._owns_camera:
            return
        self._owns_camera = False
        await self.barcode_source.stop()

    async def _consume(self, stream: AsyncIterator[str]):
        try:
            async for payload in stream:
                await self.handle_decoded(payload)
        except Exception as e:
            logger.error(f"[SCAN_SESSION] Camera stream failed: {e}", exc_info=True)
            error = e if isinstance(e, CameraError) else CameraError(CameraErrorKind.UNKNOWN, str(e))
            self.last_error = error
            await self._notify_error(error)
        finally:
            if self._camera_task is asyncio.current_task():
                await self._halt_camera()

    async def close(self):
        """Session teardown: the camera is never left acquired"""
        await self.stop_camera_session()
        if self._camera_task and not self._camera_task.done() and not self.is_busy:
            self._camera_task.cancel()
        self.debouncer.reset()
        self.mode = EntryMode.MANUAL

    # === LISTENERS ===

    async def _notify_result(self, result: ScanResult):
        if self.on_result is None:
            return
        try:
            await self.on_result(result)
        except Exception as e:
            logger.error(f"[SCAN_SESSION] Result listener failed: {e}", exc_info=True)

    async def _notify_error(self, error: ScannerError):
        if self.on_error is None:
            return
        try:
            await self.on_error(error)
        except Exception as e:
            logger.error(f"[SCAN_SESSION] Error listener failed: {e}", exc_info=True)
