"""Shared fakes and fixtures for the gate scanner tests."""

import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from core.domain.models import ScannerUser, ScanRequest, ScanResult, ScanHistoryEntry, TicketInfo
from core.interfaces.camera import IBarcodeSource
from core.interfaces.repositories import ITicketScanRepository
from core.services.debouncer import ScanDebouncer
from core.services.scan_log import ScanLogService
from core.services.scan_session import ScanSessionController


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeScanRepo(ITicketScanRepository):
    """In-memory validator and scan log that records every call."""

    def __init__(self):
        self.results: Dict[str, ScanResult] = {}
        self.requests: List[ScanRequest] = []
        self.error: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None
        self.history: List[ScanHistoryEntry] = []
        self.total = 0
        self.today = 0
        self.names: List[str] = []
        self.history_calls = 0
        self.history_error: Optional[Exception] = None

    async def validate_and_record(self, request: ScanRequest) -> ScanResult:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.results.get(
            request.ticket_identifier,
            ScanResult(success=False, message="Ticket tidak ditemukan"),
        )

    async def get_history(self, limit: int) -> List[ScanHistoryEntry]:
        self.history_calls += 1
        if self.history_error is not None:
            raise self.history_error
        return self.history[:limit]

    async def count_scans(self, since=None) -> int:
        return self.today if since is not None else self.total

    async def get_customer_names(self) -> List[str]:
        return list(self.names)


class FakeBarcodeSource(IBarcodeSource):
    """Camera stand-in: payloads are pushed with feed(), stop() ends the stream."""

    def __init__(self, supported: bool = True, start_error: Optional[Exception] = None):
        self._supported = supported
        self.start_error = start_error
        self.tracks = 0
        self.start_calls = 0
        self.stop_calls = 0
        self._queue: Optional[asyncio.Queue] = None

    @property
    def supported(self) -> bool:
        return self._supported

    @property
    def active_tracks(self) -> int:
        return self.tracks

    async def start(self):
        self.start_calls += 1
        if self.start_error is not None:
            raise self.start_error
        self.tracks = 1
        self._queue = asyncio.Queue()
        return self._stream(self._queue)

    async def _stream(self, queue: asyncio.Queue):
        while True:
            payload = await queue.get()
            if payload is None:
                return
            yield payload

    def feed(self, payload: str):
        self._queue.put_nowait(payload)

    async def stop(self):
        self.stop_calls += 1
        self.tracks = 0
        if self._queue is not None:
            self._queue.put_nowait(None)


def valid_result(name: str = "Budi") -> ScanResult:
    return ScanResult(
        success=True,
        message="Tiket valid",
        ticket_info=TicketInfo(
            customer_name=name,
            ticket_type="VIP",
            match_info="Persija vs Persib",
            quantity=2,
            scanned_at=datetime(2024, 5, 1, 18, 30, tzinfo=timezone.utc),
        ),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scan_repo() -> FakeScanRepo:
    return FakeScanRepo()


@pytest.fixture
def scan_log(scan_repo: FakeScanRepo) -> ScanLogService:
    return ScanLogService(scan_repo=scan_repo)


@pytest.fixture
def camera() -> FakeBarcodeSource:
    return FakeBarcodeSource()


@pytest.fixture
def operator() -> ScannerUser:
    return ScannerUser(id="op-1", username="gate1", full_name="Gate One")


@pytest.fixture
def session(scan_repo, scan_log, camera, operator, clock) -> ScanSessionController:
    return ScanSessionController(
        scan_repo=scan_repo,
        scan_log=scan_log,
        operator=operator,
        barcode_source=camera,
        debouncer=ScanDebouncer(cooldown=5.0, reset_delay=0.01, clock=clock),
    )
