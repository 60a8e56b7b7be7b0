"""Tests for the aiohttp scan dashboard."""

from datetime import datetime, timezone

import pytest
from aiohttp import test_utils

from conftest import FakeScanRepo, valid_result
from adapters.telegram.web.dashboard import create_dashboard_app
from core.domain.models import ChangeEvent, ChangeType, ScanHistoryEntry
from core.services.change_feed import ChangeFeed
from core.services.scan_log import ScanLogService

TOKEN = "s3cret"


@pytest.fixture
def change_feed() -> ChangeFeed:
    return ChangeFeed()


@pytest.fixture
async def client(scan_log: ScanLogService, change_feed: ChangeFeed):
    app = create_dashboard_app(scan_log, TOKEN, change_feed)
    async with test_utils.TestClient(test_utils.TestServer(app)) as client:
        yield client


async def test_health_needs_no_token(client) -> None:
    response = await client.get("/health")
    assert response.status == 200
    assert await response.json() == {"status": "ok"}


@pytest.mark.parametrize("path", ["/stats", "/history", "/stats?token=wrong"])
async def test_unauthorized(client, path: str) -> None:
    response = await client.get(path)
    assert response.status == 401


async def test_empty_token_never_authorizes(scan_log: ScanLogService) -> None:
    app = create_dashboard_app(scan_log, "")
    async with test_utils.TestClient(test_utils.TestServer(app)) as client:
        response = await client.get("/stats?token=")
        assert response.status == 401


async def test_stats_page(client, scan_repo: FakeScanRepo) -> None:
    scan_repo.total = 42
    scan_repo.today = 5
    scan_repo.names = ["Budi", "Sari"]

    response = await client.get(f"/stats?token={TOKEN}")

    assert response.status == 200
    body = await response.text()
    assert "42" in body
    assert "Unique customers" in body


async def test_history_page_escapes_names(client, scan_repo: FakeScanRepo) -> None:
    scan_repo.history = [
        ScanHistoryEntry(
            id="scan-1",
            ticket_order_id="TKT-001",
            customer_name="<b>Budi</b>",
            match_label="Persija vs Persib",
            scanned_at=datetime(2024, 5, 1, 18, 30, tzinfo=timezone.utc),
        )
    ]

    response = await client.get(f"/history?token={TOKEN}")

    body = await response.text()
    assert "&lt;b&gt;Budi&lt;/b&gt;" in body
    assert "Persija vs Persib" in body


async def test_cached_snapshot_until_refresh_requested(client, scan_repo: FakeScanRepo) -> None:
    await client.get(f"/history?token={TOKEN}")
    await client.get(f"/history?token={TOKEN}")
    assert scan_repo.history_calls == 1

    await client.get(f"/history?token={TOKEN}&refresh=1")
    assert scan_repo.history_calls == 2


async def test_change_event_marks_snapshot_stale(
    client, change_feed: ChangeFeed, scan_log: ScanLogService, scan_repo: FakeScanRepo
) -> None:
    await client.get(f"/history?token={TOKEN}")
    assert scan_repo.history_calls == 1

    delivered = await change_feed.dispatch(
        ChangeEvent(type=ChangeType.INSERT, table="ticket_scans", new={"id": "scan-1"})
    )

    assert delivered == 1
    assert scan_log.refresh_count == 0
    assert scan_log.history_refreshed_at is None
    assert scan_repo.history_calls == 1

    await client.get(f"/history?token={TOKEN}")
    assert scan_repo.history_calls == 2


async def test_local_scan_echo_refreshes_once(
    client, change_feed: ChangeFeed, scan_log: ScanLogService, scan_repo: FakeScanRepo, session
) -> None:
    """A scan made here and its realtime echo cost a single re-fetch."""
    scan_repo.results["TKT-001"] = valid_result()

    await session.submit_manual("TKT-001")
    await change_feed.dispatch(
        ChangeEvent(type=ChangeType.INSERT, table="ticket_scans", new={"ticket_order_id": "TKT-001"})
    )

    assert scan_log.refresh_count == 1
    assert scan_repo.history_calls == 1
