"""Unit tests for the scan debouncer accept policy."""

import asyncio

import pytest

from conftest import FakeClock
from core.services.debouncer import ScanDebouncer


@pytest.fixture
def debouncer(clock: FakeClock) -> ScanDebouncer:
    return ScanDebouncer(cooldown=5.0, reset_delay=0.01, clock=clock)


class TestShouldAccept:
    """Tests for the pure accept check."""

    def test_first_payload_accepted(self, debouncer: ScanDebouncer) -> None:
        assert debouncer.should_accept("TKT-001") is True

    def test_check_records_nothing(self, debouncer: ScanDebouncer) -> None:
        debouncer.should_accept("TKT-001")
        assert debouncer.last_payload is None
        assert debouncer.processing is False

    def test_blank_payload_rejected(self, debouncer: ScanDebouncer) -> None:
        assert debouncer.should_accept("   ") is False

    def test_rejected_while_processing(self, debouncer: ScanDebouncer, clock: FakeClock) -> None:
        debouncer.try_accept("TKT-001")
        clock.advance(60)
        assert debouncer.should_accept("TKT-002") is False

    def test_rejected_within_cooldown(self, debouncer: ScanDebouncer, clock: FakeClock) -> None:
        debouncer.try_accept("TKT-001")
        debouncer.release()
        clock.advance(4.9)
        assert debouncer.should_accept("TKT-002") is False

    def test_accepted_after_cooldown(self, debouncer: ScanDebouncer, clock: FakeClock) -> None:
        debouncer.try_accept("TKT-001")
        debouncer.release()
        clock.advance(5.0)
        assert debouncer.should_accept("TKT-002") is True

    def test_same_payload_rejected_even_after_cooldown(
        self, debouncer: ScanDebouncer, clock: FakeClock
    ) -> None:
        debouncer.try_accept("TKT-001")
        debouncer.release()
        clock.advance(600)
        assert debouncer.should_accept("TKT-001") is False
        assert debouncer.should_accept("  TKT-001 ") is False


class TestTryAccept:
    """Tests for accepting and recording payloads."""

    def test_accept_marks_processing(self, debouncer: ScanDebouncer, clock: FakeClock) -> None:
        assert debouncer.try_accept(" TKT-001 ") is True
        assert debouncer.processing is True
        assert debouncer.last_payload == "TKT-001"
        assert debouncer.last_accepted_at == clock.now

    def test_repeated_payload_accepted_once(self, debouncer: ScanDebouncer, clock: FakeClock) -> None:
        accepted = []
        for _ in range(10):
            accepted.append(debouncer.try_accept("TKT-001"))
            clock.advance(0.1)
        assert accepted.count(True) == 1

    def test_explicit_now_overrides_clock(self, debouncer: ScanDebouncer) -> None:
        assert debouncer.try_accept("TKT-001", now=0.0) is True
        debouncer.release()
        assert debouncer.try_accept("TKT-002", now=2.0) is False
        assert debouncer.try_accept("TKT-002", now=5.5) is True


class TestRelease:
    """Tests for the delayed processing reset."""

    async def test_release_later_clears_processing(self, debouncer: ScanDebouncer) -> None:
        debouncer.try_accept("TKT-001")
        task = debouncer.release_later()
        assert debouncer.processing is True
        await task
        assert debouncer.processing is False

    async def test_release_later_replaces_pending_timer(self, debouncer: ScanDebouncer) -> None:
        debouncer.try_accept("TKT-001")
        first = debouncer.release_later()
        second = debouncer.release_later()
        await second
        assert first.cancelled() or first.done()
        assert debouncer.pending_release is second
        assert debouncer.processing is False

    async def test_reset_forgets_everything(self, debouncer: ScanDebouncer) -> None:
        debouncer.try_accept("TKT-001")
        debouncer.release_later()
        debouncer.reset()
        await asyncio.sleep(0)
        assert debouncer.processing is False
        assert debouncer.last_payload is None
        assert debouncer.last_accepted_at is None
        assert debouncer.pending_release is None
        assert debouncer.should_accept("TKT-001") is True
