"""Unit tests for scanner account authentication."""

from unittest.mock import AsyncMock

import pytest

from core.domain.errors import AuthenticationError
from infrastructure.database.scanner_user_repository import SupabaseScannerUserRepository


async def test_valid_credentials_return_operator() -> None:
    repo = SupabaseScannerUserRepository()
    repo._authenticate_sync = AsyncMock(
        return_value={"id": 7, "username": "gate1", "full_name": "Gate One", "is_active": True}
    )

    operator = await repo.authenticate("gate1", "secret")

    repo._authenticate_sync.assert_awaited_once_with("gate1", "secret")
    assert operator.id == "7"
    assert operator.display_name == "Gate One"


async def test_inactive_account_is_still_returned() -> None:
    repo = SupabaseScannerUserRepository()
    repo._authenticate_sync = AsyncMock(
        return_value={"id": "u-2", "username": "gate2", "is_active": False}
    )

    operator = await repo.authenticate("gate2", "secret")

    assert operator.is_active is False


async def test_wrong_credentials_raise() -> None:
    repo = SupabaseScannerUserRepository()
    repo._authenticate_sync = AsyncMock(return_value=None)

    with pytest.raises(AuthenticationError) as exc_info:
        await repo.authenticate("gate1", "wrong")

    assert exc_info.value.message_key == "error_login_failed"
