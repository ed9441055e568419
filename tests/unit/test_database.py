"""Tests for hh_common.database helpers."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.hh_common.database import ping_database


def _engine(conn: MagicMock) -> MagicMock:
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=conn)
    cm.__aexit__ = AsyncMock(return_value=False)
    engine = MagicMock()
    engine.connect.return_value = cm
    return engine


class TestPingDatabase:
    async def test_runs_select_one(self) -> None:
        conn = MagicMock()
        conn.execute = AsyncMock()
        await ping_database(_engine(conn))
        assert str(conn.execute.await_args.args[0]) == "SELECT 1"

    async def test_driver_error_propagates(self) -> None:
        conn = MagicMock()
        conn.execute = AsyncMock(side_effect=ConnectionRefusedError("down"))
        with pytest.raises(ConnectionRefusedError):
            await ping_database(_engine(conn))
