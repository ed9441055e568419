"""Unit tests for CompletionRepository using MagicMock AsyncSession."""

from datetime import UTC, date, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from src.hh_completion.infrastructure.persistence import CompletionRepository

DAY = date(2026, 3, 10)
AT = datetime(2026, 3, 10, 16, 30, tzinfo=UTC)


def _completion_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.id = kwargs.get("id", "c-1")
    row.task_id = kwargs.get("task_id", "make-bed")
    row.user_id = kwargs.get("user_id", "kid-1")
    row.completed_at = kwargs.get("completed_at", AT)
    row.completion_date = kwargs.get("completion_date", DAY)
    return row


def _result(fetchone: Any = None, fetchall: list | None = None) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = fetchone
    result.fetchall.return_value = fetchall or []
    return result


def _db(*results: MagicMock) -> MagicMock:
    db = MagicMock()
    db.execute = AsyncMock(side_effect=list(results))
    return db


def _sql(db: MagicMock, call: int = 0) -> str:
    return str(db.execute.await_args_list[call].args[0])


class TestInsertIfAbsent:
    async def test_returned_row_is_mapped(self) -> None:
        db = _db(_result(_completion_row()))
        completion = await CompletionRepository().insert_if_absent(
            db, "c-1", "make-bed", "kid-1", AT, DAY
        )
        assert completion is not None
        assert completion.id == "c-1"
        assert completion.completion_date == DAY
        params = db.execute.await_args.args[1]
        assert params == {
            "id": "c-1",
            "task_id": "make-bed",
            "user_id": "kid-1",
            "completed_at": AT,
            "completion_date": DAY,
        }

    async def test_conflict_returns_none(self) -> None:
        db = _db(_result(None))
        completion = await CompletionRepository().insert_if_absent(
            db, "c-2", "make-bed", "kid-1", AT, DAY
        )
        assert completion is None
        sql = _sql(db)
        assert "ON CONFLICT (task_id, user_id, completion_date) DO NOTHING" in sql
        assert "RETURNING" in sql


class TestReads:
    async def test_get_by_id_plain_select(self) -> None:
        db = _db(_result(_completion_row()))
        completion = await CompletionRepository().get_by_id(db, "c-1")
        assert completion.task_id == "make-bed"
        assert "FOR UPDATE" not in _sql(db)

    async def test_get_by_id_missing(self) -> None:
        db = _db(_result(None))
        assert await CompletionRepository().get_by_id(db, "nope") is None

    async def test_get_for_update_locks_row(self) -> None:
        db = _db(_result(_completion_row()))
        completion = await CompletionRepository().get_for_update(db, "c-1")
        assert completion.user_id == "kid-1"
        assert "FOR UPDATE" in _sql(db)

    async def test_get_for_update_missing(self) -> None:
        db = _db(_result(None))
        assert await CompletionRepository().get_for_update(db, "gone") is None

    async def test_list_for_user_on(self) -> None:
        db = _db(
            _result(
                fetchall=[_completion_row(id="c-2"), _completion_row(id="c-1", task_id="dishes")]
            )
        )
        rows = await CompletionRepository().list_for_user_on(db, "kid-1", DAY)
        assert [c.id for c in rows] == ["c-2", "c-1"]
        assert db.execute.await_args.args[1] == {"user_id": "kid-1", "day": DAY}
        assert "ORDER BY completed_at DESC" in _sql(db)

    async def test_completed_task_ids_is_a_set(self) -> None:
        first, second = MagicMock(), MagicMock()
        first.task_id, second.task_id = "make-bed", "dishes"
        db = _db(_result(fetchall=[first, second]))
        ids = await CompletionRepository().completed_task_ids(db, "kid-1", DAY)
        assert ids == {"make-bed", "dishes"}


class TestDelete:
    async def test_delete_by_id(self) -> None:
        db = _db(_result())
        await CompletionRepository().delete(db, "c-1")
        assert db.execute.await_args.args[1] == {"id": "c-1"}
        assert _sql(db).startswith("DELETE FROM completions")
