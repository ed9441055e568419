"""Integration tests for the completion / streak / balance flow.

Uses the session-scoped client fixture from tests/integration/conftest.py.
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio(loop_scope="session")


def _as(user_id: str) -> dict[str, str]:
    return {"X-User-Id": user_id}


class TestCompletionFlow:
    async def test_complete_credits_balance(
        self, client: AsyncClient, household: dict[str, str]
    ) -> None:
        headers = _as(household["user"])
        resp = await client.post(f"/api/v1/completions/{household['bed']}", headers=headers)
        assert resp.status_code == 201
        assert resp.json()["data"]["balance"]["current_balance_display"] == "$0.50"

        history = await client.get("/api/v1/balance/transactions", headers=headers)
        [item] = history.json()["data"]["items"]
        assert item["kind"] == "earned"
        assert item["description"] == "Completed: Make bed"

    async def test_duplicate_is_conflict(
        self, client: AsyncClient, household: dict[str, str]
    ) -> None:
        headers = _as(household["user"])
        await client.post(f"/api/v1/completions/{household['bed']}", headers=headers)
        dup = await client.post(f"/api/v1/completions/{household['bed']}", headers=headers)
        assert dup.status_code == 409

        balance = await client.get("/api/v1/balance", headers=headers)
        assert balance.json()["data"]["current_balance_cents"] == 50

    async def test_undo_round_trip(self, client: AsyncClient, household: dict[str, str]) -> None:
        headers = _as(household["user"])
        done = await client.post(f"/api/v1/completions/{household['bed']}", headers=headers)
        completion_id = done.json()["data"]["completion"]["id"]

        undo = await client.post(f"/api/v1/completions/{completion_id}/undo", headers=headers)
        assert undo.status_code == 200
        assert undo.json()["data"]["balance"]["current_balance_cents"] == 0

        history = await client.get("/api/v1/balance/transactions", headers=headers)
        assert [i["amount_cents"] for i in history.json()["data"]["items"]] == [-50, 50]

    async def test_routine_complete_advances_streak(
        self, client: AsyncClient, household: dict[str, str]
    ) -> None:
        headers = _as(household["user"])
        await client.post(f"/api/v1/completions/{household['bed']}", headers=headers)
        await client.post(f"/api/v1/completions/{household['teeth']}", headers=headers)

        resp = await client.get(f"/api/v1/streaks/{household['routine']}", headers=headers)
        assert resp.json()["data"]["current_count"] == 1


class TestAdminFlow:
    async def test_recalculate_and_verify(
        self, client: AsyncClient, household: dict[str, str]
    ) -> None:
        headers = _as(household["user"])
        await client.post(f"/api/v1/completions/{household['bed']}", headers=headers)

        run = await client.post("/api/v1/admin/streaks/recalculate", headers=headers)
        assert run.status_code == 200
        assert run.json()["data"]["errors"] == []

        verify = await client.get("/api/v1/admin/ledger/verify", headers=headers)
        assert verify.json()["data"]["ok"] is True
