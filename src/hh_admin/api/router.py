# src/hh_admin/api/router.py
"""Admin REST API."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_admin.application.service import AdminService
from src.hh_common.database import get_db_session
from src.hh_common.response import ApiResponse, success_response
from src.hh_gateway.auth.dependencies import get_current_user_id
from src.hh_streak.jobs.scheduler import recalculation_job

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService(recalculation_job)


@router.post("/streaks/recalculate")
async def recalculate_streaks(
    user_id: Annotated[str, Depends(get_current_user_id)],
    request: Request,
) -> ApiResponse:
    result = await _service.run_streak_recalculation(user_id)
    return success_response(result, request)


@router.get("/ledger/verify")
async def verify_ledger(
    _caller: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.verify_ledger(db)
    return success_response(result, request)
