"""hh_streak REST API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_common.database import get_db_session
from src.hh_common.response import ApiResponse, success_response
from src.hh_gateway.auth.dependencies import get_current_user_id
from src.hh_streak.application.service import StreakApplicationService

router = APIRouter(prefix="/streaks", tags=["streaks"])

_service = StreakApplicationService()


@router.get("")
async def list_streaks(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.list_streaks(db, user_id)
    return success_response(data.model_dump(), request)


@router.get("/{routine_id}")
async def get_streak(
    routine_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_streak(db, user_id, routine_id)
    return success_response(data.model_dump(), request)
