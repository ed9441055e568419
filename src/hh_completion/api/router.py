"""hh_completion REST API: complete, undo and today's completions."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_common.database import async_session_factory, get_db_session
from src.hh_common.response import ApiResponse, success_response
from src.hh_completion.application.service import CompletionApplicationService
from src.hh_gateway.auth.dependencies import get_current_user_id
from src.hh_notify.infrastructure.sinks import DbNotificationSink

router = APIRouter(prefix="/completions", tags=["completions"])

_service = CompletionApplicationService(notifier=DbNotificationSink(async_session_factory))


@router.get("/today")
async def list_today(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    on_date: date | None = Query(None, alias="date", description="Defaults to household today"),
) -> ApiResponse:
    data = await _service.list_for_day(db, user_id, on_date)
    return success_response(data.model_dump(), request)


@router.post("/{task_id}", status_code=201)
async def complete_task(
    task_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.complete(db, task_id, user_id)
    return success_response(data.model_dump(), request)


@router.post("/{completion_id}/undo")
async def undo_completion(
    completion_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.undo(db, completion_id, user_id)
    return success_response(data.model_dump(), request)


@router.get("/{completion_id}/can-undo")
async def can_undo_completion(
    completion_id: str,
    _caller: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.can_undo(db, completion_id)
    return success_response(data.model_dump(), request)
