"""hh_notify REST API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_common.database import get_db_session
from src.hh_common.response import ApiResponse, success_response
from src.hh_gateway.auth.dependencies import get_current_user_id
from src.hh_notify.infrastructure.sinks import NotificationRepository

router = APIRouter(prefix="/notifications", tags=["notifications"])

_repo = NotificationRepository()


@router.get("")
async def list_notifications(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    unread_only: bool = Query(False),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> ApiResponse:
    items = await _repo.list_for_user(db, user_id, unread_only, limit, offset)
    data = [
        {
            "id": n.id,
            "kind": n.kind,
            "message": n.message,
            "is_read": n.is_read,
            "created_at": n.created_at.isoformat() if n.created_at else "",
        }
        for n in items
    ]
    return success_response(data, request)
