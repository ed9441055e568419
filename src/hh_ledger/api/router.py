"""hh_ledger REST API: balance, history, summaries and payouts."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_common.database import get_db_session
from src.hh_common.response import ApiResponse, success_response
from src.hh_gateway.auth.dependencies import get_current_user_id
from src.hh_ledger.application.schemas import PayoutRequest
from src.hh_ledger.application.service import LedgerApplicationService
from src.hh_ledger.domain.models import TransactionFilter

router = APIRouter(prefix="/balance", tags=["balance"])

_service = LedgerApplicationService()


@router.get("")
async def get_balance(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, user_id)
    return success_response(data.model_dump(), request)


@router.get("/transactions")
async def list_transactions(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    kind: str | None = Query(None, description="Filter by TransactionKind"),
    start_date: date | None = Query(None, description="Inclusive start day"),
    end_date: date | None = Query(None, description="Inclusive end day"),
    limit: int = Query(50, ge=1, le=100, description="Items per page"),
    offset: int = Query(0, ge=0),
) -> ApiResponse:
    filters = TransactionFilter(kind=kind, start_date=start_date, end_date=end_date)
    data = await _service.list_transactions(db, user_id, filters, limit, offset)
    return success_response(data.model_dump(), request)


@router.get("/monthly")
async def get_monthly_total(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
) -> ApiResponse:
    data = await _service.get_monthly_total(db, user_id, month, year)
    return success_response(data.model_dump(), request)


@router.get("/summary")
async def get_summary(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    start_date: date = Query(...),
    end_date: date = Query(...),
) -> ApiResponse:
    data = await _service.get_summary(db, user_id, start_date, end_date)
    return success_response(data.model_dump(), request)


@router.post("/payout")
async def record_payout(
    body: PayoutRequest,
    _caller: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.record_payout(db, body.user_id, body.amount_cents, body.description)
    return success_response(data.model_dump(), request)
