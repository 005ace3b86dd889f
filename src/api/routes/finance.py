"""Financial ledger endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_financial_ledger
from src.application.dto.requests import ManualEntryRequest
from src.application.dto.responses import (
    ErrorResponse,
    FinancialRecordListResponse,
    FinancialRecordResponse,
    FinancialSummaryResponse,
)
from src.core.entities.finance import FinancialRecord
from src.core.services import FinancialLedgerService

router = APIRouter(prefix="/api/finance", tags=["finance"])


def _record_to_response(record: FinancialRecord) -> FinancialRecordResponse:
    return FinancialRecordResponse(
        id=record.id,  # type: ignore[arg-type]
        record_type=record.record_type.value,
        amount=record.amount,
        record_date=record.record_date,
        description=record.description,
        recipe_id=record.recipe_id,
        quantity=record.quantity,
        order_id=record.order_id,
        created_at=record.created_at,
    )


@router.post(
    "/records",
    response_model=FinancialRecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def record_manual_entry(
    request: ManualEntryRequest,
    ledger: FinancialLedgerService = Depends(get_financial_ledger),
) -> FinancialRecordResponse:
    """Record a manual income or expense. Corrections are new entries."""
    record = await ledger.record_manual_entry(
        request.record_type,
        request.amount,
        record_date=request.record_date,
        description=request.description,
    )
    return _record_to_response(record)


@router.get(
    "/records",
    response_model=FinancialRecordListResponse,
    responses={400: {"model": ErrorResponse}},
)
async def list_records(
    start: date | None = None,
    end: date | None = None,
    record_type: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    ledger: FinancialLedgerService = Depends(get_financial_ledger),
) -> FinancialRecordListResponse:
    records = await ledger.list_records(
        start=start, end=end, record_type=record_type, limit=limit, offset=offset
    )
    return FinancialRecordListResponse(
        records=[_record_to_response(r) for r in records],
        total=len(records),
    )


@router.get(
    "/records/{record_id}",
    response_model=FinancialRecordResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_record(
    record_id: int,
    ledger: FinancialLedgerService = Depends(get_financial_ledger),
) -> FinancialRecordResponse:
    return _record_to_response(await ledger.get_record(record_id))


@router.get(
    "/summary",
    response_model=FinancialSummaryResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_summary(
    start: date | None = None,
    end: date | None = None,
    ledger: FinancialLedgerService = Depends(get_financial_ledger),
) -> FinancialSummaryResponse:
    """Total income, expense and net over [start, end]."""
    summary = await ledger.summary(start=start, end=end)
    return FinancialSummaryResponse(
        start=summary.start,
        end=summary.end,
        total_income=summary.total_income,
        total_expense=summary.total_expense,
        net=summary.net,
    )
