"""Item catalog and stock ledger endpoints."""

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import get_item_catalog, get_stock_ledger
from src.application.dto.requests import (
    CreateItemRequest,
    RecordTransactionRequest,
    UpdateItemRequest,
)
from src.application.dto.responses import (
    ErrorResponse,
    InventoryTransactionResponse,
    ItemListResponse,
    ItemResponse,
    StockReconciliationResponse,
    StockTransactionResponse,
)
from src.core.entities.item import InventoryTransaction, Item
from src.core.services import ItemCatalogService, StockLedgerService

router = APIRouter(prefix="/api/items", tags=["items"])


def item_to_response(item: Item) -> ItemResponse:
    """Convert an Item entity to response DTO."""
    return ItemResponse(
        id=item.id,  # type: ignore[arg-type]
        name=item.name,
        category=item.category,
        quantity=item.quantity,
        unit=item.unit,
        cost=item.cost,
        cost_per_unit=item.cost_per_unit,
        stock_value=item.stock_value,
        expiration_date=item.expiration_date,
        location=item.location,
        version=item.version,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def _transaction_to_response(tx: InventoryTransaction) -> InventoryTransactionResponse:
    return InventoryTransactionResponse(
        id=tx.id,  # type: ignore[arg-type]
        item_id=tx.item_id,
        transaction_type=tx.transaction_type.value,
        change_quantity=tx.change_quantity,
        signed_quantity=tx.signed_quantity,
        cost=tx.cost,
        transaction_date=tx.transaction_date,
        notes=tx.notes,
        created_at=tx.created_at,
    )


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_item(
    request: CreateItemRequest,
    catalog: ItemCatalogService = Depends(get_item_catalog),
) -> ItemResponse:
    """Create an item; opening stock is booked as an 'in' transaction."""
    item = await catalog.create_item(
        name=request.name,
        category=request.category,
        unit=request.unit,
        quantity=request.quantity,
        cost=request.cost,
        expiration_date=request.expiration_date,
        location=request.location,
    )
    return item_to_response(item)


@router.get("", response_model=ItemListResponse)
async def list_items(
    category: str | None = None,
    location: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    catalog: ItemCatalogService = Depends(get_item_catalog),
) -> ItemListResponse:
    """List items, optionally filtered by category and location."""
    items = await catalog.list_items(
        category=category, location=location, limit=limit, offset=offset
    )
    return ItemListResponse(
        items=[item_to_response(item) for item in items],
        total=len(items),
    )


@router.get(
    "/{item_id}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: int,
    catalog: ItemCatalogService = Depends(get_item_catalog),
) -> ItemResponse:
    return item_to_response(await catalog.get_item(item_id))


@router.patch(
    "/{item_id}",
    response_model=ItemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_item(
    item_id: int,
    request: UpdateItemRequest,
    catalog: ItemCatalogService = Depends(get_item_catalog),
) -> ItemResponse:
    """Edit descriptive fields. Stock and cost change only through transactions."""
    item = await catalog.update_item(item_id, **request.model_dump(exclude_unset=True))
    return item_to_response(item)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_item(
    item_id: int,
    catalog: ItemCatalogService = Depends(get_item_catalog),
) -> Response:
    """Delete an item no recipe uses."""
    await catalog.delete_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{item_id}/transactions",
    response_model=StockTransactionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def record_transaction(
    item_id: int,
    request: RecordTransactionRequest,
    ledger: StockLedgerService = Depends(get_stock_ledger),
) -> StockTransactionResponse:
    """Move stock in (with weighted-average costing) or out (with balance check)."""
    result = await ledger.record_transaction(
        item_id,
        request.transaction_type,
        request.change_quantity,
        transaction_date=request.transaction_date,
        notes=request.notes,
        cost=request.cost,
    )
    return StockTransactionResponse(
        item=item_to_response(result.item),
        transaction=_transaction_to_response(result.transaction),
        recomputed_recipe_ids=result.recomputed_recipe_ids,
    )


@router.get(
    "/{item_id}/transactions",
    response_model=list[InventoryTransactionResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_transactions(
    item_id: int,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    ledger: StockLedgerService = Depends(get_stock_ledger),
) -> list[InventoryTransactionResponse]:
    """Stock movements for an item, newest first."""
    transactions = await ledger.list_transactions(item_id, limit=limit, offset=offset)
    return [_transaction_to_response(tx) for tx in transactions]


@router.get(
    "/{item_id}/reconcile",
    response_model=StockReconciliationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def reconcile_item(
    item_id: int,
    ledger: StockLedgerService = Depends(get_stock_ledger),
) -> StockReconciliationResponse:
    """Compare the item's quantity with the sum of its transactions."""
    result = await ledger.reconcile(item_id)
    return StockReconciliationResponse(
        item_id=result.item_id,
        recorded_quantity=result.recorded_quantity,
        ledger_quantity=result.ledger_quantity,
        consistent=result.is_consistent,
    )
