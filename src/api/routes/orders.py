"""Order endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_order_processor
from src.application.dto.requests import PlaceOrderRequest
from src.application.dto.responses import (
    ErrorResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
)
from src.core.entities.order import Order
from src.core.services import OrderProcessorService

router = APIRouter(prefix="/api/orders", tags=["orders"])


def order_to_response(order: Order) -> OrderResponse:
    """Convert an Order entity to response DTO."""
    return OrderResponse(
        id=order.id,  # type: ignore[arg-type]
        order_date=order.order_date,
        total_amount=order.total_amount,
        total_quantity=order.total_quantity,
        customer_info=order.customer_info,
        notes=order.notes,
        items=[
            OrderItemResponse(
                id=line.id,  # type: ignore[arg-type]
                recipe_id=line.recipe_id,
                quantity=line.quantity,
                price=line.price,
                line_total=line.line_total,
            )
            for line in order.items
        ],
        created_at=order.created_at,
    )


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def place_order(
    request: PlaceOrderRequest,
    processor: OrderProcessorService = Depends(get_order_processor),
) -> OrderResponse:
    """
    Place an order.

    Stock for every ingredient is deducted and one income record is posted,
    or nothing happens at all. A 409 lists every item that falls short.
    """
    order = await processor.place_order(
        [(line.recipe_id, line.quantity) for line in request.items],
        order_date=request.order_date,
        customer_info=request.customer_info,
        notes=request.notes,
    )
    return order_to_response(order)


@router.get("", response_model=OrderListResponse, responses={400: {"model": ErrorResponse}})
async def list_orders(
    start: date | None = None,
    end: date | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    processor: OrderProcessorService = Depends(get_order_processor),
) -> OrderListResponse:
    """Orders dated within [start, end], newest first."""
    orders = await processor.list_orders(start=start, end=end, limit=limit, offset=offset)
    return OrderListResponse(
        orders=[order_to_response(o) for o in orders],
        total=len(orders),
    )


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_order(
    order_id: int,
    processor: OrderProcessorService = Depends(get_order_processor),
) -> OrderResponse:
    return order_to_response(await processor.get_order(order_id))
