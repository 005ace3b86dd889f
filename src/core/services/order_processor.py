"""
Order processor service.

Turns a sale into an order, stock depletions and one income record.
The whole sequence is a single storage transaction: a shortfall on any
ingredient, or any later failure, leaves no trace.
"""

from collections.abc import Iterable
from datetime import date, datetime

from src.config import get_logger
from src.core.entities.item import StockShortfall, TransactionType
from src.core.entities.order import Order, OrderItem
from src.core.entities.recipe import Recipe
from src.core.exceptions import (
    InsufficientStockError,
    ItemNotFoundError,
    OrderNotFoundError,
    RecipeNotFoundError,
    ValidationError,
)
from src.core.interfaces.clock import IClock
from src.core.interfaces.item_store import IItemStore
from src.core.interfaces.order_store import IOrderStore
from src.core.interfaces.recipe_store import IRecipeStore
from src.core.interfaces.transaction import ITransactionManager
from src.core.services.base import TransactionalService
from src.core.services.costing import QUANTITY_EPSILON, aggregate_requirements, order_total
from src.core.services.financial_ledger import FinancialLedgerService
from src.core.services.stock_ledger import StockLedgerService

logger = get_logger(__name__)


def _normalize_lines(lines: Iterable[tuple[int, int]]) -> list[tuple[int, int]]:
    normalized = [(recipe_id, quantity) for recipe_id, quantity in lines]
    if not normalized:
        raise ValidationError("items", "an order needs at least one line")
    for recipe_id, quantity in normalized:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError(
                "quantity", f"must be a positive integer (recipe {recipe_id})", quantity
            )
    return normalized


class OrderProcessorService(TransactionalService):
    """Place orders against current stock and recipe prices."""

    def __init__(
        self,
        transaction_manager: ITransactionManager,
        order_store: IOrderStore,
        recipe_store: IRecipeStore,
        item_store: IItemStore,
        stock_ledger: StockLedgerService,
        financial_ledger: FinancialLedgerService,
        clock: IClock,
    ):
        super().__init__(transaction_manager, clock)
        self._order_store = order_store
        self._recipe_store = recipe_store
        self._item_store = item_store
        self._stock_ledger = stock_ledger
        self._financial_ledger = financial_ledger

    async def place_order(
        self,
        lines: Iterable[tuple[int, int]],
        order_date: datetime | None = None,
        customer_info: str | None = None,
        notes: str | None = None,
    ) -> Order:
        """
        Place an order, all or nothing.

        Args:
            lines: (recipe_id, quantity) pairs.
            order_date: Defaults to now; also dates the stock movements
                and the income record.
            customer_info: Optional free text.
            notes: Optional free text.

        Returns:
            The stored order with its lines and total.

        Raises:
            ValidationError: No lines or a non-positive quantity.
            RecipeNotFoundError: A line references a missing recipe.
            InsufficientStockError: Some ingredient cannot cover the whole
                order; lists every shortfall.
        """
        normalized = _normalize_lines(lines)
        logger.info("place_order_started", lines=len(normalized))
        return await self._run_atomic(
            self._place_order,
            normalized,
            order_date or self._now(),
            customer_info,
            notes,
        )

    async def _place_order(
        self,
        lines: list[tuple[int, int]],
        order_date: datetime,
        customer_info: str | None,
        notes: str | None,
    ) -> Order:
        # 1. Load recipes and snapshot prices
        recipes: dict[int, Recipe] = {}
        for recipe_id, _ in lines:
            if recipe_id not in recipes:
                recipe = await self._recipe_store.get_recipe(recipe_id)
                if recipe is None:
                    raise RecipeNotFoundError(recipe_id)
                recipes[recipe_id] = recipe

        # 2. Aggregate requirements across all lines and pre-check stock
        required = aggregate_requirements(
            lines, {rid: recipe.ingredients for rid, recipe in recipes.items()}
        )
        items = await self._item_store.get_items(sorted(required))
        shortfalls: list[StockShortfall] = []
        for item_id in sorted(required):
            item = items.get(item_id)
            if item is None:
                raise ItemNotFoundError(item_id)
            if required[item_id] - item.quantity > QUANTITY_EPSILON:
                shortfalls.append(
                    StockShortfall(
                        item_id=item_id,
                        item_name=item.name,
                        required=required[item_id],
                        available=item.quantity,
                    )
                )
        if shortfalls:
            logger.info(
                "place_order_rejected",
                shortfalls=[s.item_id for s in shortfalls],
            )
            raise InsufficientStockError(shortfalls)

        # 3. Order and lines
        order = Order(
            order_date=order_date,
            customer_info=customer_info,
            notes=notes,
            items=[
                OrderItem(
                    recipe_id=recipe_id,
                    quantity=quantity,
                    price=recipes[recipe_id].selling_price,
                )
                for recipe_id, quantity in lines
            ],
        )
        order.total_amount = order_total(order.items)
        order = await self._order_store.create_order(order)

        # 4. Deplete stock
        for item_id in sorted(required):
            await self._stock_ledger.record_transaction(
                item_id,
                TransactionType.OUT,
                required[item_id],
                transaction_date=order_date,
                notes=f"order #{order.id}",
            )

        # 5. Post income
        await self._financial_ledger.post_order_income(order)

        logger.info(
            "order_placed",
            order_id=order.id,
            lines=len(order.items),
            total=order.total_amount,
            items_depleted=len(required),
        )
        return order

    async def get_order(self, order_id: int) -> Order:
        order = await self._order_store.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def list_orders(
        self,
        start: date | None = None,
        end: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Order]:
        if start is not None and end is not None and start > end:
            raise ValidationError("start", "must not be after end", start)
        return await self._order_store.list_orders(
            start=start, end=end, limit=limit, offset=offset
        )
