"""
Stock ledger service.

The only writer of item quantity and unit cost. Every change is an
append-only transaction row recorded in the same storage transaction as
the item update it explains.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from src.config import get_logger
from src.core.entities.item import (
    InventoryTransaction,
    Item,
    StockReconciliation,
    StockShortfall,
    TransactionType,
)
from src.core.exceptions import InsufficientStockError, ItemNotFoundError, ValidationError
from src.core.interfaces.clock import IClock
from src.core.interfaces.item_store import IItemStore
from src.core.interfaces.transaction import ITransactionManager
from src.core.services.base import TransactionalService, require_finite
from src.core.services.costing import QUANTITY_EPSILON, weighted_average_cost

if TYPE_CHECKING:
    from src.core.services.recipe_costing import RecipeCostingService

logger = get_logger(__name__)


@dataclass
class StockTransactionResult:
    """Item state after a transaction, plus the recipes re-costed because of it."""

    item: Item
    transaction: InventoryTransaction
    recomputed_recipe_ids: list[int] = field(default_factory=list)


class StockLedgerService(TransactionalService):
    """Record stock in/out movements with weighted-average costing."""

    def __init__(
        self,
        transaction_manager: ITransactionManager,
        item_store: IItemStore,
        clock: IClock,
        recipe_costing: "RecipeCostingService | None" = None,
    ):
        super().__init__(transaction_manager, clock)
        self._item_store = item_store
        self._recipe_costing = recipe_costing

    async def record_transaction(
        self,
        item_id: int,
        transaction_type: TransactionType | str,
        change_quantity: float,
        transaction_date: datetime | None = None,
        notes: str | None = None,
        cost: float | None = None,
    ) -> StockTransactionResult:
        """
        Apply a stock movement to an item.

        Args:
            item_id: Item to move.
            transaction_type: "in" (restock) or "out" (use or sale).
            change_quantity: Positive magnitude of the movement.
            transaction_date: Defaults to now.
            notes: Free text, e.g. "order #12".
            cost: Total cost of an "in" restock. When omitted the units are
                valued at the current cost per unit.

        Raises:
            ValidationError: Bad type, non-positive quantity, negative cost,
                or a cost on an "out" movement.
            ItemNotFoundError: No item with this ID.
            InsufficientStockError: An "out" larger than the stock on hand.
        """
        try:
            transaction_type = TransactionType(transaction_type)
        except ValueError:
            raise ValidationError(
                "transaction_type", "must be 'in' or 'out'", transaction_type
            ) from None
        require_finite("change_quantity", change_quantity)
        if not change_quantity > 0:
            raise ValidationError("change_quantity", "must be positive", change_quantity)
        if cost is not None:
            if transaction_type == TransactionType.OUT:
                raise ValidationError("cost", "only applies to 'in' transactions", cost)
            require_finite("cost", cost)
            if cost < 0:
                raise ValidationError("cost", "must not be negative", cost)

        return await self._run_atomic(
            self._record,
            item_id,
            transaction_type,
            change_quantity,
            transaction_date or self._now(),
            notes,
            cost,
        )

    async def _record(
        self,
        item_id: int,
        transaction_type: TransactionType,
        change_quantity: float,
        transaction_date: datetime,
        notes: str | None,
        cost: float | None,
    ) -> StockTransactionResult:
        item = await self._item_store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)

        cost_changed = False
        if transaction_type == TransactionType.OUT:
            if change_quantity - item.quantity > QUANTITY_EPSILON:
                raise InsufficientStockError(
                    [
                        StockShortfall(
                            item_id=item_id,
                            item_name=item.name,
                            required=change_quantity,
                            available=item.quantity,
                        )
                    ]
                )
            remaining = item.quantity - change_quantity
            item.quantity = remaining if remaining > QUANTITY_EPSILON else 0.0
        else:
            if cost is None:
                cost = change_quantity * item.cost_per_unit
            restock = weighted_average_cost(
                item.quantity, item.cost_per_unit, change_quantity, cost
            )
            if not (math.isfinite(restock.quantity) and math.isfinite(restock.cost)):
                raise ValidationError(
                    "change_quantity", "puts the item stock value out of range", change_quantity
                )
            cost_changed = not math.isclose(
                restock.cost_per_unit, item.cost_per_unit, abs_tol=QUANTITY_EPSILON
            )
            item.quantity = restock.quantity
            item.cost = restock.cost
            item.cost_per_unit = restock.cost_per_unit

        item = await self._item_store.update_item(item)
        transaction = await self._item_store.add_transaction(
            InventoryTransaction(
                item_id=item_id,
                transaction_type=transaction_type,
                change_quantity=change_quantity,
                cost=cost,
                transaction_date=transaction_date,
                notes=notes,
            )
        )

        recomputed: list[int] = []
        if cost_changed and self._recipe_costing is not None:
            recomputed = await self._recipe_costing.recompute_for_item(item_id)

        logger.info(
            "stock_transaction_recorded",
            item_id=item_id,
            transaction_id=transaction.id,
            type=transaction_type.value,
            qty=change_quantity,
            new_qty=item.quantity,
            cost_per_unit=round(item.cost_per_unit, 4),
            recipes_recomputed=len(recomputed),
        )
        return StockTransactionResult(
            item=item,
            transaction=transaction,
            recomputed_recipe_ids=recomputed,
        )

    async def list_transactions(
        self, item_id: int, limit: int = 100, offset: int = 0
    ) -> list[InventoryTransaction]:
        """An item's transactions, newest first."""
        if await self._item_store.get_item(item_id) is None:
            raise ItemNotFoundError(item_id)
        return await self._item_store.list_transactions(item_id, limit=limit, offset=offset)

    async def stock_balance(self, item_id: int) -> float:
        """Signed sum of all of the item's transactions."""
        if await self._item_store.get_item(item_id) is None:
            raise ItemNotFoundError(item_id)
        return await self._item_store.sum_transactions(item_id)

    async def reconcile(self, item_id: int) -> StockReconciliation:
        """Compare the stored quantity with the transaction log."""
        item = await self._item_store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        result = StockReconciliation(
            item_id=item_id,
            recorded_quantity=item.quantity,
            ledger_quantity=await self._item_store.sum_transactions(item_id),
        )
        if not result.is_consistent:
            logger.warning(
                "stock_ledger_mismatch",
                item_id=item_id,
                recorded=result.recorded_quantity,
                ledger=result.ledger_quantity,
            )
        return result
