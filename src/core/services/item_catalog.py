"""
Item catalog service.

Owns item records. Stock quantity and unit cost are never edited here
directly; an opening balance is booked as an "in" transaction so the
running-sum invariant holds from the moment an item exists.
"""

from datetime import date
from typing import Any

from src.config import get_logger
from src.core.entities.item import InventoryTransaction, Item, TransactionType
from src.core.exceptions import (
    ItemNotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from src.core.interfaces.clock import IClock
from src.core.interfaces.item_store import IItemStore
from src.core.interfaces.transaction import ITransactionManager
from src.core.services.base import TransactionalService, require_finite
from src.core.services.costing import weighted_average_cost

logger = get_logger(__name__)

EDITABLE_FIELDS = frozenset({"name", "category", "unit", "expiration_date", "location"})
LEDGER_FIELDS = frozenset({"quantity", "cost", "cost_per_unit"})


def _require_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise ValidationError("name", "must not be empty", name)
    return name.strip()


class ItemCatalogService(TransactionalService):
    """Create, edit, look up and delete items."""

    def __init__(
        self,
        transaction_manager: ITransactionManager,
        item_store: IItemStore,
        clock: IClock,
    ):
        super().__init__(transaction_manager, clock)
        self._item_store = item_store

    async def create_item(
        self,
        name: str,
        category: str | None = None,
        unit: str | None = None,
        quantity: float = 0.0,
        cost: float = 0.0,
        expiration_date: date | None = None,
        location: str | None = None,
    ) -> Item:
        """
        Create an item, booking any opening stock as an "in" transaction.

        Args:
            name: Item name, required.
            category: Optional grouping used by list filters.
            unit: Unit of measure for quantity.
            quantity: Opening stock, >= 0.
            cost: Total cost of the opening stock, >= 0.
            expiration_date: Optional best-before date.
            location: Optional storage location.

        Raises:
            ValidationError: Empty name, negative quantity or cost, or a
                cost given without opening stock.
        """
        name = _require_name(name)
        require_finite("quantity", quantity)
        require_finite("cost", cost)
        if quantity < 0:
            raise ValidationError("quantity", "must not be negative", quantity)
        if cost < 0:
            raise ValidationError("cost", "must not be negative", cost)
        if cost > 0 and quantity == 0:
            raise ValidationError("cost", "requires a positive opening quantity", cost)

        item = Item(
            name=name,
            category=category,
            unit=unit,
            expiration_date=expiration_date,
            location=location,
        )
        return await self._run_atomic(self._create_item, item, quantity, cost)

    async def _create_item(self, item: Item, quantity: float, cost: float) -> Item:
        now = self._now()
        if quantity > 0:
            opening = weighted_average_cost(0.0, 0.0, quantity, cost)
            item.quantity = opening.quantity
            item.cost = opening.cost
            item.cost_per_unit = opening.cost_per_unit

        item = await self._item_store.create_item(item)

        if quantity > 0:
            await self._item_store.add_transaction(
                InventoryTransaction(
                    item_id=item.id,  # type: ignore[arg-type]
                    transaction_type=TransactionType.IN,
                    change_quantity=quantity,
                    cost=cost,
                    transaction_date=now,
                    notes="opening balance",
                )
            )

        logger.info(
            "item_created",
            item_id=item.id,
            name=item.name,
            quantity=item.quantity,
            cost_per_unit=round(item.cost_per_unit, 4),
        )
        return item

    async def update_item(self, item_id: int, **changes: Any) -> Item:
        """
        Edit descriptive item fields.

        Raises:
            ValidationError: Unknown field, a stock/cost field, or an empty name.
            ItemNotFoundError: No item with this ID.
        """
        ledger_only = LEDGER_FIELDS.intersection(changes)
        if ledger_only:
            field = sorted(ledger_only)[0]
            raise ValidationError(
                field, "is maintained by stock transactions", changes[field]
            )
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationError(field, "is not an editable item field", changes[field])
        if "name" in changes:
            changes["name"] = _require_name(changes["name"])

        return await self._run_atomic(self._update_item, item_id, changes)

    async def _update_item(self, item_id: int, changes: dict[str, Any]) -> Item:
        item = await self._item_store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        for field, value in changes.items():
            setattr(item, field, value)
        item = await self._item_store.update_item(item)
        logger.info("item_updated", item_id=item_id, fields=sorted(changes))
        return item

    async def get_item(self, item_id: int) -> Item:
        item = await self._item_store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    async def list_items(
        self,
        category: str | None = None,
        location: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Item]:
        return await self._item_store.list_items(
            category=category, location=location, limit=limit, offset=offset
        )

    async def delete_item(self, item_id: int) -> None:
        """
        Delete an item and its transaction history.

        Raises:
            ItemNotFoundError: No item with this ID.
            ReferentialIntegrityError: A recipe still uses the item.
        """
        await self._run_atomic(self._delete_item, item_id)

    async def _delete_item(self, item_id: int) -> None:
        if await self._item_store.get_item(item_id) is None:
            raise ItemNotFoundError(item_id)
        references = await self._item_store.count_ingredient_references(item_id)
        if references:
            raise ReferentialIntegrityError("item", item_id, "recipe ingredients", references)
        await self._item_store.delete_item(item_id)
        logger.info("item_deleted", item_id=item_id)
