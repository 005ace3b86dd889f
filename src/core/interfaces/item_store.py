"""Abstract interface for item and stock transaction storage."""

from abc import ABC, abstractmethod

from src.core.entities.item import InventoryTransaction, Item


class IItemStore(ABC):
    """Interface for item and inventory transaction persistence."""

    @abstractmethod
    async def create_item(self, item: Item) -> Item:
        """Create a new item."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> Item | None:
        """Get item by ID."""
        pass

    @abstractmethod
    async def get_items(self, item_ids: list[int]) -> dict[int, Item]:
        """Get several items keyed by ID; missing IDs are absent."""
        pass

    @abstractmethod
    async def list_items(
        self,
        category: str | None = None,
        location: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Item]:
        """List items, optionally filtered by category and location."""
        pass

    @abstractmethod
    async def update_item(self, item: Item) -> Item:
        """Persist an item if its version is unchanged, bumping the version.

        Raises ConcurrentModificationError when the stored version differs.
        """
        pass

    @abstractmethod
    async def delete_item(self, item_id: int) -> bool:
        """Delete an item together with its transactions."""
        pass

    @abstractmethod
    async def count_ingredient_references(self, item_id: int) -> int:
        """Count recipe ingredients pointing at the item."""
        pass

    @abstractmethod
    async def add_transaction(
        self, transaction: InventoryTransaction
    ) -> InventoryTransaction:
        """Append an inventory transaction."""
        pass

    @abstractmethod
    async def list_transactions(
        self, item_id: int, limit: int = 100, offset: int = 0
    ) -> list[InventoryTransaction]:
        """List an item's transactions, newest first."""
        pass

    @abstractmethod
    async def sum_transactions(self, item_id: int) -> float:
        """Signed sum of an item's transaction quantities."""
        pass
