"""Abstract interface for order storage."""

from abc import ABC, abstractmethod
from datetime import date

from src.core.entities.order import Order


class IOrderStore(ABC):
    """Interface for order and order line persistence."""

    @abstractmethod
    async def create_order(self, order: Order) -> Order:
        """Create an order with all its lines."""
        pass

    @abstractmethod
    async def get_order(self, order_id: int) -> Order | None:
        """Get order by ID with its lines."""
        pass

    @abstractmethod
    async def list_orders(
        self,
        start: date | None = None,
        end: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Order]:
        """List orders in an inclusive date range, newest first."""
        pass
