"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.clock import IClock
from src.core.interfaces.finance_store import IFinanceStore
from src.core.interfaces.image_store import IImageStore
from src.core.interfaces.item_store import IItemStore
from src.core.interfaces.order_store import IOrderStore
from src.core.interfaces.recipe_store import IRecipeStore
from src.core.interfaces.transaction import ITransactionManager

__all__ = [
    "IClock",
    "IFinanceStore",
    "IImageStore",
    "IItemStore",
    "IOrderStore",
    "IRecipeStore",
    "ITransactionManager",
]
