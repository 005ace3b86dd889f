"""API route modules."""

from src.api.routes.finance import router as finance_router
from src.api.routes.health import router as health_router
from src.api.routes.items import router as items_router
from src.api.routes.orders import router as orders_router
from src.api.routes.recipes import router as recipes_router

__all__ = [
    "health_router",
    "items_router",
    "recipes_router",
    "orders_router",
    "finance_router",
]
