"""SQLite implementation of order storage."""

from datetime import date, datetime, timedelta

import aiosqlite

from src.config import get_logger
from src.core.entities.order import Order, OrderItem
from src.core.interfaces.order_store import IOrderStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


def date_range_clause(
    column: str, start: date | None, end: date | None
) -> tuple[list[str], list[str]]:
    """SQL conditions for an inclusive calendar-date range on an ISO column."""
    conditions: list[str] = []
    params: list[str] = []
    if start is not None:
        conditions.append(f"{column} >= ?")
        params.append(start.isoformat())
    if end is not None:
        conditions.append(f"{column} < ?")
        params.append((end + timedelta(days=1)).isoformat())
    return conditions, params


class SQLiteOrderStore(IOrderStore):
    """SQLite implementation of order and order line storage."""

    async def create_order(self, order: Order) -> Order:
        """Create an order with all its lines."""
        order.created_at = datetime.now()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO orders (
                    order_date, total_amount, customer_info, notes, created_at
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (
                    order.order_date.isoformat(),
                    order.total_amount,
                    order.customer_info,
                    order.notes,
                    order.created_at.isoformat(),
                ),
            )
            order.id = cursor.lastrowid

            for line in order.items:
                line.order_id = order.id
                line_cursor = await conn.execute(
                    """
                    INSERT INTO order_items (order_id, recipe_id, quantity, price)
                    VALUES (?, ?, ?, ?)
                    """,
                    (line.order_id, line.recipe_id, line.quantity, line.price),
                )
                line.id = line_cursor.lastrowid

            logger.debug("order_row_inserted", order_id=order.id, lines=len(order.items))
            return order

    async def get_order(self, order_id: int) -> Order | None:
        """Get order by ID with its lines."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            order = self._row_to_order(row)
            lines = await self._load_lines(conn, [order_id])
            order.items = lines.get(order_id, [])
            return order

    async def list_orders(
        self,
        start: date | None = None,
        end: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Order]:
        """List orders with their lines, newest first."""
        conditions, params = date_range_clause("order_date", start, end)
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM orders
                {where}
                ORDER BY order_date DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            orders = [self._row_to_order(row) for row in rows]
            lines = await self._load_lines(conn, [o.id for o in orders if o.id is not None])
            for order in orders:
                order.items = lines.get(order.id, [])  # type: ignore[arg-type]
            return orders

    async def _load_lines(
        self, conn: aiosqlite.Connection, order_ids: list[int]
    ) -> dict[int, list[OrderItem]]:
        if not order_ids:
            return {}
        placeholders = ", ".join("?" for _ in order_ids)
        cursor = await conn.execute(
            f"SELECT * FROM order_items WHERE order_id IN ({placeholders}) ORDER BY id",
            order_ids,
        )
        grouped: dict[int, list[OrderItem]] = {}
        for row in await cursor.fetchall():
            grouped.setdefault(row["order_id"], []).append(self._row_to_line(row))
        return grouped

    @staticmethod
    def _row_to_order(row: aiosqlite.Row) -> Order:
        """Convert a database row to an Order entity (without lines)."""
        order_date = datetime.now()
        if row["order_date"]:
            try:
                order_date = datetime.fromisoformat(row["order_date"])
            except (ValueError, TypeError):
                pass

        created_at = None
        if row["created_at"]:
            try:
                created_at = datetime.fromisoformat(row["created_at"])
            except (ValueError, TypeError):
                pass

        return Order(
            id=row["id"],
            order_date=order_date,
            total_amount=float(row["total_amount"]),
            customer_info=row["customer_info"],
            notes=row["notes"],
            created_at=created_at,
        )

    @staticmethod
    def _row_to_line(row: aiosqlite.Row) -> OrderItem:
        return OrderItem(
            id=row["id"],
            order_id=row["order_id"],
            recipe_id=row["recipe_id"],
            quantity=int(row["quantity"]),
            price=float(row["price"]),
        )
