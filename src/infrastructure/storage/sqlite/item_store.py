"""SQLite implementation of item and inventory transaction storage."""

from datetime import date, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.item import InventoryTransaction, Item, TransactionType
from src.core.exceptions import ConcurrentModificationError
from src.core.interfaces.item_store import IItemStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


class SQLiteItemStore(IItemStore):
    """SQLite implementation of item and inventory transaction storage."""

    async def create_item(self, item: Item) -> Item:
        """Create a new item."""
        now = datetime.now()
        item.created_at = now
        item.updated_at = now
        item.version = 1
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO items (
                    name, category, quantity, unit, cost, cost_per_unit,
                    expiration_date, location, version, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.name,
                    item.category,
                    item.quantity,
                    item.unit,
                    item.cost,
                    item.cost_per_unit,
                    item.expiration_date.isoformat() if item.expiration_date else None,
                    item.location,
                    item.version,
                    item.created_at.isoformat(),
                    item.updated_at.isoformat(),
                ),
            )
            item.id = cursor.lastrowid
            logger.debug("item_row_inserted", item_id=item.id)
            return item

    async def get_item(self, item_id: int) -> Item | None:
        """Get item by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM items WHERE id = ?", (item_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_item(row)

    async def get_items(self, item_ids: list[int]) -> dict[int, Item]:
        """Get several items keyed by ID."""
        ids = sorted(set(item_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM items WHERE id IN ({placeholders})", ids
            )
            rows = await cursor.fetchall()
            return {row["id"]: self._row_to_item(row) for row in rows}

    async def list_items(
        self,
        category: str | None = None,
        location: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Item]:
        """List items ordered by name, optionally filtered."""
        conditions = []
        params: list = []
        if category is not None:
            conditions.append("category = ?")
            params.append(category)
        if location is not None:
            conditions.append("location = ?")
            params.append(location)
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM items
                {where}
                ORDER BY name COLLATE NOCASE, id
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_item(row) for row in rows]

    async def update_item(self, item: Item) -> Item:
        """Update an item if nobody else changed it since it was read."""
        updated_at = datetime.now()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE items SET
                    name = ?,
                    category = ?,
                    quantity = ?,
                    unit = ?,
                    cost = ?,
                    cost_per_unit = ?,
                    expiration_date = ?,
                    location = ?,
                    version = version + 1,
                    updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    item.name,
                    item.category,
                    item.quantity,
                    item.unit,
                    item.cost,
                    item.cost_per_unit,
                    item.expiration_date.isoformat() if item.expiration_date else None,
                    item.location,
                    updated_at.isoformat(),
                    item.id,
                    item.version,
                ),
            )
            if cursor.rowcount == 0:
                raise ConcurrentModificationError("item", item.id)  # type: ignore[arg-type]
            item.version += 1
            item.updated_at = updated_at
            return item

    async def delete_item(self, item_id: int) -> bool:
        """Delete an item; its transactions go with it."""
        async with get_transaction() as conn:
            await conn.execute(
                "DELETE FROM inventory_transactions WHERE item_id = ?", (item_id,)
            )
            cursor = await conn.execute("DELETE FROM items WHERE id = ?", (item_id,))
            return cursor.rowcount > 0

    async def count_ingredient_references(self, item_id: int) -> int:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM recipe_ingredients WHERE item_id = ?", (item_id,)
            )
            row = await cursor.fetchone()
            return row[0] if row else 0

    async def add_transaction(
        self, transaction: InventoryTransaction
    ) -> InventoryTransaction:
        """Append an inventory transaction."""
        transaction.created_at = datetime.now()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory_transactions (
                    item_id, transaction_type, change_quantity, cost,
                    transaction_date, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    transaction.item_id,
                    transaction.transaction_type.value,
                    transaction.change_quantity,
                    transaction.cost,
                    transaction.transaction_date.isoformat(),
                    transaction.notes,
                    transaction.created_at.isoformat(),
                ),
            )
            transaction.id = cursor.lastrowid
            logger.debug(
                "inventory_transaction_inserted",
                transaction_id=transaction.id,
                item_id=transaction.item_id,
                type=transaction.transaction_type.value,
            )
            return transaction

    async def list_transactions(
        self, item_id: int, limit: int = 100, offset: int = 0
    ) -> list[InventoryTransaction]:
        """Get transactions for an item, ordered by date DESC."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM inventory_transactions
                WHERE item_id = ?
                ORDER BY transaction_date DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (item_id, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows]

    async def sum_transactions(self, item_id: int) -> float:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT COALESCE(SUM(
                    CASE transaction_type
                        WHEN 'in' THEN change_quantity
                        ELSE -change_quantity
                    END
                ), 0)
                FROM inventory_transactions
                WHERE item_id = ?
                """,
                (item_id,),
            )
            row = await cursor.fetchone()
            return float(row[0]) if row else 0.0

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> Item:
        """Convert a database row to an Item entity."""
        expiration_date = None
        if row["expiration_date"]:
            try:
                expiration_date = date.fromisoformat(row["expiration_date"])
            except (ValueError, TypeError):
                pass

        return Item(
            id=row["id"],
            name=row["name"],
            category=row["category"],
            quantity=float(row["quantity"]),
            unit=row["unit"],
            cost=float(row["cost"]),
            cost_per_unit=float(row["cost_per_unit"]),
            expiration_date=expiration_date,
            location=row["location"],
            version=row["version"],
            created_at=_parse_datetime(row["created_at"]),
            updated_at=_parse_datetime(row["updated_at"]),
        )

    @staticmethod
    def _row_to_transaction(row: aiosqlite.Row) -> InventoryTransaction:
        """Convert a database row to an InventoryTransaction entity."""
        return InventoryTransaction(
            id=row["id"],
            item_id=row["item_id"],
            transaction_type=TransactionType(row["transaction_type"]),
            change_quantity=float(row["change_quantity"]),
            cost=float(row["cost"]) if row["cost"] is not None else None,
            transaction_date=_parse_datetime(row["transaction_date"]) or datetime.now(),
            notes=row["notes"],
            created_at=_parse_datetime(row["created_at"]),
        )
