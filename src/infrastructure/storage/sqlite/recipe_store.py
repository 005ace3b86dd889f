"""SQLite implementation of recipe storage."""

from datetime import datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.recipe import Recipe, RecipeIngredient
from src.core.exceptions import ConcurrentModificationError
from src.core.interfaces.recipe_store import IRecipeStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteRecipeStore(IRecipeStore):
    """SQLite implementation of recipe and recipe ingredient storage."""

    async def create_recipe(self, recipe: Recipe) -> Recipe:
        """Create a recipe with all its ingredients."""
        now = datetime.now()
        recipe.created_at = now
        recipe.updated_at = now
        recipe.version = 1
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO recipes (
                    name, description, selling_price, recipe_cost,
                    profit, profit_margin, image, version,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    recipe.name,
                    recipe.description,
                    recipe.selling_price,
                    recipe.recipe_cost,
                    recipe.profit,
                    recipe.profit_margin,
                    recipe.image,
                    recipe.version,
                    recipe.created_at.isoformat(),
                    recipe.updated_at.isoformat(),
                ),
            )
            recipe.id = cursor.lastrowid

            for ingredient in recipe.ingredients:
                ingredient.recipe_id = recipe.id
                await self._insert_ingredient(conn, ingredient)

            logger.debug(
                "recipe_row_inserted",
                recipe_id=recipe.id,
                ingredients=len(recipe.ingredients),
            )
            return recipe

    async def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Get recipe by ID with its ingredients."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM recipes WHERE id = ?", (recipe_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            recipe = self._row_to_recipe(row)
            ingredients = await self._load_ingredients(conn, [recipe_id])
            recipe.ingredients = ingredients.get(recipe_id, [])
            return recipe

    async def list_recipes(self, limit: int = 100, offset: int = 0) -> list[Recipe]:
        """List recipes ordered by name, with ingredients."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM recipes
                ORDER BY name COLLATE NOCASE, id
                LIMIT ? OFFSET ?
                """,
                (limit, offset),
            )
            rows = await cursor.fetchall()
            recipes = [self._row_to_recipe(row) for row in rows]
            ingredients = await self._load_ingredients(
                conn, [r.id for r in recipes if r.id is not None]
            )
            for recipe in recipes:
                recipe.ingredients = ingredients.get(recipe.id, [])  # type: ignore[arg-type]
            return recipes

    async def update_recipe(self, recipe: Recipe) -> Recipe:
        """Update recipe fields if nobody else changed it since it was read."""
        updated_at = datetime.now()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE recipes SET
                    name = ?,
                    description = ?,
                    selling_price = ?,
                    recipe_cost = ?,
                    profit = ?,
                    profit_margin = ?,
                    image = ?,
                    version = version + 1,
                    updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    recipe.name,
                    recipe.description,
                    recipe.selling_price,
                    recipe.recipe_cost,
                    recipe.profit,
                    recipe.profit_margin,
                    recipe.image,
                    updated_at.isoformat(),
                    recipe.id,
                    recipe.version,
                ),
            )
            if cursor.rowcount == 0:
                raise ConcurrentModificationError("recipe", recipe.id)  # type: ignore[arg-type]
            recipe.version += 1
            recipe.updated_at = updated_at
            return recipe

    async def delete_recipe(self, recipe_id: int) -> bool:
        async with get_transaction() as conn:
            await conn.execute(
                "DELETE FROM recipe_ingredients WHERE recipe_id = ?", (recipe_id,)
            )
            cursor = await conn.execute("DELETE FROM recipes WHERE id = ?", (recipe_id,))
            return cursor.rowcount > 0

    async def add_ingredient(self, ingredient: RecipeIngredient) -> RecipeIngredient:
        async with get_transaction() as conn:
            return await self._insert_ingredient(conn, ingredient)

    async def get_ingredient(self, ingredient_id: int) -> RecipeIngredient | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM recipe_ingredients WHERE id = ?", (ingredient_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_ingredient(row)

    async def update_ingredient(self, ingredient: RecipeIngredient) -> RecipeIngredient:
        async with get_transaction() as conn:
            await conn.execute(
                "UPDATE recipe_ingredients SET quantity = ?, unit = ? WHERE id = ?",
                (ingredient.quantity, ingredient.unit, ingredient.id),
            )
            return ingredient

    async def remove_ingredient(self, ingredient_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM recipe_ingredients WHERE id = ?", (ingredient_id,)
            )
            return cursor.rowcount > 0

    async def list_recipe_ids_using_item(self, item_id: int) -> list[int]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT DISTINCT recipe_id FROM recipe_ingredients
                WHERE item_id = ?
                ORDER BY recipe_id
                """,
                (item_id,),
            )
            rows = await cursor.fetchall()
            return [row[0] for row in rows]

    async def count_order_references(self, recipe_id: int) -> int:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM order_items WHERE recipe_id = ?", (recipe_id,)
            )
            row = await cursor.fetchone()
            return row[0] if row else 0

    async def detach_financial_records(self, recipe_id: int) -> int:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE financial_records SET recipe_id = NULL WHERE recipe_id = ?",
                (recipe_id,),
            )
            return cursor.rowcount

    @staticmethod
    async def _insert_ingredient(
        conn: aiosqlite.Connection, ingredient: RecipeIngredient
    ) -> RecipeIngredient:
        cursor = await conn.execute(
            """
            INSERT INTO recipe_ingredients (recipe_id, item_id, quantity, unit)
            VALUES (?, ?, ?, ?)
            """,
            (ingredient.recipe_id, ingredient.item_id, ingredient.quantity, ingredient.unit),
        )
        ingredient.id = cursor.lastrowid
        return ingredient

    async def _load_ingredients(
        self, conn: aiosqlite.Connection, recipe_ids: list[int]
    ) -> dict[int, list[RecipeIngredient]]:
        """Ingredients of several recipes, grouped by recipe ID."""
        if not recipe_ids:
            return {}
        placeholders = ", ".join("?" for _ in recipe_ids)
        cursor = await conn.execute(
            f"""
            SELECT * FROM recipe_ingredients
            WHERE recipe_id IN ({placeholders})
            ORDER BY id
            """,
            recipe_ids,
        )
        grouped: dict[int, list[RecipeIngredient]] = {}
        for row in await cursor.fetchall():
            grouped.setdefault(row["recipe_id"], []).append(self._row_to_ingredient(row))
        return grouped

    @staticmethod
    def _row_to_ingredient(row: aiosqlite.Row) -> RecipeIngredient:
        return RecipeIngredient(
            id=row["id"],
            recipe_id=row["recipe_id"],
            item_id=row["item_id"],
            quantity=float(row["quantity"]),
            unit=row["unit"],
        )

    @staticmethod
    def _row_to_recipe(row: aiosqlite.Row) -> Recipe:
        """Convert a database row to a Recipe entity (without ingredients)."""
        created_at = None
        if row["created_at"]:
            try:
                created_at = datetime.fromisoformat(row["created_at"])
            except (ValueError, TypeError):
                pass

        updated_at = None
        if row["updated_at"]:
            try:
                updated_at = datetime.fromisoformat(row["updated_at"])
            except (ValueError, TypeError):
                pass

        return Recipe(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            selling_price=float(row["selling_price"]),
            recipe_cost=float(row["recipe_cost"]),
            profit=float(row["profit"]),
            profit_margin=float(row["profit_margin"]),
            image=row["image"],
            version=row["version"],
            created_at=created_at,
            updated_at=updated_at,
        )
