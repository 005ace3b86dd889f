"""
Recipe costing service.

Stored ``recipe_cost``, ``profit`` and ``profit_margin`` are a cache of
``compute_recipe_costing`` over current item unit costs. They are refreshed
in the same transaction as every ingredient edit, selling price change and
ingredient unit cost change.
"""

import uuid

from src.config import get_logger
from src.core.entities.recipe import Recipe, RecipeIngredient
from src.core.exceptions import (
    IngredientNotFoundError,
    ItemNotFoundError,
    RecipeNotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from src.core.interfaces.clock import IClock
from src.core.interfaces.image_store import IImageStore
from src.core.interfaces.item_store import IItemStore
from src.core.interfaces.recipe_store import IRecipeStore
from src.core.interfaces.transaction import ITransactionManager
from src.core.services.base import TransactionalService, require_finite
from src.core.services.costing import compute_recipe_costing

logger = get_logger(__name__)


def _require_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise ValidationError("name", "must not be empty", name)
    return name.strip()


def _require_price(selling_price: float) -> float:
    require_finite("selling_price", selling_price)
    if selling_price < 0:
        raise ValidationError("selling_price", "must not be negative", selling_price)
    return selling_price


def _require_quantity(quantity: float) -> float:
    require_finite("quantity", quantity)
    if not quantity > 0:
        raise ValidationError("quantity", "must be positive", quantity)
    return quantity


class RecipeCostingService(TransactionalService):
    """Manage recipes and keep their derived cost fields current."""

    def __init__(
        self,
        transaction_manager: ITransactionManager,
        recipe_store: IRecipeStore,
        item_store: IItemStore,
        image_store: IImageStore,
        clock: IClock,
    ):
        super().__init__(transaction_manager, clock)
        self._recipe_store = recipe_store
        self._item_store = item_store
        self._image_store = image_store

    # ------------------------------------------------------------------
    # Recipes
    # ------------------------------------------------------------------

    async def create_recipe(
        self,
        name: str,
        selling_price: float,
        description: str | None = None,
        ingredients: list[RecipeIngredient] | None = None,
    ) -> Recipe:
        """
        Create a recipe with its ingredients, costed before commit.

        Raises:
            ValidationError: Empty name, negative price or a non-positive
                ingredient quantity.
            ItemNotFoundError: An ingredient references a missing item.
        """
        ingredients = ingredients or []
        for ingredient in ingredients:
            _require_quantity(ingredient.quantity)
        recipe = Recipe(
            name=_require_name(name),
            description=description,
            selling_price=_require_price(selling_price),
            ingredients=[
                RecipeIngredient(
                    item_id=i.item_id, quantity=i.quantity, unit=i.unit
                )
                for i in ingredients
            ],
        )
        return await self._run_atomic(self._create_recipe, recipe)

    async def _create_recipe(self, recipe: Recipe) -> Recipe:
        items = await self._item_store.get_items([i.item_id for i in recipe.ingredients])
        for ingredient in recipe.ingredients:
            item = items.get(ingredient.item_id)
            if item is None:
                raise ItemNotFoundError(ingredient.item_id)
            if ingredient.unit is None:
                ingredient.unit = item.unit
        self._apply_costing(recipe, {i: item.cost_per_unit for i, item in items.items()})

        recipe = await self._recipe_store.create_recipe(recipe)
        logger.info(
            "recipe_created",
            recipe_id=recipe.id,
            name=recipe.name,
            ingredients=len(recipe.ingredients),
            recipe_cost=round(recipe.recipe_cost, 4),
        )
        return recipe

    async def update_recipe(
        self,
        recipe_id: int,
        name: str | None = None,
        description: str | None = None,
        selling_price: float | None = None,
    ) -> Recipe:
        """Edit recipe fields; a price change re-derives profit and margin."""
        if name is not None:
            name = _require_name(name)
        if selling_price is not None:
            _require_price(selling_price)
        return await self._run_atomic(
            self._update_recipe, recipe_id, name, description, selling_price
        )

    async def _update_recipe(
        self,
        recipe_id: int,
        name: str | None,
        description: str | None,
        selling_price: float | None,
    ) -> Recipe:
        recipe = await self._load_recipe(recipe_id)
        if name is not None:
            recipe.name = name
        if description is not None:
            recipe.description = description
        if selling_price is not None:
            recipe.selling_price = selling_price
        await self._refresh_costing(recipe)
        recipe = await self._recipe_store.update_recipe(recipe)
        logger.info("recipe_updated", recipe_id=recipe_id)
        return recipe

    async def get_recipe(self, recipe_id: int) -> Recipe:
        return await self._load_recipe(recipe_id)

    async def list_recipes(self, limit: int = 100, offset: int = 0) -> list[Recipe]:
        return await self._recipe_store.list_recipes(limit=limit, offset=offset)

    async def delete_recipe(self, recipe_id: int) -> None:
        """
        Delete a recipe and its ingredients.

        Financial records keep their amounts but lose the recipe link.

        Raises:
            RecipeNotFoundError: No recipe with this ID.
            ReferentialIntegrityError: Orders were placed for the recipe.
        """
        image = await self._run_atomic(self._delete_recipe, recipe_id)
        if image:
            await self._image_store.delete(image)

    async def _delete_recipe(self, recipe_id: int) -> str | None:
        recipe = await self._load_recipe(recipe_id)
        references = await self._recipe_store.count_order_references(recipe_id)
        if references:
            raise ReferentialIntegrityError("recipe", recipe_id, "order lines", references)
        detached = await self._recipe_store.detach_financial_records(recipe_id)
        await self._recipe_store.delete_recipe(recipe_id)
        logger.info("recipe_deleted", recipe_id=recipe_id, records_detached=detached)
        return recipe.image

    # ------------------------------------------------------------------
    # Ingredients
    # ------------------------------------------------------------------

    async def add_ingredient(
        self,
        recipe_id: int,
        item_id: int,
        quantity: float,
        unit: str | None = None,
    ) -> Recipe:
        """Attach an item to a recipe and re-cost it."""
        _require_quantity(quantity)
        return await self._run_atomic(self._add_ingredient, recipe_id, item_id, quantity, unit)

    async def _add_ingredient(
        self, recipe_id: int, item_id: int, quantity: float, unit: str | None
    ) -> Recipe:
        await self._load_recipe(recipe_id)
        item = await self._item_store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        ingredient = await self._recipe_store.add_ingredient(
            RecipeIngredient(
                recipe_id=recipe_id,
                item_id=item_id,
                quantity=quantity,
                unit=unit or item.unit,
            )
        )
        logger.info(
            "recipe_ingredient_added",
            recipe_id=recipe_id,
            ingredient_id=ingredient.id,
            item_id=item_id,
            quantity=quantity,
        )
        return await self._recompute(recipe_id)

    async def update_ingredient(
        self,
        ingredient_id: int,
        quantity: float | None = None,
        unit: str | None = None,
    ) -> Recipe:
        """Change an ingredient's quantity or unit and re-cost its recipe."""
        if quantity is not None:
            _require_quantity(quantity)
        return await self._run_atomic(self._update_ingredient, ingredient_id, quantity, unit)

    async def _update_ingredient(
        self, ingredient_id: int, quantity: float | None, unit: str | None
    ) -> Recipe:
        ingredient = await self._recipe_store.get_ingredient(ingredient_id)
        if ingredient is None:
            raise IngredientNotFoundError(ingredient_id)
        if quantity is not None:
            ingredient.quantity = quantity
        if unit is not None:
            ingredient.unit = unit
        await self._recipe_store.update_ingredient(ingredient)
        logger.info("recipe_ingredient_updated", ingredient_id=ingredient_id)
        return await self._recompute(ingredient.recipe_id)  # type: ignore[arg-type]

    async def remove_ingredient(self, ingredient_id: int) -> Recipe:
        """Detach an ingredient and re-cost its recipe."""
        return await self._run_atomic(self._remove_ingredient, ingredient_id)

    async def _remove_ingredient(self, ingredient_id: int) -> Recipe:
        ingredient = await self._recipe_store.get_ingredient(ingredient_id)
        if ingredient is None:
            raise IngredientNotFoundError(ingredient_id)
        await self._recipe_store.remove_ingredient(ingredient_id)
        logger.info(
            "recipe_ingredient_removed",
            recipe_id=ingredient.recipe_id,
            ingredient_id=ingredient_id,
        )
        return await self._recompute(ingredient.recipe_id)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Costing
    # ------------------------------------------------------------------

    async def recompute_recipe_cost(self, recipe_id: int) -> Recipe:
        """Re-derive cost, profit and margin from current item unit costs."""
        return await self._run_atomic(self._recompute, recipe_id)

    async def recompute_for_item(self, item_id: int) -> list[int]:
        """Re-cost every recipe using the item; returns their IDs."""
        return await self._run_atomic(self._recompute_for_item, item_id)

    async def _recompute_for_item(self, item_id: int) -> list[int]:
        recipe_ids = await self._recipe_store.list_recipe_ids_using_item(item_id)
        for recipe_id in recipe_ids:
            await self._recompute(recipe_id)
        return recipe_ids

    async def _recompute(self, recipe_id: int) -> Recipe:
        recipe = await self._load_recipe(recipe_id)
        await self._refresh_costing(recipe)
        recipe = await self._recipe_store.update_recipe(recipe)
        logger.debug(
            "recipe_cost_recomputed",
            recipe_id=recipe_id,
            recipe_cost=round(recipe.recipe_cost, 4),
            profit=round(recipe.profit, 4),
        )
        return recipe

    async def _refresh_costing(self, recipe: Recipe) -> None:
        items = await self._item_store.get_items(
            sorted({i.item_id for i in recipe.ingredients})
        )
        self._apply_costing(recipe, {i: item.cost_per_unit for i, item in items.items()})

    @staticmethod
    def _apply_costing(recipe: Recipe, cost_per_unit: dict[int, float]) -> None:
        costing = compute_recipe_costing(
            recipe.selling_price, recipe.ingredients, cost_per_unit
        )
        recipe.recipe_cost = costing.recipe_cost
        recipe.profit = costing.profit
        recipe.profit_margin = costing.profit_margin

    async def _load_recipe(self, recipe_id: int) -> Recipe:
        recipe = await self._recipe_store.get_recipe(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        return recipe

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def set_recipe_image(
        self, recipe_id: int, data: bytes, content_type: str | None = None
    ) -> Recipe:
        """Store an image for the recipe, replacing any previous one."""
        image_store = self._image_store
        if not data:
            raise ValidationError("image", "must not be empty")
        await self._load_recipe(recipe_id)

        reference = await image_store.save(
            f"recipe-{recipe_id}-{uuid.uuid4().hex[:8]}", data, content_type
        )
        try:
            recipe, previous = await self._run_atomic(
                self._set_image_reference, recipe_id, reference
            )
        except Exception:
            await image_store.delete(reference)
            raise
        if previous and previous != reference:
            await image_store.delete(previous)
        return recipe

    async def _set_image_reference(
        self, recipe_id: int, reference: str
    ) -> tuple[Recipe, str | None]:
        recipe = await self._load_recipe(recipe_id)
        previous = recipe.image
        recipe.image = reference
        recipe = await self._recipe_store.update_recipe(recipe)
        logger.info("recipe_image_set", recipe_id=recipe_id, reference=reference)
        return recipe, previous

    async def get_recipe_image(self, recipe_id: int) -> bytes | None:
        recipe = await self._load_recipe(recipe_id)
        if recipe.image is None:
            return None
        return await self._image_store.load(recipe.image)
