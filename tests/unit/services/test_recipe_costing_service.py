"""Tests for RecipeCostingService."""

import math
from unittest.mock import AsyncMock

import pytest

from src.core.entities.item import Item
from src.core.entities.recipe import Recipe, RecipeIngredient
from src.core.exceptions import (
    IngredientNotFoundError,
    ItemNotFoundError,
    RecipeNotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from src.core.services.recipe_costing import RecipeCostingService

FLOUR = Item(id=1, name="Flour", unit="kg", quantity=15.0, cost=32.5, cost_per_unit=32.5 / 15)


def _assign_id(recipe: Recipe) -> Recipe:
    recipe.id = 7
    recipe.version = 1
    for n, ingredient in enumerate(recipe.ingredients, start=1):
        ingredient.id = n
        ingredient.recipe_id = 7
    return recipe


def _pancakes(**overrides) -> Recipe:
    fields = dict(
        id=7,
        name="Pancakes",
        selling_price=10.0,
        version=1,
        ingredients=[RecipeIngredient(id=1, recipe_id=7, item_id=1, quantity=2.0, unit="kg")],
    )
    fields.update(overrides)
    return Recipe(**fields)


@pytest.fixture
def mock_image_store():
    store = AsyncMock()
    store.save.return_value = "recipe-7-new.png"
    return store


@pytest.fixture
def costing(tx_manager, mock_recipe_store, mock_item_store, mock_image_store, fixed_clock):
    mock_recipe_store.create_recipe.side_effect = _assign_id
    mock_item_store.get_items.return_value = {1: FLOUR}
    mock_item_store.get_item.return_value = FLOUR
    return RecipeCostingService(
        transaction_manager=tx_manager,
        recipe_store=mock_recipe_store,
        item_store=mock_item_store,
        image_store=mock_image_store,
        clock=fixed_clock,
    )


class TestCreateRecipe:
    async def test_costed_on_create(self, costing):
        """Two units of flour at ~2.1667 sold at 10."""
        recipe = await costing.create_recipe(
            "Pancakes",
            10.0,
            ingredients=[RecipeIngredient(item_id=1, quantity=2.0)],
        )

        assert recipe.id == 7
        assert recipe.recipe_cost == pytest.approx(4.3333, abs=1e-4)
        assert recipe.profit == pytest.approx(5.6667, abs=1e-4)
        assert recipe.profit_margin == pytest.approx(0.56667, abs=1e-5)

    async def test_unit_defaults_to_item_unit(self, costing):
        recipe = await costing.create_recipe(
            "Pancakes", 10.0, ingredients=[RecipeIngredient(item_id=1, quantity=2.0)]
        )
        assert recipe.ingredients[0].unit == "kg"

    async def test_given_away_has_zero_margin(self, costing):
        recipe = await costing.create_recipe(
            "Sample", 0.0, ingredients=[RecipeIngredient(item_id=1, quantity=1.0)]
        )
        assert recipe.profit_margin == 0.0
        assert recipe.profit < 0

    async def test_missing_item(self, costing, mock_item_store, mock_recipe_store):
        mock_item_store.get_items.return_value = {}
        with pytest.raises(ItemNotFoundError):
            await costing.create_recipe(
                "Pancakes", 10.0, ingredients=[RecipeIngredient(item_id=1, quantity=2.0)]
            )
        mock_recipe_store.create_recipe.assert_not_awaited()

    async def test_negative_price(self, costing):
        with pytest.raises(ValidationError):
            await costing.create_recipe("Pancakes", -1.0)

    async def test_non_positive_ingredient_quantity(self, costing):
        with pytest.raises(ValidationError):
            await costing.create_recipe(
                "Pancakes", 10.0, ingredients=[RecipeIngredient(item_id=1, quantity=0.0)]
            )

    @pytest.mark.parametrize("price", [math.nan, math.inf])
    async def test_non_finite_price(self, costing, mock_recipe_store, price):
        with pytest.raises(ValidationError):
            await costing.create_recipe("Pancakes", price)
        mock_recipe_store.create_recipe.assert_not_awaited()

    async def test_non_finite_price_change(self, costing, mock_recipe_store):
        with pytest.raises(ValidationError):
            await costing.update_recipe(7, selling_price=math.nan)
        mock_recipe_store.update_recipe.assert_not_awaited()


class TestRecompute:
    async def test_price_change_rederives_profit(self, costing, mock_recipe_store):
        mock_recipe_store.get_recipe.return_value = _pancakes()

        recipe = await costing.update_recipe(7, selling_price=20.0)

        assert recipe.selling_price == 20.0
        assert recipe.recipe_cost == pytest.approx(4.3333, abs=1e-4)
        assert recipe.profit == pytest.approx(15.6667, abs=1e-4)

    async def test_recompute_for_item(self, costing, mock_recipe_store):
        mock_recipe_store.list_recipe_ids_using_item.return_value = [7, 8]
        mock_recipe_store.get_recipe.side_effect = lambda recipe_id: _pancakes(id=recipe_id)

        recomputed = await costing.recompute_for_item(1)

        assert recomputed == [7, 8]
        assert mock_recipe_store.update_recipe.await_count == 2

    async def test_recompute_missing_recipe(self, costing, mock_recipe_store):
        mock_recipe_store.get_recipe.return_value = None
        with pytest.raises(RecipeNotFoundError):
            await costing.recompute_recipe_cost(7)


class TestIngredients:
    async def test_add_ingredient_recosts(self, costing, mock_recipe_store):
        mock_recipe_store.get_recipe.return_value = _pancakes()
        mock_recipe_store.add_ingredient.side_effect = lambda ingredient: ingredient

        recipe = await costing.add_ingredient(7, 1, 2.0)

        added = mock_recipe_store.add_ingredient.call_args[0][0]
        assert added.unit == "kg"
        assert recipe.recipe_cost == pytest.approx(4.3333, abs=1e-4)

    async def test_add_ingredient_missing_item(self, costing, mock_recipe_store, mock_item_store):
        mock_recipe_store.get_recipe.return_value = _pancakes()
        mock_item_store.get_item.return_value = None
        with pytest.raises(ItemNotFoundError):
            await costing.add_ingredient(7, 99, 1.0)

    @pytest.mark.parametrize("quantity", [math.nan, math.inf])
    async def test_add_non_finite_quantity(self, costing, mock_recipe_store, quantity):
        mock_recipe_store.get_recipe.return_value = _pancakes()
        with pytest.raises(ValidationError):
            await costing.add_ingredient(7, 1, quantity)
        mock_recipe_store.add_ingredient.assert_not_awaited()

    async def test_update_non_finite_quantity(self, costing, mock_recipe_store):
        with pytest.raises(ValidationError):
            await costing.update_ingredient(5, quantity=math.inf)
        mock_recipe_store.update_ingredient.assert_not_awaited()

    async def test_update_missing_ingredient(self, costing, mock_recipe_store):
        mock_recipe_store.get_ingredient.return_value = None
        with pytest.raises(IngredientNotFoundError):
            await costing.update_ingredient(5, quantity=1.0)

    async def test_remove_ingredient(self, costing, mock_recipe_store):
        mock_recipe_store.get_ingredient.return_value = RecipeIngredient(
            id=1, recipe_id=7, item_id=1, quantity=2.0
        )
        mock_recipe_store.get_recipe.return_value = _pancakes(ingredients=[])

        recipe = await costing.remove_ingredient(1)

        mock_recipe_store.remove_ingredient.assert_awaited_once_with(1)
        assert recipe.recipe_cost == 0.0
        assert recipe.profit == 10.0


class TestDeleteRecipe:
    async def test_delete_detaches_records_and_image(
        self, costing, mock_recipe_store, mock_image_store
    ):
        mock_recipe_store.get_recipe.return_value = _pancakes(image="recipe-7-old.png")
        mock_recipe_store.count_order_references.return_value = 0

        await costing.delete_recipe(7)

        mock_recipe_store.detach_financial_records.assert_awaited_once_with(7)
        mock_recipe_store.delete_recipe.assert_awaited_once_with(7)
        mock_image_store.delete.assert_awaited_once_with("recipe-7-old.png")

    async def test_delete_ordered_recipe(self, costing, mock_recipe_store, mock_image_store):
        mock_recipe_store.get_recipe.return_value = _pancakes()
        mock_recipe_store.count_order_references.return_value = 3

        with pytest.raises(ReferentialIntegrityError):
            await costing.delete_recipe(7)

        mock_recipe_store.delete_recipe.assert_not_awaited()
        mock_image_store.delete.assert_not_awaited()


class TestImages:
    async def test_replace_image(self, costing, mock_recipe_store, mock_image_store):
        mock_recipe_store.get_recipe.side_effect = lambda recipe_id: _pancakes(
            image="recipe-7-old.png"
        )

        recipe = await costing.set_recipe_image(7, b"\x89PNG", "image/png")

        assert recipe.image == "recipe-7-new.png"
        mock_image_store.delete.assert_awaited_once_with("recipe-7-old.png")

    async def test_empty_image(self, costing):
        with pytest.raises(ValidationError):
            await costing.set_recipe_image(7, b"", "image/png")

    async def test_failed_update_removes_new_image(
        self, costing, mock_recipe_store, mock_image_store
    ):
        mock_recipe_store.get_recipe.return_value = _pancakes()
        mock_recipe_store.update_recipe.side_effect = RuntimeError("disk full")

        with pytest.raises(RuntimeError):
            await costing.set_recipe_image(7, b"\x89PNG", "image/png")

        mock_image_store.delete.assert_awaited_once_with("recipe-7-new.png")

    async def test_no_image(self, costing, mock_recipe_store, mock_image_store):
        mock_recipe_store.get_recipe.return_value = _pancakes()
        assert await costing.get_recipe_image(7) is None
        mock_image_store.load.assert_not_awaited()
