"""Unit tests for costing arithmetic."""

import pytest

from src.core.entities.order import OrderItem
from src.core.entities.recipe import RecipeIngredient
from src.core.services.costing import (
    aggregate_requirements,
    compute_recipe_costing,
    order_total,
    weighted_average_cost,
)


class TestWeightedAverageCost:
    def test_restock_blends_unit_cost(self):
        """10 units at 2.0 plus 5 units costing 12.5 gives 15 at ~2.1667."""
        result = weighted_average_cost(10.0, 2.0, 5.0, 12.5)
        assert result.quantity == 15.0
        assert result.cost == pytest.approx(32.5)
        assert result.cost_per_unit == pytest.approx(2.1667, abs=1e-4)

    def test_first_restock(self):
        result = weighted_average_cost(0.0, 0.0, 4.0, 10.0)
        assert result.quantity == 4.0
        assert result.cost_per_unit == pytest.approx(2.5)

    def test_free_restock_lowers_unit_cost(self):
        result = weighted_average_cost(10.0, 2.0, 10.0, 0.0)
        assert result.cost_per_unit == pytest.approx(1.0)

    def test_zero_quantity_keeps_previous_unit_cost(self):
        result = weighted_average_cost(0.0, 3.0, 0.0, 0.0)
        assert result.quantity == 0.0
        assert result.cost_per_unit == 3.0


class TestComputeRecipeCosting:
    def test_cost_profit_margin(self):
        ingredients = [RecipeIngredient(item_id=1, quantity=2.0)]
        costing = compute_recipe_costing(10.0, ingredients, {1: 32.5 / 15})
        assert costing.recipe_cost == pytest.approx(4.3333, abs=1e-4)
        assert costing.profit == pytest.approx(5.6667, abs=1e-4)
        assert costing.profit_margin == pytest.approx(0.56667, abs=1e-5)

    def test_multiple_ingredients(self):
        ingredients = [
            RecipeIngredient(item_id=1, quantity=2.0),
            RecipeIngredient(item_id=2, quantity=0.5),
        ]
        costing = compute_recipe_costing(5.0, ingredients, {1: 1.0, 2: 4.0})
        assert costing.recipe_cost == pytest.approx(4.0)
        assert costing.profit == pytest.approx(1.0)

    def test_zero_price_margin_is_zero(self):
        ingredients = [RecipeIngredient(item_id=1, quantity=1.0)]
        costing = compute_recipe_costing(0.0, ingredients, {1: 3.0})
        assert costing.profit == pytest.approx(-3.0)
        assert costing.profit_margin == 0.0

    def test_loss_gives_negative_margin(self):
        ingredients = [RecipeIngredient(item_id=1, quantity=1.0)]
        costing = compute_recipe_costing(2.0, ingredients, {1: 3.0})
        assert costing.profit_margin == pytest.approx(-0.5)

    def test_no_ingredients(self):
        costing = compute_recipe_costing(8.0, [], {})
        assert costing.recipe_cost == 0.0
        assert costing.profit == 8.0
        assert costing.profit_margin == 1.0

    def test_unknown_item_costs_nothing(self):
        ingredients = [RecipeIngredient(item_id=9, quantity=1.0)]
        costing = compute_recipe_costing(4.0, ingredients, {})
        assert costing.recipe_cost == 0.0


class TestOrderArithmetic:
    def test_order_total(self):
        lines = [
            OrderItem(recipe_id=1, quantity=2, price=10.0),
            OrderItem(recipe_id=2, quantity=3, price=1.5),
        ]
        assert order_total(lines) == pytest.approx(24.5)

    def test_requirements_sum_across_lines(self):
        """Two recipes sharing an item add up into one requirement."""
        ingredients = {
            1: [RecipeIngredient(item_id=10, quantity=3.0)],
            2: [
                RecipeIngredient(item_id=10, quantity=3.0),
                RecipeIngredient(item_id=11, quantity=1.0),
            ],
        }
        required = aggregate_requirements([(1, 1), (2, 1)], ingredients)
        assert required == {10: 6.0, 11: 1.0}

    def test_requirements_repeated_recipe(self):
        ingredients = {1: [RecipeIngredient(item_id=10, quantity=2.0)]}
        required = aggregate_requirements([(1, 2), (1, 3)], ingredients)
        assert required == {10: 10.0}
