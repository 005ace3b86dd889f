"""
Costing arithmetic for items, recipes and orders.

Pure functions over current state; services call them at every mutation
point that can change a derived field.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from src.core.entities.order import OrderItem
from src.core.entities.recipe import RecipeIngredient

# Tolerance for float stock comparisons
QUANTITY_EPSILON = 1e-9


@dataclass(frozen=True)
class RestockCost:
    """Item cost fields after an "in" transaction."""

    quantity: float
    cost: float
    cost_per_unit: float


@dataclass(frozen=True)
class RecipeCosting:
    """Derived recipe fields."""

    recipe_cost: float
    profit: float
    profit_margin: float


def weighted_average_cost(
    old_quantity: float,
    old_cost_per_unit: float,
    restock_quantity: float,
    restock_cost: float,
) -> RestockCost:
    """
    Blend restocked units into the existing unit cost.

    Args:
        old_quantity: Units on hand before the restock.
        old_cost_per_unit: Unit cost before the restock.
        restock_quantity: Units received.
        restock_cost: Total cost of the units received.

    Returns:
        New quantity, stock value and unit cost.
    """
    quantity = old_quantity + restock_quantity
    cost = old_quantity * old_cost_per_unit + restock_cost
    if quantity > 0:
        cost_per_unit = cost / quantity
    else:
        cost_per_unit = old_cost_per_unit
    return RestockCost(quantity=quantity, cost=cost, cost_per_unit=cost_per_unit)


def compute_recipe_costing(
    selling_price: float,
    ingredients: Iterable[RecipeIngredient],
    cost_per_unit: Mapping[int, float],
) -> RecipeCosting:
    """
    Cost a recipe from its ingredients and the current item unit costs.

    Items missing from ``cost_per_unit`` contribute nothing. The margin is
    0 when the recipe is given away.
    """
    recipe_cost = sum(
        ingredient.quantity * cost_per_unit.get(ingredient.item_id, 0.0)
        for ingredient in ingredients
    )
    profit = selling_price - recipe_cost
    profit_margin = profit / selling_price if selling_price else 0.0
    return RecipeCosting(
        recipe_cost=recipe_cost,
        profit=profit,
        profit_margin=profit_margin,
    )


def order_total(lines: Iterable[OrderItem]) -> float:
    """Sum of price x quantity over order lines."""
    return sum(line.price * line.quantity for line in lines)


def aggregate_requirements(
    lines: Iterable[tuple[int, int]],
    ingredients_by_recipe: Mapping[int, list[RecipeIngredient]],
) -> dict[int, float]:
    """
    Total item quantities consumed by an order.

    Args:
        lines: (recipe_id, ordered quantity) pairs; a recipe may repeat.
        ingredients_by_recipe: Ingredients of every ordered recipe.

    Returns:
        Required quantity per item ID, summed across all lines.
    """
    required: dict[int, float] = {}
    for recipe_id, ordered in lines:
        for ingredient in ingredients_by_recipe.get(recipe_id, []):
            required[ingredient.item_id] = (
                required.get(ingredient.item_id, 0.0) + ingredient.quantity * ordered
            )
    return required
