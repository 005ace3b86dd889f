"""Abstract interface for recipe storage."""

from abc import ABC, abstractmethod

from src.core.entities.recipe import Recipe, RecipeIngredient


class IRecipeStore(ABC):
    """Interface for recipe and recipe ingredient persistence."""

    @abstractmethod
    async def create_recipe(self, recipe: Recipe) -> Recipe:
        """Create a recipe with its ingredients."""
        pass

    @abstractmethod
    async def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Get recipe by ID, ingredients included."""
        pass

    @abstractmethod
    async def list_recipes(self, limit: int = 100, offset: int = 0) -> list[Recipe]:
        """List recipes ordered by name, ingredients included."""
        pass

    @abstractmethod
    async def update_recipe(self, recipe: Recipe) -> Recipe:
        """Persist recipe fields if its version is unchanged, bumping the version.

        Ingredients are not touched. Raises ConcurrentModificationError when
        the stored version differs.
        """
        pass

    @abstractmethod
    async def delete_recipe(self, recipe_id: int) -> bool:
        """Delete a recipe and its ingredients."""
        pass

    @abstractmethod
    async def add_ingredient(self, ingredient: RecipeIngredient) -> RecipeIngredient:
        """Attach an ingredient to its recipe."""
        pass

    @abstractmethod
    async def get_ingredient(self, ingredient_id: int) -> RecipeIngredient | None:
        """Get a recipe ingredient by ID."""
        pass

    @abstractmethod
    async def update_ingredient(self, ingredient: RecipeIngredient) -> RecipeIngredient:
        """Update an ingredient's quantity and unit."""
        pass

    @abstractmethod
    async def remove_ingredient(self, ingredient_id: int) -> bool:
        """Delete a recipe ingredient."""
        pass

    @abstractmethod
    async def list_recipe_ids_using_item(self, item_id: int) -> list[int]:
        """IDs of recipes with an ingredient referencing the item."""
        pass

    @abstractmethod
    async def count_order_references(self, recipe_id: int) -> int:
        """Count order lines pointing at the recipe."""
        pass

    @abstractmethod
    async def detach_financial_records(self, recipe_id: int) -> int:
        """Clear the weak recipe reference on financial records."""
        pass
