"""Recipe and recipe costing endpoints."""

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status

from src.api.dependencies import get_app_settings, get_recipe_costing
from src.application.dto.requests import (
    CreateRecipeRequest,
    IngredientRequest,
    UpdateIngredientRequest,
    UpdateRecipeRequest,
)
from src.application.dto.responses import (
    ErrorResponse,
    RecipeIngredientResponse,
    RecipeListResponse,
    RecipeResponse,
)
from src.config import Settings
from src.core.entities.recipe import Recipe, RecipeIngredient
from src.core.services import RecipeCostingService
from src.infrastructure.storage.images import media_type_for

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


def recipe_to_response(recipe: Recipe) -> RecipeResponse:
    """Convert a Recipe entity to response DTO."""
    return RecipeResponse(
        id=recipe.id,  # type: ignore[arg-type]
        name=recipe.name,
        description=recipe.description,
        selling_price=recipe.selling_price,
        recipe_cost=recipe.recipe_cost,
        profit=recipe.profit,
        profit_margin=recipe.profit_margin,
        has_image=recipe.image is not None,
        version=recipe.version,
        ingredients=[
            RecipeIngredientResponse(
                id=i.id,  # type: ignore[arg-type]
                recipe_id=i.recipe_id,  # type: ignore[arg-type]
                item_id=i.item_id,
                quantity=i.quantity,
                unit=i.unit,
            )
            for i in recipe.ingredients
        ],
        created_at=recipe.created_at,
        updated_at=recipe.updated_at,
    )


@router.post(
    "",
    response_model=RecipeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_recipe(
    request: CreateRecipeRequest,
    costing: RecipeCostingService = Depends(get_recipe_costing),
) -> RecipeResponse:
    """Create a recipe; cost, profit and margin are derived immediately."""
    recipe = await costing.create_recipe(
        name=request.name,
        selling_price=request.selling_price,
        description=request.description,
        ingredients=[
            RecipeIngredient(item_id=i.item_id, quantity=i.quantity, unit=i.unit)
            for i in request.ingredients
        ],
    )
    return recipe_to_response(recipe)


@router.get("", response_model=RecipeListResponse)
async def list_recipes(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    costing: RecipeCostingService = Depends(get_recipe_costing),
) -> RecipeListResponse:
    recipes = await costing.list_recipes(limit=limit, offset=offset)
    return RecipeListResponse(
        recipes=[recipe_to_response(r) for r in recipes],
        total=len(recipes),
    )


@router.get(
    "/{recipe_id}",
    response_model=RecipeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_recipe(
    recipe_id: int,
    costing: RecipeCostingService = Depends(get_recipe_costing),
) -> RecipeResponse:
    return recipe_to_response(await costing.get_recipe(recipe_id))


@router.patch(
    "/{recipe_id}",
    response_model=RecipeResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_recipe(
    recipe_id: int,
    request: UpdateRecipeRequest,
    costing: RecipeCostingService = Depends(get_recipe_costing),
) -> RecipeResponse:
    recipe = await costing.update_recipe(
        recipe_id,
        name=request.name,
        description=request.description,
        selling_price=request.selling_price,
    )
    return recipe_to_response(recipe)


@router.delete(
    "/{recipe_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_recipe(
    recipe_id: int,
    costing: RecipeCostingService = Depends(get_recipe_costing),
) -> Response:
    """Delete a recipe that has never been ordered."""
    await costing.delete_recipe(recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{recipe_id}/recompute",
    response_model=RecipeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def recompute_recipe(
    recipe_id: int,
    costing: RecipeCostingService = Depends(get_recipe_costing),
) -> RecipeResponse:
    """Re-derive cost and profit from current ingredient unit costs."""
    return recipe_to_response(await costing.recompute_recipe_cost(recipe_id))


# --- Ingredients ---


@router.post(
    "/{recipe_id}/ingredients",
    response_model=RecipeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def add_ingredient(
    recipe_id: int,
    request: IngredientRequest,
    costing: RecipeCostingService = Depends(get_recipe_costing),
) -> RecipeResponse:
    recipe = await costing.add_ingredient(
        recipe_id, request.item_id, request.quantity, unit=request.unit
    )
    return recipe_to_response(recipe)


@router.patch(
    "/ingredients/{ingredient_id}",
    response_model=RecipeResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_ingredient(
    ingredient_id: int,
    request: UpdateIngredientRequest,
    costing: RecipeCostingService = Depends(get_recipe_costing),
) -> RecipeResponse:
    recipe = await costing.update_ingredient(
        ingredient_id, quantity=request.quantity, unit=request.unit
    )
    return recipe_to_response(recipe)


@router.delete(
    "/ingredients/{ingredient_id}",
    response_model=RecipeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def remove_ingredient(
    ingredient_id: int,
    costing: RecipeCostingService = Depends(get_recipe_costing),
) -> RecipeResponse:
    return recipe_to_response(await costing.remove_ingredient(ingredient_id))


# --- Image ---


@router.put(
    "/{recipe_id}/image",
    response_model=RecipeResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        415: {"model": ErrorResponse},
    },
)
async def upload_recipe_image(
    recipe_id: int,
    file: UploadFile = File(...),
    costing: RecipeCostingService = Depends(get_recipe_costing),
    settings: Settings = Depends(get_app_settings),
) -> RecipeResponse:
    """Attach an image to a recipe, replacing any previous one."""
    if file.content_type not in settings.api.allowed_image_types:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported image type: {file.content_type}",
        )
    data = await file.read()
    if len(data) > settings.api.max_image_size:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Image exceeds {settings.api.max_image_size} bytes",
        )
    recipe = await costing.set_recipe_image(recipe_id, data, file.content_type)
    return recipe_to_response(recipe)


@router.get(
    "/{recipe_id}/image",
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
)
async def get_recipe_image(
    recipe_id: int,
    costing: RecipeCostingService = Depends(get_recipe_costing),
) -> Response:
    recipe = await costing.get_recipe(recipe_id)
    data = await costing.get_recipe_image(recipe_id)
    if data is None or recipe.image is None:
        raise HTTPException(status_code=404, detail=f"Recipe {recipe_id} has no image")
    return Response(content=data, media_type=media_type_for(recipe.image))
