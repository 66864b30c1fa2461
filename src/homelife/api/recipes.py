"""Recipe endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from homelife.api.dependencies import Member, get_container, require_member
from homelife.api.responses import success
from homelife.api.schemas import RecipeCreate, RecipeUpdate
from homelife.containers import AppContainer
from homelife.domain.recipes import Substitution

router = APIRouter(prefix="/v0.1/recipes", tags=["recipes"])

NO_SUBSTITUTION = "No substitution found"


@router.get("")
async def list_recipes(
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return household recipes."""
    return success(container.recipe_service.list_recipes(member.household_id))


@router.post("")
async def create_recipe(
    body: RecipeCreate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create a recipe."""
    recipe = container.recipe_service.create_recipe(
        member.household_id, body.model_dump(exclude_unset=True)
    )
    return success(recipe)


@router.get("/suggestions")
async def suggestions(
    limit: int = Query(default=5),
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Rank recipes by how much of them the pantry covers."""
    return success(
        container.recipe_service.suggest_from_pantry(member.household_id, limit)
    )


@router.get("/{recipe_id}")
async def get_recipe(
    recipe_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return a recipe with its ingredient lines."""
    return success(
        container.recipe_service.get_recipe(recipe_id, member.household_id)
    )


@router.post("/{recipe_id}/update")
async def update_recipe(
    recipe_id: UUID,
    body: RecipeUpdate,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Update a recipe."""
    recipe = container.recipe_service.update_recipe(
        recipe_id, member.household_id, body.model_dump(exclude_unset=True)
    )
    return success(recipe)


@router.post("/{recipe_id}/delete")
async def delete_recipe(
    recipe_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Delete a recipe."""
    container.recipe_service.delete_recipe(recipe_id, member.household_id)
    return success()


@router.get("/{recipe_id}/substitutions")
async def substitutions(
    recipe_id: UUID,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Suggest replacements for recipe ingredients missing from the pantry."""
    missing = container.recipe_service.missing_ingredients(
        recipe_id, member.household_id
    )
    pantry_names = container.pantry_service.ingredient_names(member.household_id)
    results = []
    for line in missing:
        name = line.ingredient_name or str(line.ingredient_id)
        options = await container.assistant_service.suggest_substitutions(
            name, pantry_names
        )
        results.append(
            Substitution(
                missing_ingredient=name,
                substitution=options[0] if options else NO_SUBSTITUTION,
            )
        )
    return success(results)
