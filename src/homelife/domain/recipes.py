"""Domain models for recipes."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class RecipeIngredient:
    """One ingredient line of a recipe."""

    ingredient_id: UUID
    quantity: float
    unit_id: UUID
    ingredient_name: str | None = None


@dataclass(frozen=True)
class Recipe:
    """Household recipe with ordered ingredient lines."""

    id: UUID
    household_id: UUID
    title: str
    instructions: str
    tags: list[str] = field(default_factory=list)
    servings: int | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    ingredients: list[RecipeIngredient] = field(default_factory=list)


@dataclass(frozen=True)
class RecipeSuggestion:
    """Recipe ranked by how much of it the pantry covers."""

    recipe: Recipe
    available_count: int
    total_count: int
    missing: list[str]
    match_ratio: float


@dataclass(frozen=True)
class Substitution:
    """Suggested replacement for a missing ingredient."""

    missing_ingredient: str
    substitution: str
