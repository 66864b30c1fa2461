"""Models for structured assistant output."""

from pydantic import BaseModel, Field


class RecipeIdea(BaseModel):
    """Recipe proposed by the assistant from pantry contents."""

    title: str
    ingredients: list[str]
    instructions: str
    missing_ingredients: list[str] = Field(default_factory=list)
    prep_time: int | None = Field(default=None, ge=0)


class RecipeIdeas(BaseModel):
    """Structured output for recipe suggestions."""

    suggestions: list[RecipeIdea]


class SubstitutionIdeas(BaseModel):
    """Structured output for ingredient substitutions."""

    substitutions: list[str]
