"""Request bodies accepted by the HTTP API."""

import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RequestBody(BaseModel):
    """Base for request bodies; numbers must be finite."""

    model_config = ConfigDict(allow_inf_nan=False)


class UnitCreate(RequestBody):
    """Body for creating a unit."""

    name: str = Field(max_length=255)
    abbreviation: str | None = Field(default=None, max_length=10)


class IngredientCreate(RequestBody):
    """Body for creating an ingredient."""

    name: str = Field(max_length=255)
    unit_id: UUID | None = None
    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None


class PantryItemCreate(RequestBody):
    """Body for adding stock."""

    ingredient_id: UUID
    quantity: float
    unit_id: UUID
    expiry_date: datetime.date | None = None
    location: str | None = Field(default=None, max_length=255)


class PantryItemUpdate(RequestBody):
    """Body for updating stock and, optionally, its ingredient."""

    quantity: float | None = None
    unit_id: UUID | None = None
    expiry_date: datetime.date | None = None
    location: str | None = Field(default=None, max_length=255)
    ingredient_name: str | None = Field(default=None, max_length=255)
    name: str | None = Field(default=None, max_length=255)
    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None


class ExpiryUpdate(RequestBody):
    """Body for changing an expiry date."""

    expiry_date: datetime.date


class ConsumeRequest(RequestBody):
    """Body for consuming stock."""

    quantity: float


class RecipeLine(RequestBody):
    """Ingredient line given by id or by name."""

    quantity: float
    ingredient_id: UUID | None = None
    ingredient: str | None = None
    name: str | None = None
    unit_id: UUID | None = None
    unit: str | None = None


class RecipeCreate(RequestBody):
    """Body for creating a recipe."""

    title: str = Field(max_length=255)
    instructions: str
    tags: list[str] | None = None
    servings: int | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    ingredients: list[RecipeLine] | None = None


class RecipeUpdate(RequestBody):
    """Body for updating a recipe."""

    title: str | None = Field(default=None, max_length=255)
    instructions: str | None = None
    tags: list[str] | None = None
    servings: int | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    ingredients: list[RecipeLine] | None = None


class WeekCreate(RequestBody):
    """Body for creating a planning week."""

    start_date: datetime.date


class MealCreate(RequestBody):
    """Body for assigning a recipe to a grid cell."""

    day: int | str
    slot: str | None = None
    meal_type: str | None = None
    recipe_id: UUID


class ShoppingListCreate(RequestBody):
    """Body for creating a shopping list."""

    title: str = Field(max_length=255)
    week_id: UUID | None = None


class ShoppingListUpdate(RequestBody):
    """Body for updating a shopping list."""

    title: str | None = Field(default=None, max_length=255)
    is_completed: bool | None = None


class ShoppingListGenerate(RequestBody):
    """Body for generating a list from a week's meals."""

    week_id: UUID
    title: str | None = Field(default=None, max_length=255)


class ShoppingItemCreate(RequestBody):
    """Body for adding a line to a list."""

    ingredient_id: UUID
    quantity: float
    unit_id: UUID


class ShoppingItemUpdate(RequestBody):
    """Body for updating a list line."""

    quantity: float | None = None
    bought: bool | None = None


class ExpenseCreate(RequestBody):
    """Body for recording an expense."""

    amount: float
    date: datetime.date | None = None
    store: str | None = Field(default=None, max_length=255)
    category: str | None = Field(default=None, max_length=255)
    note: str | None = None
    receipt_link: str | None = None


class ExpenseUpdate(RequestBody):
    """Body for updating an expense."""

    amount: float | None = None
    date: datetime.date | None = None
    store: str | None = Field(default=None, max_length=255)
    category: str | None = Field(default=None, max_length=255)
    note: str | None = None
    receipt_link: str | None = None


class NotificationRequest(RequestBody):
    """Body for a free-form notification."""

    channels: list[str]
    message: str
    sender_email: str
    subject: str | None = None
