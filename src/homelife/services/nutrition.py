"""Nutrition roll-ups computed from ingredient values.

Ingredient nutrition is stored per one unit of the ingredient, so a recipe line
contributes ``quantity`` times those values. Units are not converted.
"""

from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from homelife.domain.catalog import Ingredient
from homelife.domain.meal_plans import DAYS_PER_WEEK
from homelife.domain.nutrition import (
    DayNutrition,
    NutritionTotals,
    RecipeNutrition,
    WeeklyNutrition,
)
from homelife.domain.recipes import Recipe
from homelife.services.catalog import CatalogService
from homelife.services.meal_plans import MealPlanService
from homelife.services.recipes import RecipeService


@dataclass
class NutritionService:
    """Sums ingredient nutrition over recipes and planned weeks."""

    recipes: RecipeService
    catalog: CatalogService
    meal_plans: MealPlanService

    def get_recipe_nutrition(
        self, recipe_id: UUID, household_id: UUID
    ) -> RecipeNutrition:
        """Return totals for a household recipe or raise NotFound."""
        recipe = self.recipes.get_recipe(recipe_id, household_id)
        return self._recipe_nutrition(recipe, {})

    def get_weekly_nutrition(
        self, week_id: UUID, household_id: UUID
    ) -> WeeklyNutrition:
        """Return totals for every meal of a household week, day by day.

        Each planned meal counts its whole recipe, matching the quantities the
        shopping list is generated from.
        """
        week = self.meal_plans.get_week(week_id, household_id)
        ingredients: dict[UUID, Ingredient | None] = {}
        by_recipe: dict[UUID, NutritionTotals] = {}
        by_day = {day: NutritionTotals() for day in range(DAYS_PER_WEEK)}
        counts = dict.fromkeys(range(DAYS_PER_WEEK), 0)

        for meal in self.meal_plans.repository.list_meals(week.id):
            if meal.recipe_id not in by_recipe:
                recipe = self.recipes.repository.get_recipe(meal.recipe_id)
                if recipe is None or recipe.household_id != household_id:
                    continue
                by_recipe[meal.recipe_id] = self._recipe_nutrition(
                    recipe, ingredients
                ).total
            by_day[meal.day] = _add(by_day[meal.day], by_recipe[meal.recipe_id])
            counts[meal.day] += 1

        daily = []
        for offset in range(DAYS_PER_WEEK):
            on_date = week.start_date + timedelta(days=offset)
            day = (on_date.weekday() + 1) % DAYS_PER_WEEK
            daily.append(
                DayNutrition(
                    day=day,
                    on_date=on_date,
                    meals_count=counts[day],
                    total=_rounded(by_day[day]),
                )
            )

        total = NutritionTotals()
        for value in by_day.values():
            total = _add(total, value)
        return WeeklyNutrition(
            week_id=week.id,
            start_date=week.start_date,
            end_date=week.end_date,
            meals_count=sum(counts.values()),
            total=_rounded(total),
            daily_average=_rounded(_scale(total, 1 / DAYS_PER_WEEK)),
            daily=daily,
        )

    def _recipe_nutrition(
        self, recipe: Recipe, ingredients: dict[UUID, Ingredient | None]
    ) -> RecipeNutrition:
        total = NutritionTotals()
        for line in recipe.ingredients:
            if line.ingredient_id not in ingredients:
                ingredients[line.ingredient_id] = (
                    self.catalog.repository.get_ingredient(line.ingredient_id)
                )
            ingredient = ingredients[line.ingredient_id]
            if ingredient is None:
                continue
            total = _add(total, _scale(_per_unit(ingredient), line.quantity))

        per_serving = None
        if recipe.servings:
            per_serving = _rounded(_scale(total, 1 / recipe.servings))
        return RecipeNutrition(
            recipe_id=recipe.id,
            title=recipe.title,
            servings=recipe.servings,
            total=_rounded(total),
            per_serving=per_serving,
        )


def _per_unit(ingredient: Ingredient) -> NutritionTotals:
    return NutritionTotals(
        calories=ingredient.calories,
        protein=ingredient.protein,
        carbs=ingredient.carbs,
        fat=ingredient.fat,
    )


def _add(left: NutritionTotals, right: NutritionTotals) -> NutritionTotals:
    return NutritionTotals(
        calories=left.calories + right.calories,
        protein=left.protein + right.protein,
        carbs=left.carbs + right.carbs,
        fat=left.fat + right.fat,
    )


def _scale(totals: NutritionTotals, factor: float) -> NutritionTotals:
    return NutritionTotals(
        calories=totals.calories * factor,
        protein=totals.protein * factor,
        carbs=totals.carbs * factor,
        fat=totals.fat * factor,
    )


def _rounded(totals: NutritionTotals) -> NutritionTotals:
    return NutritionTotals(
        calories=round(totals.calories, 1),
        protein=round(totals.protein, 1),
        carbs=round(totals.carbs, 1),
        fat=round(totals.fat, 1),
    )
