"""Dependency container wiring for the application."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from homelife.adapters.openai_assistant_client import OpenAIAssistantClient
from homelife.adapters.supabase_catalog_repository import SupabaseCatalogRepository
from homelife.adapters.supabase_expense_repository import SupabaseExpenseRepository
from homelife.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from homelife.adapters.supabase_pantry_repository import SupabasePantryRepository
from homelife.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from homelife.adapters.supabase_shopping_list_repository import (
    SupabaseShoppingListRepository,
)
from homelife.adapters.supabase_user_repository import SupabaseUserRepository
from homelife.adapters.webhook_client import HttpxWebhookClient
from homelife.config import Settings, parse_recipients
from homelife.services.alerts import AlertService
from homelife.services.assistant import AssistantService
from homelife.services.catalog import CatalogService
from homelife.services.expenses import ExpenseService
from homelife.services.insights import InsightsService
from homelife.services.meal_plans import MealPlanService
from homelife.services.notifications import NotificationDispatcher, build_routes
from homelife.services.nutrition import NutritionService
from homelife.services.pantry import PantryService
from homelife.services.recipes import RecipeService
from homelife.services.shopping import ShoppingListService
from homelife.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    catalog_service: CatalogService
    pantry_service: PantryService
    recipe_service: RecipeService
    meal_plan_service: MealPlanService
    shopping_list_service: ShoppingListService
    expense_service: ExpenseService
    insights_service: InsightsService
    nutrition_service: NutritionService
    assistant_service: AssistantService
    alert_service: AlertService
    dispatcher: NotificationDispatcher
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    catalog_repository = SupabaseCatalogRepository(supabase_client)
    pantry_repository = SupabasePantryRepository(supabase_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    meal_plan_repository = SupabaseMealPlanRepository(supabase_client)
    shopping_list_repository = SupabaseShoppingListRepository(supabase_client)
    expense_repository = SupabaseExpenseRepository(supabase_client)

    webhook_client = HttpxWebhookClient.create(
        timeout=resolved_settings.webhook_timeout_seconds
    )
    dispatcher = NotificationDispatcher(
        client=webhook_client,
        routes=build_routes(
            resolved_settings.n8n_webhook_url,
            resolved_settings.n8n_notification_webhook_url,
        ),
        queue=asyncio.Queue(maxsize=resolved_settings.notification_queue_size),
    )
    openai_client = (
        OpenAIAssistantClient.create(resolved_settings.openai_api_key)
        if resolved_settings.openai_api_key
        else None
    )
    assistant_service = AssistantService(
        client=openai_client, model=resolved_settings.openai_model
    )

    user_service = UserService(user_repository)
    catalog_service = CatalogService(catalog_repository)
    pantry_service = PantryService(pantry_repository, catalog_service)
    recipe_service = RecipeService(
        repository=recipe_repository,
        catalog=catalog_service,
        pantry=pantry_repository,
    )
    meal_plan_service = MealPlanService(
        repository=meal_plan_repository,
        recipes=recipe_repository,
        publisher=dispatcher,
        first_weekday=resolved_settings.week_start_day,
    )
    shopping_list_service = ShoppingListService(
        repository=shopping_list_repository,
        catalog=catalog_service,
        meal_plans=meal_plan_service,
        recipes=recipe_repository,
        pantry=pantry_repository,
    )
    expense_service = ExpenseService(
        expense_repository, first_weekday=resolved_settings.week_start_day
    )
    insights_service = InsightsService(
        pantry=pantry_service,
        meal_plans=meal_plan_service,
        expenses=expense_service,
        assistant=assistant_service,
    )
    nutrition_service = NutritionService(
        recipes=recipe_service,
        catalog=catalog_service,
        meal_plans=meal_plan_service,
    )
    alert_service = AlertService(
        pantry=pantry_service,
        users=user_service,
        dispatcher=dispatcher,
        extra_recipients=parse_recipients(resolved_settings.expiry_email_recipients),
    )

    async def close_resources() -> None:
        await dispatcher.stop()
        await webhook_client.close()
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        catalog_service=catalog_service,
        pantry_service=pantry_service,
        recipe_service=recipe_service,
        meal_plan_service=meal_plan_service,
        shopping_list_service=shopping_list_service,
        expense_service=expense_service,
        insights_service=insights_service,
        nutrition_service=nutrition_service,
        assistant_service=assistant_service,
        alert_service=alert_service,
        dispatcher=dispatcher,
        close_resources=close_resources,
    )
