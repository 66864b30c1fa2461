"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import date
from uuid import UUID, uuid4

import pytest

from homelife.config import Settings
from homelife.containers import AppContainer
from homelife.domain.catalog import Ingredient, Unit
from homelife.domain.errors import ExternalDependencyError
from homelife.domain.expenses import Expense
from homelife.domain.meal_plans import Meal, MealSlot, Week
from homelife.domain.models import HouseholdRecord, UserRecord
from homelife.domain.notifications import NotificationEvent
from homelife.domain.pantry import InventoryItem
from homelife.domain.recipes import Recipe, RecipeIngredient
from homelife.domain.shopping import ShoppingList, ShoppingListItem
from homelife.services.alerts import AlertService
from homelife.services.assistant import AssistantClient, AssistantService
from homelife.services.catalog import CatalogRepository, CatalogService
from homelife.services.expenses import ExpenseRepository, ExpenseService
from homelife.services.insights import InsightsService
from homelife.services.meal_plans import MealPlanRepository, MealPlanService
from homelife.services.notifications import (
    EventPublisher,
    NotificationDispatcher,
    WebhookClient,
    build_routes,
)
from homelife.services.nutrition import NutritionService
from homelife.services.pantry import PantryRepository, PantryService
from homelife.services.recipes import RecipeRepository, RecipeService
from homelife.services.shopping import ShoppingListRepository, ShoppingListService
from homelife.services.users import UserRepository, UserService, hash_token

HOUSEHOLD_ID = UUID("11111111-1111-4111-8111-111111111111")
OTHER_HOUSEHOLD_ID = UUID("22222222-2222-4222-8222-222222222222")
MEMBER_TOKEN = "member-token"
LONER_TOKEN = "loner-token"
MEAL_PLAN_WEBHOOK = "https://hooks.test/meal-plan"
NOTIFICATION_WEBHOOK = "https://hooks.test/notify"

MEMBER = UserRecord(
    id=UUID("33333333-3333-4333-8333-333333333333"),
    email="sam@example.com",
    name="Sam",
    household_id=HOUSEHOLD_ID,
)
LONER = UserRecord(
    id=UUID("44444444-4444-4444-8444-444444444444"),
    email="alex@example.com",
    name="Alex",
    household_id=None,
)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[str, UserRecord] = field(default_factory=dict)
    households: list[HouseholdRecord] = field(default_factory=list)

    def add_user(self, token: str, user: UserRecord) -> None:
        self.users[hash_token(token)] = user

    def get_by_token_hash(self, token_hash: str) -> UserRecord | None:
        return self.users.get(token_hash)

    def list_households(self) -> list[HouseholdRecord]:
        return list(self.households)


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory units and ingredients."""

    units: dict[UUID, Unit] = field(default_factory=dict)
    ingredients: dict[UUID, Ingredient] = field(default_factory=dict)

    def add_unit(self, name: str, abbreviation: str | None = None) -> Unit:
        return self.create_unit(name, abbreviation)

    def add_ingredient(
        self, household_id: UUID, name: str, unit_id: UUID | None = None
    ) -> Ingredient:
        return self.create_ingredient(household_id, {"name": name, "unit_id": unit_id})

    def get_unit(self, unit_id: UUID) -> Unit | None:
        return self.units.get(unit_id)

    def find_unit_by_abbreviation(self, abbreviation: str) -> Unit | None:
        return next(
            (unit for unit in self.units.values() if unit.abbreviation == abbreviation),
            None,
        )

    def find_unit_by_name(self, name: str) -> Unit | None:
        lowered = name.lower()
        return next(
            (unit for unit in self.units.values() if unit.name.lower() == lowered),
            None,
        )

    def list_units(self) -> list[Unit]:
        return sorted(self.units.values(), key=lambda unit: unit.name)

    def create_unit(self, name: str, abbreviation: str | None) -> Unit:
        unit = Unit(id=uuid4(), name=name, abbreviation=abbreviation)
        self.units[unit.id] = unit
        return unit

    def get_ingredient(self, ingredient_id: UUID) -> Ingredient | None:
        return self.ingredients.get(ingredient_id)

    def find_ingredient_by_name(
        self, household_id: UUID, name: str
    ) -> Ingredient | None:
        lowered = name.lower()
        return next(
            (
                ingredient
                for ingredient in self.ingredients.values()
                if ingredient.household_id == household_id
                and ingredient.name.lower() == lowered
            ),
            None,
        )

    def list_ingredients(
        self, household_id: UUID, search: str | None
    ) -> list[Ingredient]:
        rows = [
            ingredient
            for ingredient in self.ingredients.values()
            if ingredient.household_id == household_id
            and (not search or search.lower() in ingredient.name.lower())
        ]
        return sorted(rows, key=lambda ingredient: ingredient.name)

    def create_ingredient(
        self, household_id: UUID, payload: dict[str, object]
    ) -> Ingredient:
        ingredient = Ingredient(
            id=uuid4(),
            household_id=household_id,
            name=str(payload["name"]),
            calories=float(payload.get("calories") or 0.0),
            protein=float(payload.get("protein") or 0.0),
            carbs=float(payload.get("carbs") or 0.0),
            fat=float(payload.get("fat") or 0.0),
            unit_id=payload.get("unit_id"),
        )
        self.ingredients[ingredient.id] = ingredient
        return ingredient

    def update_ingredient(
        self, ingredient_id: UUID, payload: dict[str, object]
    ) -> Ingredient:
        ingredient = replace(self.ingredients[ingredient_id], **payload)
        self.ingredients[ingredient_id] = ingredient
        return ingredient


@dataclass
class InMemoryPantryRepository(PantryRepository):
    """In-memory stock rows with compare-and-set writes.

    ``concurrent_writes`` makes that many conditional writes lose the race.
    """

    catalog: InMemoryCatalogRepository
    items: dict[UUID, InventoryItem] = field(default_factory=dict)
    concurrent_writes: int = 0

    def get_item(self, item_id: UUID) -> InventoryItem | None:
        item = self.items.get(item_id)
        return self._named(item) if item else None

    def list_items(self, household_id: UUID) -> list[InventoryItem]:
        return [
            self._named(item)
            for item in self.items.values()
            if item.household_id == household_id
        ]

    def create_item(
        self, household_id: UUID, payload: dict[str, object]
    ) -> InventoryItem:
        item = InventoryItem(
            id=uuid4(),
            household_id=household_id,
            ingredient_id=payload["ingredient_id"],
            quantity=float(payload["quantity"]),
            unit_id=payload["unit_id"],
            expiry_date=payload.get("expiry_date"),
            location=payload.get("location"),
        )
        self.items[item.id] = item
        return self._named(item)

    def update_item(self, item_id: UUID, payload: dict[str, object]) -> InventoryItem:
        self.items[item_id] = replace(self.items[item_id], **payload)
        return self._named(self.items[item_id])

    def delete_item(self, item_id: UUID) -> bool:
        return self.items.pop(item_id, None) is not None

    def update_quantity_if(
        self, item_id: UUID, expected: float, quantity: float
    ) -> InventoryItem | None:
        item = self.items.get(item_id)
        if item is None or item.quantity != expected or self._lose_race():
            return None
        return self.update_item(item_id, {"quantity": quantity})

    def delete_item_if(self, item_id: UUID, expected: float) -> bool:
        item = self.items.get(item_id)
        if item is None or item.quantity != expected or self._lose_race():
            return False
        del self.items[item_id]
        return True

    def collapse_items(
        self, keep_id: UUID, remove_ids: list[UUID]
    ) -> InventoryItem | None:
        keep = self.items.get(keep_id)
        if keep is None:
            return None
        rows = [keep]
        for item_id in remove_ids:
            row = self.items.get(item_id)
            if (
                row is not None
                and row.household_id == keep.household_id
                and (row.ingredient_id, row.unit_id)
                == (keep.ingredient_id, keep.unit_id)
            ):
                rows.append(self.items.pop(item_id))
        expiry_dates = [row.expiry_date for row in rows if row.expiry_date]
        return self.update_item(
            keep_id,
            {
                "quantity": sum(row.quantity for row in rows),
                "expiry_date": min(expiry_dates) if expiry_dates else None,
            },
        )

    def list_expiring_between(
        self, household_id: UUID, start: date, end: date
    ) -> list[InventoryItem]:
        rows = [
            item
            for item in self.list_items(household_id)
            if item.expiry_date is not None and start <= item.expiry_date < end
        ]
        return sorted(rows, key=lambda item: item.expiry_date)

    def _lose_race(self) -> bool:
        if self.concurrent_writes > 0:
            self.concurrent_writes -= 1
            return True
        return False

    def _named(self, item: InventoryItem) -> InventoryItem:
        ingredient = self.catalog.ingredients.get(item.ingredient_id)
        unit = self.catalog.units.get(item.unit_id)
        return replace(
            item,
            ingredient_name=ingredient.name if ingredient else None,
            unit_name=unit.name if unit else None,
        )


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipes."""

    recipes: dict[UUID, Recipe] = field(default_factory=dict)

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        return self.recipes.get(recipe_id)

    def list_recipes(self, household_id: UUID) -> list[Recipe]:
        return [
            recipe
            for recipe in self.recipes.values()
            if recipe.household_id == household_id
        ]

    def create_recipe(
        self,
        household_id: UUID,
        payload: dict[str, object],
        lines: list[RecipeIngredient],
    ) -> Recipe:
        recipe = Recipe(
            id=uuid4(),
            household_id=household_id,
            title=str(payload["title"]),
            instructions=str(payload["instructions"]),
            tags=list(payload.get("tags") or []),
            servings=payload.get("servings"),
            prep_time=payload.get("prep_time"),
            cook_time=payload.get("cook_time"),
            ingredients=list(lines),
        )
        self.recipes[recipe.id] = recipe
        return recipe

    def update_recipe(
        self,
        recipe_id: UUID,
        payload: dict[str, object],
        lines: list[RecipeIngredient] | None,
    ) -> Recipe:
        changes = dict(payload)
        if lines is not None:
            changes["ingredients"] = list(lines)
        self.recipes[recipe_id] = replace(self.recipes[recipe_id], **changes)
        return self.recipes[recipe_id]

    def delete_recipe(self, recipe_id: UUID) -> bool:
        return self.recipes.pop(recipe_id, None) is not None


@dataclass
class InMemoryMealPlanRepository(MealPlanRepository):
    """In-memory weeks and meals keyed like the unique constraints."""

    recipes: InMemoryRecipeRepository
    weeks: dict[UUID, Week] = field(default_factory=dict)
    meals: dict[UUID, Meal] = field(default_factory=dict)

    def get_week(self, week_id: UUID) -> Week | None:
        return self.weeks.get(week_id)

    def find_week(self, household_id: UUID, start_date: date) -> Week | None:
        return next(
            (
                week
                for week in self.weeks.values()
                if week.household_id == household_id and week.start_date == start_date
            ),
            None,
        )

    def upsert_week(self, household_id: UUID, start_date: date, end_date: date) -> Week:
        existing = self.find_week(household_id, start_date)
        if existing:
            return existing
        week = Week(
            id=uuid4(),
            household_id=household_id,
            start_date=start_date,
            end_date=end_date,
        )
        self.weeks[week.id] = week
        return week

    def list_meals(self, week_id: UUID) -> list[Meal]:
        order = list(MealSlot)
        meals = [
            self._titled(meal)
            for meal in self.meals.values()
            if meal.week_id == week_id
        ]
        return sorted(meals, key=lambda meal: (meal.day, order.index(meal.slot)))

    def get_meal(self, meal_id: UUID) -> Meal | None:
        meal = self.meals.get(meal_id)
        return self._titled(meal) if meal else None

    def upsert_meal(
        self, week_id: UUID, day: int, slot: MealSlot, recipe_id: UUID
    ) -> Meal:
        for meal in self.meals.values():
            if meal.week_id == week_id and meal.day == day and meal.slot == slot:
                self.meals[meal.id] = replace(meal, recipe_id=recipe_id)
                return self._titled(self.meals[meal.id])
        meal = Meal(
            id=uuid4(), week_id=week_id, day=day, slot=slot, recipe_id=recipe_id
        )
        self.meals[meal.id] = meal
        return self._titled(meal)

    def delete_meal(self, meal_id: UUID) -> bool:
        return self.meals.pop(meal_id, None) is not None

    def _titled(self, meal: Meal) -> Meal:
        recipe = self.recipes.get_recipe(meal.recipe_id)
        return replace(meal, recipe_title=recipe.title if recipe else None)


@dataclass
class InMemoryShoppingListRepository(ShoppingListRepository):
    """In-memory shopping lists."""

    lists: dict[UUID, ShoppingList] = field(default_factory=dict)
    items: dict[UUID, ShoppingListItem] = field(default_factory=dict)

    def get_list(self, list_id: UUID) -> ShoppingList | None:
        shopping_list = self.lists.get(list_id)
        return self._with_items(shopping_list) if shopping_list else None

    def list_lists(self, household_id: UUID) -> list[ShoppingList]:
        return [
            self._with_items(shopping_list)
            for shopping_list in reversed(list(self.lists.values()))
            if shopping_list.household_id == household_id
        ]

    def create_list(
        self, household_id: UUID, title: str, week_id: UUID | None
    ) -> ShoppingList:
        shopping_list = ShoppingList(
            id=uuid4(),
            household_id=household_id,
            title=title,
            week_id=week_id,
            is_completed=False,
        )
        self.lists[shopping_list.id] = shopping_list
        return shopping_list

    def update_list(self, list_id: UUID, payload: dict[str, object]) -> ShoppingList:
        self.lists[list_id] = replace(self.lists[list_id], **payload)
        return self._with_items(self.lists[list_id])

    def delete_list(self, list_id: UUID) -> bool:
        for item_id in [
            item.id for item in self.items.values() if item.shopping_list_id == list_id
        ]:
            del self.items[item_id]
        return self.lists.pop(list_id, None) is not None

    def add_items(
        self, list_id: UUID, items: list[dict[str, object]]
    ) -> list[ShoppingListItem]:
        created = []
        for payload in items:
            item = ShoppingListItem(
                id=uuid4(),
                shopping_list_id=list_id,
                ingredient_id=payload["ingredient_id"],
                quantity=float(payload["quantity"]),
                unit_id=payload["unit_id"],
            )
            self.items[item.id] = item
            created.append(item)
        return created

    def get_item(self, item_id: UUID) -> ShoppingListItem | None:
        return self.items.get(item_id)

    def update_item(
        self, item_id: UUID, payload: dict[str, object]
    ) -> ShoppingListItem:
        self.items[item_id] = replace(self.items[item_id], **payload)
        return self.items[item_id]

    def delete_item(self, item_id: UUID) -> bool:
        return self.items.pop(item_id, None) is not None

    def _with_items(self, shopping_list: ShoppingList) -> ShoppingList:
        return replace(
            shopping_list,
            items=[
                item
                for item in self.items.values()
                if item.shopping_list_id == shopping_list.id
            ],
        )


@dataclass
class InMemoryExpenseRepository(ExpenseRepository):
    """In-memory expenses."""

    expenses: dict[UUID, Expense] = field(default_factory=dict)

    def get_expense(self, expense_id: UUID) -> Expense | None:
        return self.expenses.get(expense_id)

    def list_expenses(
        self, household_id: UUID, start: date | None = None, end: date | None = None
    ) -> list[Expense]:
        rows = [
            expense
            for expense in self.expenses.values()
            if expense.household_id == household_id
            and (start is None or expense.date >= start)
            and (end is None or expense.date <= end)
        ]
        return sorted(rows, key=lambda expense: expense.date, reverse=True)

    def create_expense(self, household_id: UUID, payload: dict[str, object]) -> Expense:
        expense = Expense(
            id=uuid4(),
            household_id=household_id,
            store=payload.get("store"),
            amount=float(payload["amount"]),
            date=payload["date"],
            category=payload.get("category"),
            note=payload.get("note"),
            receipt_link=payload.get("receipt_link"),
        )
        self.expenses[expense.id] = expense
        return expense

    def update_expense(self, expense_id: UUID, payload: dict[str, object]) -> Expense:
        self.expenses[expense_id] = replace(self.expenses[expense_id], **payload)
        return self.expenses[expense_id]

    def delete_expense(self, expense_id: UUID) -> bool:
        return self.expenses.pop(expense_id, None) is not None


@dataclass
class RecordingPublisher(EventPublisher):
    """Publisher that keeps events in memory."""

    events: list[NotificationEvent] = field(default_factory=list)

    def publish(self, event: NotificationEvent) -> None:
        self.events.append(event)


@dataclass
class FakeWebhookClient(WebhookClient):
    """Webhook client that records posts or fails on demand."""

    posts: list[tuple[str, dict[str, object]]] = field(default_factory=list)
    fail: bool = False

    async def post_json(self, url: str, payload: dict[str, object]) -> None:
        if self.fail:
            raise ExternalDependencyError("webhook unavailable")
        self.posts.append((url, payload))


@dataclass
class FakeAssistantClient(AssistantClient):
    """Assistant client returning canned answers keyed by schema name."""

    text: str = "Plenty planned and little waste this week."
    payloads: dict[str, dict[str, object]] = field(default_factory=dict)
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def complete(self, *, model: str, instructions: str, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.text

    async def complete_json(  # noqa: PLR0913
        self,
        *,
        model: str,
        instructions: str,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.payloads.get(schema_name, {})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
        openai_api_key="openai-key",
        n8n_webhook_url=MEAL_PLAN_WEBHOOK,
        n8n_notification_webhook_url=NOTIFICATION_WEBHOOK,
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    repository = InMemoryUserRepository(
        households=[
            HouseholdRecord(id=HOUSEHOLD_ID, name="Home", member_emails=[MEMBER.email])
        ]
    )
    repository.add_user(MEMBER_TOKEN, MEMBER)
    repository.add_user(LONER_TOKEN, LONER)
    return repository


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def catalog_service(catalog_repository: InMemoryCatalogRepository) -> CatalogService:
    return CatalogService(catalog_repository)


@pytest.fixture
def pantry_repository(
    catalog_repository: InMemoryCatalogRepository,
) -> InMemoryPantryRepository:
    return InMemoryPantryRepository(catalog=catalog_repository)


@pytest.fixture
def pantry_service(
    pantry_repository: InMemoryPantryRepository, catalog_service: CatalogService
) -> PantryService:
    return PantryService(pantry_repository, catalog_service)


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def recipe_service(
    recipe_repository: InMemoryRecipeRepository,
    catalog_service: CatalogService,
    pantry_repository: InMemoryPantryRepository,
) -> RecipeService:
    return RecipeService(
        repository=recipe_repository,
        catalog=catalog_service,
        pantry=pantry_repository,
    )


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def meal_plan_repository(
    recipe_repository: InMemoryRecipeRepository,
) -> InMemoryMealPlanRepository:
    return InMemoryMealPlanRepository(recipes=recipe_repository)


@pytest.fixture
def meal_plan_service(
    meal_plan_repository: InMemoryMealPlanRepository,
    recipe_repository: InMemoryRecipeRepository,
    publisher: RecordingPublisher,
) -> MealPlanService:
    return MealPlanService(
        repository=meal_plan_repository,
        recipes=recipe_repository,
        publisher=publisher,
    )


@pytest.fixture
def shopping_list_repository() -> InMemoryShoppingListRepository:
    return InMemoryShoppingListRepository()


@pytest.fixture
def shopping_list_service(
    shopping_list_repository: InMemoryShoppingListRepository,
    catalog_service: CatalogService,
    meal_plan_service: MealPlanService,
    recipe_repository: InMemoryRecipeRepository,
    pantry_repository: InMemoryPantryRepository,
) -> ShoppingListService:
    return ShoppingListService(
        repository=shopping_list_repository,
        catalog=catalog_service,
        meal_plans=meal_plan_service,
        recipes=recipe_repository,
        pantry=pantry_repository,
    )


@pytest.fixture
def expense_repository() -> InMemoryExpenseRepository:
    return InMemoryExpenseRepository()


@pytest.fixture
def expense_service(expense_repository: InMemoryExpenseRepository) -> ExpenseService:
    return ExpenseService(expense_repository)


@pytest.fixture
def assistant_client() -> FakeAssistantClient:
    return FakeAssistantClient()


@pytest.fixture
def assistant_service(assistant_client: FakeAssistantClient) -> AssistantService:
    return AssistantService(client=assistant_client, model="gpt-test")


@pytest.fixture
def webhook_client() -> FakeWebhookClient:
    return FakeWebhookClient()


@pytest.fixture
def dispatcher(webhook_client: FakeWebhookClient) -> NotificationDispatcher:
    return NotificationDispatcher(
        client=webhook_client,
        routes=build_routes(MEAL_PLAN_WEBHOOK, NOTIFICATION_WEBHOOK),
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_repository: InMemoryUserRepository,
    catalog_service: CatalogService,
    pantry_service: PantryService,
    recipe_service: RecipeService,
    recipe_repository: InMemoryRecipeRepository,
    meal_plan_repository: InMemoryMealPlanRepository,
    shopping_list_repository: InMemoryShoppingListRepository,
    pantry_repository: InMemoryPantryRepository,
    expense_service: ExpenseService,
    assistant_service: AssistantService,
    dispatcher: NotificationDispatcher,
) -> AppContainer:
    user_service = UserService(user_repository)
    meal_plan_service = MealPlanService(
        repository=meal_plan_repository,
        recipes=recipe_repository,
        publisher=dispatcher,
    )
    shopping_list_service = ShoppingListService(
        repository=shopping_list_repository,
        catalog=catalog_service,
        meal_plans=meal_plan_service,
        recipes=recipe_repository,
        pantry=pantry_repository,
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
        extra_recipients=["family@example.com"],
    )

    async def close_resources() -> None:
        await dispatcher.stop()

    return AppContainer(
        settings=settings,
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


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {MEMBER_TOKEN}"}
