"""Tests for the pantry ledger."""

from datetime import date, timedelta

import pytest

from homelife.domain.errors import ConflictError, NotFoundError, ValidationError
from homelife.services.pantry import MAX_EXPIRY_DAYS, MAX_WRITE_ATTEMPTS
from tests.conftest import HOUSEHOLD_ID, OTHER_HOUSEHOLD_ID

TODAY = date(2026, 3, 10)


@pytest.fixture
def grams(catalog_repository):
    return catalog_repository.add_unit("Gram", "g")


@pytest.fixture
def flour(catalog_repository, grams):
    return catalog_repository.add_ingredient(HOUSEHOLD_ID, "Flour", grams.id)


def test_add_requires_household_ingredient(
    pantry_service, catalog_repository, grams
) -> None:
    foreign = catalog_repository.add_ingredient(OTHER_HOUSEHOLD_ID, "Rice", grams.id)

    with pytest.raises(ValidationError) as excinfo:
        pantry_service.add(HOUSEHOLD_ID, foreign.id, 100, grams.id)

    assert excinfo.value.field == "ingredient_id"


def test_add_rejects_negative_quantity(pantry_service, flour, grams) -> None:
    with pytest.raises(ValidationError) as excinfo:
        pantry_service.add(HOUSEHOLD_ID, flour.id, -1, grams.id)

    assert excinfo.value.field == "quantity"


def test_consume_reduces_quantity(pantry_service, flour, grams) -> None:
    item = pantry_service.add(HOUSEHOLD_ID, flour.id, 500, grams.id)

    result = pantry_service.consume(item.id, HOUSEHOLD_ID, 200)

    assert result.deleted is False
    assert result.item is not None
    assert result.item.quantity == 300


def test_consume_everything_deletes_row(pantry_service, flour, grams) -> None:
    item = pantry_service.add(HOUSEHOLD_ID, flour.id, 5, grams.id)

    result = pantry_service.consume(item.id, HOUSEHOLD_ID, 5)

    assert result.deleted is True
    assert result.item is None
    with pytest.raises(NotFoundError):
        pantry_service.get_item(item.id, HOUSEHOLD_ID)


def test_consume_more_than_stock_deletes_row(pantry_service, flour, grams) -> None:
    item = pantry_service.add(HOUSEHOLD_ID, flour.id, 2, grams.id)

    assert pantry_service.consume(item.id, HOUSEHOLD_ID, 10).deleted is True
    assert pantry_service.list_items(HOUSEHOLD_ID) == []


def test_consume_zero_keeps_quantity(pantry_service, flour, grams) -> None:
    item = pantry_service.add(HOUSEHOLD_ID, flour.id, 3, grams.id)

    result = pantry_service.consume(item.id, HOUSEHOLD_ID, 0)

    assert result.item is not None
    assert result.item.quantity == 3


def test_consume_retries_after_concurrent_write(
    pantry_service, pantry_repository, flour, grams
) -> None:
    item = pantry_service.add(HOUSEHOLD_ID, flour.id, 10, grams.id)
    pantry_repository.concurrent_writes = MAX_WRITE_ATTEMPTS - 1

    result = pantry_service.consume(item.id, HOUSEHOLD_ID, 4)

    assert result.item is not None
    assert result.item.quantity == 6


def test_consume_gives_up_with_conflict(
    pantry_service, pantry_repository, flour, grams
) -> None:
    item = pantry_service.add(HOUSEHOLD_ID, flour.id, 10, grams.id)
    pantry_repository.concurrent_writes = MAX_WRITE_ATTEMPTS

    with pytest.raises(ConflictError):
        pantry_service.consume(item.id, HOUSEHOLD_ID, 4)

    assert pantry_service.get_item(item.id, HOUSEHOLD_ID).quantity == 10


def test_consume_other_household_item_is_not_found(
    pantry_service, flour, grams
) -> None:
    item = pantry_service.add(HOUSEHOLD_ID, flour.id, 10, grams.id)

    with pytest.raises(NotFoundError):
        pantry_service.consume(item.id, OTHER_HOUSEHOLD_ID, 1)


def test_merge_duplicates_sums_into_oldest_row(pantry_service, flour, grams) -> None:
    first = pantry_service.add(
        HOUSEHOLD_ID, flour.id, 3, grams.id, expiry_date=TODAY + timedelta(days=9)
    )
    pantry_service.add(
        HOUSEHOLD_ID, flour.id, 5, grams.id, expiry_date=TODAY + timedelta(days=2)
    )

    result = pantry_service.merge_duplicates(HOUSEHOLD_ID)

    assert result.merged_count == 1
    [merged] = result.items
    assert merged.id == first.id
    assert merged.quantity == 8
    assert merged.expiry_date == TODAY + timedelta(days=2)


def test_merge_duplicates_is_idempotent(pantry_service, flour, grams) -> None:
    pantry_service.add(HOUSEHOLD_ID, flour.id, 3, grams.id)
    pantry_service.add(HOUSEHOLD_ID, flour.id, 5, grams.id)

    pantry_service.merge_duplicates(HOUSEHOLD_ID)
    second = pantry_service.merge_duplicates(HOUSEHOLD_ID)

    assert second.merged_count == 0
    assert [item.quantity for item in second.items] == [8]


def test_merge_duplicates_keeps_different_units_apart(
    pantry_service, catalog_repository, flour, grams
) -> None:
    kilograms = catalog_repository.add_unit("Kilogram", "kg")
    pantry_service.add(HOUSEHOLD_ID, flour.id, 300, grams.id)
    pantry_service.add(HOUSEHOLD_ID, flour.id, 1, kilograms.id)

    result = pantry_service.merge_duplicates(HOUSEHOLD_ID)

    assert result.merged_count == 0
    assert len(result.items) == 2


def test_merge_duplicates_keeps_writes_made_after_listing(
    pantry_service, pantry_repository, flour, grams, monkeypatch
) -> None:
    first = pantry_service.add(HOUSEHOLD_ID, flour.id, 3, grams.id)
    second = pantry_service.add(HOUSEHOLD_ID, flour.id, 5, grams.id)
    list_items = pantry_repository.list_items

    def list_then_consume(household_id):  # type: ignore[no-untyped-def]
        rows = list_items(household_id)
        monkeypatch.setattr(pantry_repository, "list_items", list_items)
        pantry_service.consume(second.id, HOUSEHOLD_ID, 4)
        return rows

    monkeypatch.setattr(pantry_repository, "list_items", list_then_consume)

    result = pantry_service.merge_duplicates(HOUSEHOLD_ID)

    [merged] = result.items
    assert merged.id == first.id
    assert merged.quantity == 4


def test_merge_duplicates_skips_group_whose_kept_row_vanished(
    pantry_service, pantry_repository, flour, grams, monkeypatch
) -> None:
    first = pantry_service.add(HOUSEHOLD_ID, flour.id, 3, grams.id)
    pantry_service.add(HOUSEHOLD_ID, flour.id, 5, grams.id)
    list_items = pantry_repository.list_items

    def list_then_delete(household_id):  # type: ignore[no-untyped-def]
        rows = list_items(household_id)
        monkeypatch.setattr(pantry_repository, "list_items", list_items)
        pantry_repository.delete_item(first.id)
        return rows

    monkeypatch.setattr(pantry_repository, "list_items", list_then_delete)

    result = pantry_service.merge_duplicates(HOUSEHOLD_ID)

    assert result.merged_count == 0
    assert [item.quantity for item in result.items] == [5]


def test_get_expiring_soon_orders_and_flags_items(
    pantry_service, catalog_repository, flour, grams
) -> None:
    milk = catalog_repository.add_ingredient(HOUSEHOLD_ID, "Milk", grams.id)
    pantry_service.add(
        HOUSEHOLD_ID, flour.id, 1, grams.id, expiry_date=TODAY + timedelta(days=7)
    )
    pantry_service.add(HOUSEHOLD_ID, milk.id, 1, grams.id, expiry_date=TODAY)
    pantry_service.add(
        HOUSEHOLD_ID, milk.id, 1, grams.id, expiry_date=TODAY + timedelta(days=8)
    )
    pantry_service.add(
        HOUSEHOLD_ID, milk.id, 1, grams.id, expiry_date=TODAY - timedelta(days=1)
    )
    pantry_service.add(HOUSEHOLD_ID, flour.id, 1, grams.id)

    items = pantry_service.get_expiring_soon(HOUSEHOLD_ID, 7, today=TODAY)

    assert [item.days_until_expiry for item in items] == [0, 7]
    assert [item.ingredient_name for item in items] == ["Milk", "Flour"]
    assert [item.use_first for item in items] == [True, False]


def test_get_expiring_soon_rejects_negative_days(pantry_service) -> None:
    with pytest.raises(ValidationError):
        pantry_service.get_expiring_soon(HOUSEHOLD_ID, -1, today=TODAY)


def test_get_expiring_soon_rejects_days_beyond_limit(pantry_service) -> None:
    with pytest.raises(ValidationError) as excinfo:
        pantry_service.get_expiring_soon(
            HOUSEHOLD_ID, MAX_EXPIRY_DAYS + 1, today=TODAY
        )

    assert excinfo.value.field == "days"


def test_get_expiring_soon_accepts_days_at_limit(pantry_service) -> None:
    assert pantry_service.get_expiring_soon(
        HOUSEHOLD_ID, MAX_EXPIRY_DAYS, today=TODAY
    ) == []


@pytest.mark.parametrize("quantity", [float("nan"), float("inf")])
def test_add_rejects_non_finite_quantity(
    pantry_service, pantry_repository, flour, grams, quantity
) -> None:
    with pytest.raises(ValidationError) as excinfo:
        pantry_service.add(HOUSEHOLD_ID, flour.id, quantity, grams.id)

    assert excinfo.value.field == "quantity"
    assert pantry_repository.list_items(HOUSEHOLD_ID) == []


def test_consume_rejects_nan_amount(pantry_service, flour, grams) -> None:
    item = pantry_service.add(HOUSEHOLD_ID, flour.id, 5, grams.id)

    with pytest.raises(ValidationError):
        pantry_service.consume(item.id, HOUSEHOLD_ID, float("nan"))

    assert pantry_service.get_item(item.id, HOUSEHOLD_ID).quantity == 5


def test_update_item_renames_ingredient(
    pantry_service, catalog_repository, flour, grams
) -> None:
    item = pantry_service.add(HOUSEHOLD_ID, flour.id, 1, grams.id)

    updated = pantry_service.update_item(
        item.id,
        HOUSEHOLD_ID,
        {"quantity": 2, "ingredient_name": "Bread flour", "protein": 12},
    )

    assert updated.quantity == 2
    assert updated.ingredient_name == "Bread flour"
    assert catalog_repository.ingredients[flour.id].protein == 12


def test_update_expiry_changes_only_date(pantry_service, flour, grams) -> None:
    item = pantry_service.add(HOUSEHOLD_ID, flour.id, 4, grams.id, location="Shelf")

    updated = pantry_service.update_expiry(item.id, HOUSEHOLD_ID, TODAY)

    assert updated.expiry_date == TODAY
    assert updated.quantity == 4
    assert updated.location == "Shelf"


def test_ingredient_names_skips_empty_rows(
    pantry_service, catalog_repository, flour, grams
) -> None:
    salt = catalog_repository.add_ingredient(HOUSEHOLD_ID, "Salt", grams.id)
    pantry_service.add(HOUSEHOLD_ID, flour.id, 1, grams.id)
    pantry_service.add(HOUSEHOLD_ID, flour.id, 2, grams.id)
    pantry_service.add(HOUSEHOLD_ID, salt.id, 0, grams.id)

    assert pantry_service.ingredient_names(HOUSEHOLD_ID) == ["Flour"]
