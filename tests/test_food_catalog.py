"""Tests for the shared food catalog."""

from uuid import uuid4

import pytest

from diabyte.domain.errors import InvalidInput, NotFound
from diabyte.services.foods import FoodCatalogService
from tests.conftest import InMemoryFoodRepository


def test_search_matches_name_fragment_and_orders_by_name() -> None:
    repository = InMemoryFoodRepository()
    repository.add("Tortilla de maiz", 45)
    repository.add("Arroz blanco", 28)
    repository.add("Arroz integral", 23)
    service = FoodCatalogService(repository)

    results = service.search("  arroz  ")

    assert [food.name for food in results] == ["Arroz blanco", "Arroz integral"]


def test_search_without_query_lists_catalog_within_limit() -> None:
    repository = InMemoryFoodRepository()
    for index in range(5):
        repository.add(f"Food {index}", 10)
    service = FoodCatalogService(repository)

    assert len(service.search(None, limit=3)) == 3
    assert len(service.search("", limit=0)) == 1


def test_add_food_upserts_on_name() -> None:
    repository = InMemoryFoodRepository()
    service = FoodCatalogService(repository)

    first = service.add_food("Manzana", 14, glycemic_index=38)
    second = service.add_food("Manzana", 13.8)

    assert first.id == second.id
    assert second.carbs_per_100 == 13.8
    assert len(repository.foods) == 1


def test_add_food_collects_validation_errors() -> None:
    service = FoodCatalogService(InMemoryFoodRepository())

    with pytest.raises(InvalidInput) as excinfo:
        service.add_food(" ", 120, unit="", glycemic_index=150)

    assert set(excinfo.value.details) == {
        "name",
        "carbs_per_100",
        "unit",
        "glycemic_index",
    }


def test_lookup_and_delete_missing_food_raise_not_found() -> None:
    service = FoodCatalogService(InMemoryFoodRepository())

    with pytest.raises(NotFound):
        service.lookup(uuid4())
    with pytest.raises(NotFound):
        service.delete_food(uuid4())


def test_delete_food_removes_it_from_catalog() -> None:
    repository = InMemoryFoodRepository()
    food = repository.add("Pera", 15)
    service = FoodCatalogService(repository)

    service.delete_food(food.id)

    assert food.id not in repository.foods
