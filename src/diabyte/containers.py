"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from diabyte.adapters.fdc_client import HttpxFdcClient
from diabyte.adapters.supabase_food_repository import SupabaseFoodRepository
from diabyte.adapters.supabase_intake_repository import SupabaseIntakeRepository
from diabyte.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from diabyte.adapters.supabase_profile_repository import SupabaseProfileRepository
from diabyte.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from diabyte.config import Settings
from diabyte.services.dosing import DosingService
from diabyte.services.food_import import FoodImportService
from diabyte.services.foods import FoodCatalogService
from diabyte.services.intake import IntakeLedgerService
from diabyte.services.meal_plans import MealPlanService
from diabyte.services.profiles import ProfileService
from diabyte.services.sources import SourceResolver


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_catalog: FoodCatalogService
    food_import_service: FoodImportService
    profile_service: ProfileService
    dosing_service: DosingService
    meal_plan_service: MealPlanService
    intake_service: IntakeLedgerService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_repository = SupabaseFoodRepository(supabase_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    meal_plan_repository = SupabaseMealPlanRepository(supabase_client)
    intake_repository = SupabaseIntakeRepository(supabase_client)

    fdc_client = (
        HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
        )
        if resolved_settings.fdc_api_key
        else None
    )
    food_catalog = FoodCatalogService(food_repository)
    profile_service = ProfileService(profile_repository)
    sources = SourceResolver.create(food_repository, recipe_repository)
    dosing_service = DosingService(catalog=food_catalog, profiles=profile_service)

    async def close_resources() -> None:
        if fdc_client is not None:
            await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        food_catalog=food_catalog,
        food_import_service=FoodImportService(
            catalog=food_catalog, fdc_client=fdc_client
        ),
        profile_service=profile_service,
        dosing_service=dosing_service,
        meal_plan_service=MealPlanService(
            repository=meal_plan_repository,
            sources=sources,
            max_item_grams=resolved_settings.max_item_grams,
        ),
        intake_service=IntakeLedgerService(
            repository=intake_repository,
            sources=sources,
            dosing=dosing_service,
            history_limit=resolved_settings.history_limit,
        ),
        close_resources=close_resources,
    )
