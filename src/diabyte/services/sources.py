"""Resolution of food and recipe references used as meal sources."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from diabyte.domain.errors import InvalidInput, NotFound
from diabyte.domain.foods import (
    FOOD,
    RECIPE,
    UNKNOWN_SOURCE_NAME,
    MealSource,
    Recipe,
    SourceRef,
)
from diabyte.services.foods import FoodRepository


class RecipeRepository(Protocol):
    """Persistence interface for private recipes."""

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id, if present."""


class SourceLookup(Protocol):
    """Resolves one kind of source for a requesting user."""

    def resolve(self, user_id: UUID, source_id: UUID) -> MealSource | None:
        """Return the source when it exists and is visible to the user."""


@dataclass
class FoodSourceLookup:
    """Foods are shared and visible to every user."""

    repository: FoodRepository

    def resolve(self, user_id: UUID, source_id: UUID) -> MealSource | None:
        food = self.repository.get_food(source_id)
        if food is None:
            return None
        return MealSource(
            ref=SourceRef(kind=FOOD, id=food.id),
            name=food.name,
            carbs_per_100=food.carbs_per_100,
        )


@dataclass
class RecipeSourceLookup:
    """Recipes resolve only for their owner."""

    repository: RecipeRepository

    def resolve(self, user_id: UUID, source_id: UUID) -> MealSource | None:
        recipe = self.repository.get_recipe(source_id)
        if recipe is None or recipe.user_id != user_id:
            return None
        return MealSource(
            ref=SourceRef(kind=RECIPE, id=recipe.id),
            name=recipe.name,
            carbs_per_100=recipe.carbs_per_100,
        )


@dataclass
class SourceResolver:
    """Dispatches a source reference to the lookup registered for its kind."""

    lookups: dict[str, SourceLookup]

    @classmethod
    def create(
        cls, foods: FoodRepository, recipes: RecipeRepository
    ) -> "SourceResolver":
        """Build a resolver for foods and recipes."""
        return cls(
            lookups={
                FOOD: FoodSourceLookup(foods),
                RECIPE: RecipeSourceLookup(recipes),
            }
        )

    def ref(self, kind: str, source_id: UUID) -> SourceRef:
        """Validate the kind and return a reference."""
        if kind not in self.lookups:
            raise InvalidInput(
                "source must be one of: " + ", ".join(sorted(self.lookups)),
                {"source": kind},
            )
        return SourceRef(kind=kind, id=source_id)

    def find(self, user_id: UUID, ref: SourceRef) -> MealSource | None:
        """Return the resolved source or None when it is not visible."""
        lookup = self.lookups.get(ref.kind)
        if lookup is None:
            return None
        return lookup.resolve(user_id, ref.id)

    def name_of(self, user_id: UUID, ref: SourceRef) -> str:
        """Return the source name, or a placeholder when it cannot be resolved."""
        source = self.find(user_id, ref)
        return source.name if source is not None else UNKNOWN_SOURCE_NAME

    def resolve(self, user_id: UUID, ref: SourceRef) -> MealSource:
        """Return the resolved source or raise NotFound."""
        source = self.find(user_id, ref)
        if source is None:
            raise NotFound(
                f"{ref.kind} not found",
                {"source": ref.kind, "source_id": str(ref.id)},
            )
        return source
