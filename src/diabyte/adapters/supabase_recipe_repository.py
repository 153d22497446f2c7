"""Supabase repository for private recipes."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diabyte.domain.foods import Recipe
from diabyte.services.sources import RecipeRepository


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for recipe lookups."""

    client: Client

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id."""
        response = (
            self.client.table("recipes")
            .select("id, user_id, name, carbs_per_100")
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        carbs = row.get("carbs_per_100")
        return Recipe(
            id=UUID(row["id"]),
            user_id=UUID(row["user_id"]),
            name=str(row.get("name", "")),
            carbs_per_100=float(carbs) if carbs is not None else None,
        )
