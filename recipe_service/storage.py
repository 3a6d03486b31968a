from __future__ import annotations

import logging
import os
import threading
from dataclasses import replace
from typing import Any, Iterable, List, Optional, Protocol, Sequence

from .errors import ValidationError
from .models import Recipe

logger = logging.getLogger(__name__)

DEFAULT_RECIPES = (
    ("Boiled white rice", ["1 cup white rice", "2 cups water", "pinch of salt"]),
    ("Milkshake", ["2 tbsp cocoa", "2 cups vanilla ice cream", "1 cup milk"]),
)


class RecipeRepository(Protocol):
    """Protocol describing the behaviour required by the web layer."""

    def list_recipes(self) -> Iterable[Recipe]:
        """Return every stored recipe in insertion order."""

    def get_recipe(self, recipe_id: str) -> Recipe:
        """Return a single recipe or raise :class:`KeyError` if missing."""

    def create_recipe(self, *, name: str, ingredients: Optional[List[str]] = None) -> Recipe:
        """Store a new recipe keyed by its name and return it."""

    def update_recipe(self, recipe_id: str, *, name: str, ingredients: List[str]) -> bool:
        """Replace name and ingredients of a recipe. ``False`` if it does not exist."""

    def remove_recipe(self, recipe_id: str) -> bool:
        """Remove a recipe. ``False`` if there was nothing to remove."""


def _validate_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Recipe name must be a non-empty string.")
    return name


def _validate_ingredients(ingredients: Any) -> List[str]:
    if not isinstance(ingredients, list):
        raise ValidationError("Ingredients must be a list of strings.")
    for ingredient in ingredients:
        if not isinstance(ingredient, str) or not ingredient.strip():
            raise ValidationError("Each ingredient must be a non-empty string.")
    return list(ingredients)


def _copy(recipe: Recipe) -> Recipe:
    return replace(recipe, ingredients=list(recipe.ingredients))


class InMemoryRecipeStorage(RecipeRepository):
    """Process-local recipe store.

    Recipes live in a dict keyed by ``id`` so lookups do not depend on the
    size of the collection, while dict ordering keeps insertion order for
    listing. A single lock guards every read and mutation; it is never held
    across I/O.
    """

    def __init__(self) -> None:
        self._recipes: dict[str, Recipe] = {}
        self._lock = threading.Lock()

    @classmethod
    def with_defaults(cls) -> "InMemoryRecipeStorage":
        storage = cls()
        storage.seed(DEFAULT_RECIPES)
        return storage

    @classmethod
    def from_env(cls) -> "InMemoryRecipeStorage":
        """Build a storage instance from environment variables."""

        seed_flag = os.environ.get("RECIPES_SEED", "1").strip().lower()
        if seed_flag in {"0", "false", "no"}:
            return cls()
        return cls.with_defaults()

    def seed(self, recipes: Iterable[Sequence[Any]]) -> None:
        for name, ingredients in recipes:
            self.create_recipe(name=name, ingredients=list(ingredients))

    def list_recipes(self) -> List[Recipe]:
        with self._lock:
            return [_copy(recipe) for recipe in self._recipes.values()]

    def get_recipe(self, recipe_id: str) -> Recipe:
        with self._lock:
            try:
                return _copy(self._recipes[recipe_id])
            except KeyError:
                raise KeyError(f"Recipe '{recipe_id}' does not exist.") from None

    def create_recipe(self, *, name: str, ingredients: Optional[List[str]] = None) -> Recipe:
        name = _validate_name(name)
        ingredients = _validate_ingredients([] if ingredients is None else ingredients)

        with self._lock:
            if name in self._recipes:
                raise ValidationError(f"A recipe with id '{name}' already exists.")
            recipe = Recipe(id=name, name=name, ingredients=ingredients)
            self._recipes[recipe.id] = recipe
            created = _copy(recipe)

        logger.info("Created recipe %r", created.id)
        return created

    def update_recipe(self, recipe_id: str, *, name: str, ingredients: List[str]) -> bool:
        name = _validate_name(name)
        ingredients = _validate_ingredients(ingredients)

        with self._lock:
            recipe = self._recipes.get(recipe_id)
            if recipe is None:
                return False
            # The id stays put even when the name changes.
            recipe.name = name
            recipe.ingredients = ingredients

        logger.info("Updated recipe %r", recipe_id)
        return True

    def remove_recipe(self, recipe_id: str) -> bool:
        with self._lock:
            removed = self._recipes.pop(recipe_id, None)

        if removed is None:
            return False
        logger.info("Removed recipe %r", recipe_id)
        return True


__all__ = ["DEFAULT_RECIPES", "InMemoryRecipeStorage", "RecipeRepository"]
