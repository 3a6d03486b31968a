from typing import Any, Optional

from flask import Flask, Response, jsonify, request, url_for
from werkzeug.exceptions import HTTPException

from .errors import NotFoundError, RecipeServiceError, ValidationError
from .models import Recipe
from .storage import InMemoryRecipeStorage, RecipeRepository


def create_app(storage: Optional[RecipeRepository] = None) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the application will use a
        fresh :class:`InMemoryRecipeStorage` configured through environment
        variables (seeded with the default recipes unless ``RECIPES_SEED`` is
        turned off).
    """

    app = Flask(__name__)
    app.config.setdefault("MAX_CONTENT_LENGTH", 1024 * 1024)

    if storage is None:
        storage = InMemoryRecipeStorage.from_env()
    app.config["RECIPE_STORAGE"] = storage

    @app.get("/recipes")
    def list_recipes() -> Response:
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]
        return jsonify([recipe.to_dict() for recipe in storage_backend.list_recipes()])

    @app.get("/recipes/<path:recipe_id>")
    def get_recipe(recipe_id: str) -> Response:
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]
        try:
            recipe = storage_backend.get_recipe(recipe_id)
        except KeyError:
            raise NotFoundError(f"Recipe '{recipe_id}' not found.") from None
        return jsonify(recipe.to_dict())

    @app.post("/recipes")
    def create_recipe() -> Response:
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]

        payload = _json_body()
        _require_fields(payload, "name")
        # An explicit null is not an absent field.
        if "ingredients" in payload:
            _check_ingredients(payload["ingredients"])
        ingredients = payload.get("ingredients")

        new_recipe = storage_backend.create_recipe(name=payload["name"], ingredients=ingredients)

        response = jsonify(new_recipe.to_dict())
        response.status_code = 201
        response.headers["Location"] = url_for("get_recipe", recipe_id=new_recipe.id)
        return response

    @app.put("/recipes/<path:recipe_id>")
    def update_recipe(recipe_id: str) -> tuple[str, int]:
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]

        payload = _json_body()
        _require_fields(payload, "name", "ingredients")
        _check_ingredients(payload["ingredients"])
        if "id" in payload and payload["id"] != recipe_id:
            raise ValidationError(
                f"Request path id ({recipe_id}) and request body id ({payload['id']}) must match."
            )

        updated = storage_backend.update_recipe(
            recipe_id,
            name=payload["name"],
            ingredients=payload["ingredients"],
        )
        if not updated:
            raise NotFoundError(f"Recipe '{recipe_id}' not found.")
        return "", 204

    @app.delete("/recipes/<path:recipe_id>")
    def delete_recipe(recipe_id: str) -> tuple[str, int]:
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]
        if not storage_backend.remove_recipe(recipe_id):
            raise NotFoundError(f"Recipe '{recipe_id}' not found.")
        return "", 204

    @app.errorhandler(RecipeServiceError)
    def handle_service_error(exc: RecipeServiceError) -> tuple[Response, int]:
        if isinstance(exc, ValidationError):
            app.logger.warning("Rejected %s %s: %s", request.method, request.path, exc.message)
        return jsonify(error=exc.message), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException) -> tuple[Response, int]:
        return jsonify(error=exc.description), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception) -> tuple[Response, int]:
        app.logger.exception("Unhandled error during %s %s", request.method, request.path)
        return jsonify(error="Internal server error"), 500

    return app


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return payload


def _require_fields(payload: dict, *fields: str) -> None:
    missing = [field for field in fields if field not in payload]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}.")


def _check_ingredients(ingredients: Any) -> None:
    if not isinstance(ingredients, list) or not all(isinstance(item, str) for item in ingredients):
        raise ValidationError("Ingredients must be an array of strings.")


__all__ = ["create_app", "Recipe"]
