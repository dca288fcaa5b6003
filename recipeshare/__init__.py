import asyncio
import logging
import os
from typing import Any, Dict, Optional

import click
from flask import Flask, jsonify, request, url_for

from .errors import RecipeNotFound, StorageError, ValidationError
from .gcp_storage import FirestoreRecipeStorage
from .models import Recipe
from .seed import seed_recipes
from .service import RecipeService
from .sql_storage import SqlRecipeStorage
from .storage import InMemoryRecipeStorage, RecipeRepository

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("sql", "firestore", "memory")


def create_app(
    storage: Optional[RecipeRepository] = None,
    service: Optional[RecipeService] = None,
) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the backend named by
        ``RECIPE_STORAGE_BACKEND`` is built from environment variables.
    service:
        Optional recipe service. When given, its repository is used as the
        storage backend unless ``storage`` is passed as well.
    """

    app = Flask(__name__)

    if storage is None:
        storage = service.storage if service is not None else storage_from_env()
    app.config["RECIPE_STORAGE"] = storage
    app.config["RECIPE_SERVICE"] = service or RecipeService(storage)

    def recipe_service() -> RecipeService:
        return app.config["RECIPE_SERVICE"]

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return jsonify(error=str(exc), errors=exc.errors), 400

    @app.errorhandler(RecipeNotFound)
    def handle_not_found(exc: RecipeNotFound):
        return jsonify(error=str(exc)), 404

    @app.errorhandler(StorageError)
    def handle_storage_error(exc: StorageError):
        logger.error("Recipe storage failure", exc_info=exc)
        return jsonify(error="Recipe storage is unavailable."), 500

    @app.get("/api/recipes")
    async def list_recipes():
        recipes = await recipe_service().list_all()
        return jsonify([recipe.to_dict() for recipe in recipes])

    @app.get("/api/recipes/search")
    async def search_recipes():
        tags = [tag.strip() for tag in request.args.getlist("dietaryTags") if tag.strip()]
        max_cooking_time = _int_arg("maxCookingTime")
        recipes = await recipe_service().search(dietary_tags=tags, max_cooking_time=max_cooking_time)
        return jsonify([recipe.to_dict() for recipe in recipes])

    @app.get("/api/recipes/<recipe_id>")
    async def get_recipe(recipe_id: str):
        recipe = await recipe_service().get_by_id(recipe_id)
        return jsonify(recipe.to_dict())

    @app.post("/api/recipes")
    async def create_recipe():
        draft = _json_body()
        if draft is None:
            return jsonify(error="Request body must be a JSON object."), 400

        recipe = await recipe_service().create(draft)
        response = jsonify(recipe.to_dict())
        response.status_code = 201
        response.headers["Location"] = url_for("get_recipe", recipe_id=recipe.id)
        return response

    @app.put("/api/recipes/<recipe_id>")
    async def update_recipe(recipe_id: str):
        draft = _json_body()
        if draft is None:
            return jsonify(error="Request body must be a JSON object."), 400

        recipe = await recipe_service().update(recipe_id, draft)
        return jsonify(recipe.to_dict())

    @app.delete("/api/recipes/<recipe_id>")
    async def delete_recipe(recipe_id: str):
        await recipe_service().delete(recipe_id)
        return "", 204

    @app.get("/healthz")
    async def healthz():
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]
        try:
            count = await storage_backend.count()
        except StorageError as exc:
            logger.warning("Health check failed: %s", exc)
            return jsonify(status="unhealthy", error=str(exc)), 503
        return jsonify(status="healthy", recipes=count)

    @app.cli.command("seed")
    def seed_command() -> None:
        """Load the sample recipes into the configured storage."""

        created = asyncio.run(seed_recipes(recipe_service()))
        click.echo(f"Seeded {len(created)} recipes.")

    return app


def storage_from_env() -> RecipeRepository:
    """Build the storage backend selected by ``RECIPE_STORAGE_BACKEND``."""

    backend = os.environ.get("RECIPE_STORAGE_BACKEND", "sql").strip().lower()
    if backend == "sql":
        return SqlRecipeStorage.from_env()
    if backend == "firestore":
        return FirestoreRecipeStorage.from_env()
    if backend == "memory":
        return InMemoryRecipeStorage()
    raise RuntimeError(
        f"Unknown RECIPE_STORAGE_BACKEND '{backend}'. "
        f"Expected one of: {', '.join(STORAGE_BACKENDS)}."
    )


def _json_body() -> Optional[Dict[str, Any]]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else None


def _int_arg(name: str) -> Optional[int]:
    raw = request.args.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError({name: [f"The {name} parameter must be an integer."]}) from None


__all__ = ["create_app", "storage_from_env", "Recipe"]
