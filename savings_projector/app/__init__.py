"""Application factory and app-wide configuration."""

#setup: pip install -e ".[test]"
#setup: flask --app "savings_projector.app:create_app" run --port 5000 --debug

from typing import Optional

from flask import Flask, request
from flask_cors import CORS

from savings_projector.app.api.routes import api_bp
from savings_projector.config import Settings
from savings_projector.database import InMemoryScenarioStore, SqliteScenarioStore
from savings_projector.domain.scenarios import ScenarioSet
from savings_projector.logging import configure_logging, get_logger

logger = get_logger(__name__)


def build_scenario_set(settings: Settings) -> ScenarioSet:
    """Create the app's scenario set and rehydrate it from its store."""
    if settings.uses_memory_store:
        store = InMemoryScenarioStore()
    else:
        store = SqliteScenarioStore(settings.database)

    scenario_set = ScenarioSet(store=store, palette_size=settings.palette_size)
    scenario_set.hydrate()
    return scenario_set


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the Flask app instance."""
    settings = settings or Settings.from_env()
    configure_logging(level=settings.log_level, format_json=settings.log_json)

    app = Flask(__name__)
    app.config["SETTINGS"] = settings

    CORS(
        app,
        resources={r"/api/*": {"origins": list(settings.cors_origins)}},
        supports_credentials=True,
    )

    @app.after_request
    def add_cors_headers(response):
        """Ensure all API responses include the required CORS headers."""
        origin = request.headers.get("Origin", "")
        if origin in settings.cors_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
        return response

    scenario_set = build_scenario_set(settings)
    scenario_set.subscribe(
        lambda changed: logger.debug("derived_views_stale", scenarios=len(changed))
    )
    app.extensions["scenario_set"] = scenario_set

    app.register_blueprint(api_bp, url_prefix="/api")
    logger.info("app_created", database=settings.database, scenarios=len(scenario_set))
    return app
