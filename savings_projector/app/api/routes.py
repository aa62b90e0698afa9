"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from savings_projector.app.api.presenters import (
    chart_payload,
    projection_payload,
    scenario_list_payload,
    scenario_payload,
)
from savings_projector.core.projection import project
from savings_projector.domain.scenarios import ScenarioIndexOutOfRange, ScenarioSet
from savings_projector.logging import get_logger
from savings_projector.schemas.ping import PingResponse
from savings_projector.schemas.scenario import ScenarioCreatedResponse, ScenarioForm

logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


def _scenario_set() -> ScenarioSet:
    return current_app.extensions["scenario_set"]


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    logger.warning("invalid_scenario_input", path=request.path, errors=exc.error_count())
    detail = exc.errors(include_url=False, include_context=False)
    return jsonify({"detail": detail}), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(ScenarioIndexOutOfRange)
def _handle_missing_scenario(exc: ScenarioIndexOutOfRange):
    return jsonify({"detail": str(exc)}), HTTPStatus.NOT_FOUND


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message="pong", scenarios=len(_scenario_set()))
    return jsonify(response.model_dump())


@api_bp.post("/projection")
def projection() -> Any:
    """Project one form submission without saving it."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    form = ScenarioForm.model_validate(raw_payload)
    scenario_input = form.to_input()
    response = projection_payload(scenario_input, project(scenario_input))
    return jsonify(response.model_dump())


@api_bp.get("/scenarios")
def list_scenarios() -> Any:
    response = scenario_list_payload(_scenario_set())
    return jsonify(response.model_dump())


@api_bp.post("/scenarios")
def add_scenario() -> Any:
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    form = ScenarioForm.model_validate(raw_payload)
    scenario_set = _scenario_set()
    created = scenario_set.add(form.to_input())

    state = scenario_list_payload(scenario_set)
    response = ScenarioCreatedResponse(
        created=scenario_payload(created),
        scenarios=state.scenarios,
        headline=state.headline,
        chart=state.chart,
    )
    return jsonify(response.model_dump()), HTTPStatus.CREATED


@api_bp.delete("/scenarios/<int:ordinal>")
def remove_scenario(ordinal: int) -> Any:
    scenario_set = _scenario_set()
    scenario_set.remove(ordinal)
    response = scenario_list_payload(scenario_set)
    return jsonify(response.model_dump())


@api_bp.get("/chart")
def chart() -> Any:
    response = chart_payload(_scenario_set().derive_chart_series())
    return jsonify(response.model_dump())
