from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from savings_projector.app import create_app
from savings_projector.config import Settings


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(database=str(tmp_path / "scenarios.db"), log_level="WARNING")


@pytest.fixture()
def flask_app(settings):
    return create_app(settings)


@pytest.fixture()
def client(flask_app) -> FlaskClient:
    with flask_app.test_client() as test_client:
        yield test_client
