from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient

from inflation_backend.app import create_app
from inflation_backend.config import Settings
from inflation_backend.persistence.database import QueryStore


@pytest.fixture()
def settings(tmp_path) -> Settings:
    test_settings = Settings()
    test_settings.DATABASE_PATH = tmp_path / "queries.db"
    test_settings.HISTORY_DEFAULT_LIMIT = 50
    test_settings.HISTORY_MAX_LIMIT = 500
    test_settings.HISTORY_RETENTION_DAYS = 90
    return test_settings


@pytest.fixture()
def app(settings: Settings) -> Flask:
    flask_app = create_app(settings)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def store(app: Flask) -> QueryStore:
    return app.extensions["query_store"]
