"""Application factory and app-wide configuration."""

import logging
from typing import Optional

import click
from flask import Flask
from flask_cors import CORS

from inflation_backend.app.api.routes import api_bp
from inflation_backend.config import Settings
from inflation_backend.config import settings as default_settings
from inflation_backend.domain.rates import RateTable, default_rate_table
from inflation_backend.persistence.database import QueryStore

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-XSS-Protection": "0",
    "Referrer-Policy": "no-referrer",
}


def create_app(
    settings: Optional[Settings] = None,
    rate_table: Optional[RateTable] = None,
    store: Optional[QueryStore] = None,
) -> Flask:
    """Build the Flask app instance."""
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.json.sort_keys = False

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.CORS_ORIGINS}},
        supports_credentials=True,
    )

    store = store or QueryStore(settings.DATABASE_PATH)
    store.init_db()

    app.extensions["settings"] = settings
    app.extensions["rate_table"] = rate_table or default_rate_table()
    app.extensions["query_store"] = store

    @app.after_request
    def add_security_headers(response):
        """Attach the security headers every response should carry."""
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    @app.cli.command("purge-history")
    @click.option("--days", type=int, default=None, help="Retention window in days.")
    def purge_history(days: Optional[int]) -> None:
        """Delete saved calculations older than the retention window."""
        window = days if days is not None else settings.HISTORY_RETENTION_DAYS
        deleted = store.delete_older_than(window)
        click.echo(f"Deleted {deleted} queries older than {window} days")

    app.register_blueprint(api_bp, url_prefix="/api/v1")
    logger.debug("history database at %s", store.db_path)
    return app
