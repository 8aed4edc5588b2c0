# rise/__init__.py
"""RISE Research dashboard backend: Airtable proxy and availability scheduling."""
import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from rise.api import Services, register_blueprints
from rise.config import Config
from rise.errors import register_error_handlers
from rise.services.availability_service import AvailabilityService
from rise.services.identity import IdentityResolver, TokenVerifier
from rise.services.record_store import AirtableRecordStore, RecordStore
from rise.services.report_service import ReportService
from rise.utils.logger import setup_logging

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def create_app(
    config: Config,
    store: Optional[RecordStore] = None,
    identity_verifier: Optional[TokenVerifier] = None,
) -> Flask:
    """Application factory.

    ``store`` and ``identity_verifier`` default to Airtable and google-auth;
    tests pass in-memory replacements.
    """
    app = Flask(__name__)

    # Convert our Config object to Flask's config format
    app.config.from_object(config)

    # Also store our config object for direct access
    app.rise_config = config

    # Setup logging
    setup_logging(app)

    # Initialize extensions
    CORS(app, origins=config.CORS_ORIGINS.split(","), supports_credentials=True)

    if store is None:
        logger.info("Initializing Airtable record store...")
        store = AirtableRecordStore(config)

    app.rise_services = Services(
        identity=IdentityResolver(config, store, verifier=identity_verifier),
        availability=AvailabilityService(config, store),
        reports=ReportService(config, store),
    )

    register_error_handlers(app)
    register_blueprints(app)

    # Health check endpoint
    @app.route("/health")
    def health():
        return {
            "status": "ok",
            "service": "rise-research-backend",
            "version": VERSION,
            "environment": config.ENV,
            "airtable_configured": bool(config.AIRTABLE_PERSONAL_ACCESS_TOKEN),
        }, 200

    @app.route("/debug/config")
    def debug_config():
        """Debug endpoint to check configuration (don't use in production)."""
        if config.ENV == "prod":
            return {"error": "Forbidden", "message": "Debug endpoints disabled in production"}, 403
        return config.get_store_info()

    logger.info("✅ RISE Research backend initialized successfully")
    return app
