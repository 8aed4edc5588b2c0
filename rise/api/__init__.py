import logging
from dataclasses import dataclass

from flask import Blueprint, Flask, current_app

from rise.services.availability_service import AvailabilityService
from rise.services.identity import IdentityResolver
from rise.services.report_service import ReportService

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Per-app service instances, built once in ``create_app``."""

    identity: IdentityResolver
    availability: AvailabilityService
    reports: ReportService


def get_services() -> Services:
    return current_app.rise_services


def register_blueprints(app: Flask) -> None:
    """Register all Flask blueprints with the application."""

    # Import blueprints
    from .auth import auth_bp
    from .reports import reports_bp
    from .schedules import schedules_bp

    # Register all blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(schedules_bp)
    app.register_blueprint(reports_bp)

    # Basic API blueprint
    api_bp = Blueprint("api", __name__)

    @api_bp.route("/")
    def index():
        """Basic sanity endpoint to verify that the API is reachable."""
        return {"message": "RISE Research API v1.0", "status": "running"}

    app.register_blueprint(api_bp)

    logger.info("✅ Registered all API blueprints:")
    logger.info("   - /verify-identity-token (POST)")
    logger.info("   - /verify-email (POST)")
    logger.info("   - /authorized-emails (GET)")
    logger.info("   - /check-eligibility (POST)")
    logger.info("   - /submit-availability (POST)")
    logger.info("   - /mentor-schedules/<email> (GET)")
    logger.info("   - /time-slots (GET)")
    logger.info("   - /pending-reports (GET)")
    logger.info("   - /validate-classes (POST)")
    logger.info("   - /raise-discrepancy (POST)")
