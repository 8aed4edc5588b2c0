# rise/api/reports.py
import logging

from flask import Blueprint, jsonify, request

from rise.api import get_services
from rise.models import ConfirmationStatus

logger = logging.getLogger(__name__)

reports_bp = Blueprint("reports", __name__)


@reports_bp.route("/pending-reports", methods=["GET"])
def pending_reports():
    return jsonify(get_services().reports.pending_reports())


@reports_bp.route("/validate-classes", methods=["POST"])
def validate_classes():
    """Mark the given class records as confirmed by the mentor."""
    data = request.get_json(silent=True) or {}
    result = get_services().reports.set_class_confirmation(
        data.get("programId"),
        data.get("classIds"),
        ConfirmationStatus.CLASS_CONFIRMED,
    )
    result["message"] = (
        f"Successfully validated {result['updatedCount']} class(es) "
        f"for Program {result['programId']}."
    )
    return jsonify(result)


@reports_bp.route("/raise-discrepancy", methods=["POST"])
def raise_discrepancy():
    data = request.get_json(silent=True) or {}
    issues = data.get("issues")
    if issues:
        logger.info(f"📝 Raising discrepancy: {str(issues)[:100]}...")
    result = get_services().reports.set_class_confirmation(
        data.get("programId"),
        data.get("classIds"),
        ConfirmationStatus.ISSUE_RAISED,
        issues=issues,
    )
    result["message"] = f"Discrepancy has been recorded for Program {result['programId']}."
    return jsonify(result)
