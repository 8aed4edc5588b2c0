# rise/api/schedules.py
"""Student availability submission and mentor schedule endpoints."""
import logging

from flask import Blueprint, jsonify, request

from rise.api import get_services

logger = logging.getLogger(__name__)

schedules_bp = Blueprint("schedules", __name__)


@schedules_bp.route("/check-eligibility", methods=["POST"])
def check_eligibility():
    """
    Is the caller an active student, and which week may they book?

    Body: {"email": str, "timezone": optional IANA name used to render any
    existing submission}. A blocked student gets success=true with
    hasExistingSubmission=true; a non-student gets success=false.
    """
    data = request.get_json(silent=True) or {}
    result = get_services().availability.check_student_eligibility(
        data.get("email"), viewer_timezone=data.get("timezone")
    )
    return jsonify(result)


@schedules_bp.route("/submit-availability", methods=["POST"])
def submit_availability():
    data = request.get_json(silent=True) or {}
    result = get_services().availability.submit_availability(data)
    return jsonify(result)


@schedules_bp.route("/mentor-schedules/<path:email>", methods=["GET"])
def mentor_schedules(email: str):
    result = get_services().availability.get_mentor_schedules(
        email, viewer_timezone=request.args.get("timezone")
    )
    return jsonify(result)


@schedules_bp.route("/time-slots", methods=["GET"])
def time_slots():
    """Hourly slots for ``?timezone=`` on ``?date=YYYY-MM-DD`` (past hours of today dropped)."""
    result = get_services().availability.list_time_slots(
        request.args.get("timezone"), request.args.get("date")
    )
    return jsonify(result)
