# rise/api/auth.py
"""Google sign-in and email authorization endpoints."""
import logging

from flask import Blueprint, jsonify, request

from rise.api import get_services

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/verify-identity-token", methods=["POST"])
def verify_identity_token():
    """Verify a Google ID token and resolve the signed-in user's role."""
    data = request.get_json(silent=True) or {}
    result = get_services().identity.verify_identity_token(data.get("credential"))
    logger.info(f"✅ User authorized: {result['email']} (Role: {result['role']})")
    return jsonify(result)


@auth_bp.route("/verify-email", methods=["POST"])
def verify_email():
    data = request.get_json(silent=True) or {}
    email = data.get("email")
    authorized = get_services().identity.is_authorized(email)
    logger.info(
        f"{'✅' if authorized else '❌'} Email {email} is "
        f"{'authorized' if authorized else 'not authorized'}"
    )
    return jsonify({"authorized": authorized, "email": email})


@auth_bp.route("/authorized-emails", methods=["GET"])
def authorized_emails():
    logger.info("📋 Fetching authorized emails from Airtable...")
    emails = sorted(get_services().identity.authorized_emails())
    logger.info(f"✅ Total authorized emails: {len(emails)}")
    return jsonify({"emails": emails, "count": len(emails)})
