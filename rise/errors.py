# rise/errors.py
"""Exception types surfaced by the RISE services and their JSON rendering."""
import logging
from typing import Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class RiseError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message}


class ConfigurationError(RiseError):
    """Required Airtable identifiers are absent."""

    status_code = 500
    error = "Configuration error"


class UpstreamError(RiseError):
    """The external record store failed or could not be reached."""

    status_code = 502
    error = "Upstream error"

    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.retryable = retryable

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.upstream_status is not None:
            body["upstreamStatus"] = self.upstream_status
        body["retryable"] = self.retryable
        return body


class ValidationError(RiseError):
    """A request is missing a required field or carries a malformed one."""

    status_code = 400
    error = "Invalid request"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.field:
            body["field"] = self.field
        return body


class AuthorizationError(RiseError):
    """Identity could not be verified or is not registered."""

    status_code = 403
    error = "Forbidden"


def register_error_handlers(app: Flask) -> None:
    """Render every failure as a ``{error, message}`` JSON body."""

    @app.errorhandler(RiseError)
    def handle_rise_error(e: RiseError):
        if e.status_code >= 500:
            logger.error(f"❌ {e.error}: {e.message}")
        else:
            logger.info(f"⚠️ {e.error}: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def handle_not_found(e):
        return (
            jsonify(
                {
                    "error": "Not found",
                    "message": "The requested endpoint does not exist",
                }
            ),
            404,
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return jsonify({"error": e.name, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.error(f"💥 Server error: {str(e)}", exc_info=True)
        return jsonify({"error": "Internal server error", "message": str(e)}), 500
