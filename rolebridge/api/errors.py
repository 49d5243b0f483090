"""Error handlers for the admin API.

Maps RoleSyncError subclasses to JSON responses. Internal errors and
unexpected exceptions are logged in full but answered with a generic message.
"""
from flask import jsonify
from werkzeug.exceptions import HTTPException

from rolebridge.core.exceptions import (
    DuplicateRoleError,
    InternalError,
    NotLinkedError,
    RoleSyncError,
    ServerRequestError,
    ServerUpdateError,
    StoreError,
)

GENERIC_MESSAGE = "An unexpected error occurred"


def error_response(error: RoleSyncError):
    """Build the (body, status) pair for a role sync failure."""
    if isinstance(error, NotLinkedError):
        return jsonify({
            "error": "NotLinked",
            "message": "User not linked",
            "member_id": error.member_id,
        }), 404

    if isinstance(error, DuplicateRoleError):
        return jsonify({"error": "Conflict", "message": "Role is already mapped"}), 409

    if isinstance(error, StoreError):
        return jsonify({"error": "StoreFailure", "message": "Database error"}), 500

    if isinstance(error, ServerUpdateError):
        return jsonify({
            "error": "RemoteRejection",
            "message": str(error),
            "status": error.status_code,
            "body": error.body,
        }), 502

    if isinstance(error, ServerRequestError):
        return jsonify({
            "error": "TransportFailure",
            "message": "Error making a request to the server",
        }), 502

    return jsonify({"error": "InternalError", "message": GENERIC_MESSAGE}), 500


def register_error_handlers(app):
    """Register error handlers with the Flask app."""

    @app.errorhandler(RoleSyncError)
    def handle_role_sync_error(error):
        """Handle failures raised by RoleSyncService."""
        if isinstance(error, (InternalError, StoreError)):
            app.logger.error(f"Role sync failure: {error}", exc_info=True)
        else:
            app.logger.warning(f"Role sync failure: {error}")
        return error_response(error)

    @app.errorhandler(400)
    def bad_request(error):
        """Handle 400 Bad Request errors."""
        return jsonify({"error": "Bad Request", "message": error.description}), 400

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 Not Found errors."""
        return jsonify({"error": "Not Found", "message": "Resource not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 Method Not Allowed errors."""
        return jsonify({"error": "Method Not Allowed", "message": str(error.description)}), 405

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle uncaught exceptions."""
        # Pass through HTTP errors
        if isinstance(error, HTTPException):
            return error

        # ALWAYS log the full error - logs are secure
        app.logger.error(f"Unhandled exception: {error}", exc_info=True)
        return jsonify({"error": "Internal Server Error", "message": GENERIC_MESSAGE}), 500
