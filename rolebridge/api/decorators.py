"""Authentication decorators for the admin API."""
from __future__ import annotations

import hmac
import logging
from functools import wraps

from flask import current_app, jsonify, request

logger = logging.getLogger(__name__)


def _unauthorized(detail: str):
    return jsonify({"error": "Unauthorized", "message": detail}), 401


def require_admin_token(fn):
    """
    Require ``Authorization: Bearer <admin token>`` on the decorated route.

    The expected token comes from AppConfig.admin_token. When no token is
    configured every request is refused, so an unconfigured deployment never
    exposes the mapping table.

    Example:
        @bp.route("/roles", methods=["POST"])
        @require_admin_token
        def create_role():
            ...
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):
        cfg = current_app.config["APP_CONFIG"]
        expected = cfg.admin_token

        if not expected:
            logger.warning("Admin API request refused: no admin token configured")
            return jsonify({"error": "Service Unavailable", "message": "Admin API is disabled"}), 503

        auth_header = request.headers.get("Authorization", "")
        if not auth_header:
            logger.warning("Admin request missing Authorization header")
            return _unauthorized("Authorization header required. Use 'Authorization: Bearer <token>'")

        if not auth_header.startswith("Bearer "):
            logger.warning("Admin request with invalid Authorization format")
            return _unauthorized("Invalid Authorization header format. Expected 'Bearer <token>'")

        token = auth_header[7:]  # Remove "Bearer " prefix
        if not token or not hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
            logger.warning("Admin request with invalid token")
            return _unauthorized("Invalid token")

        return fn(*args, **kwargs)

    return wrapper
