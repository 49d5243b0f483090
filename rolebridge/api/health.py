"""Health check endpoints."""
from flask import Blueprint, current_app

from rolebridge.core.exceptions import StoreError

bp = Blueprint("health", __name__)


@bp.route("/health")
def health_check():
    """Basic health check endpoint."""
    return ("ok", 200, {"Content-Type": "text/plain"})


@bp.route("/ready")
def readiness_check():
    """Readiness check: the role store must answer a trivial query."""
    service = current_app.config.get("ROLE_SYNC_SERVICE")
    if service is not None:
        try:
            service.store.ping()
        except StoreError as e:
            current_app.logger.warning(f"Readiness check failed: {e}")
            return ("store unavailable", 503, {"Content-Type": "text/plain"})
    return ("ready", 200, {"Content-Type": "text/plain"})
