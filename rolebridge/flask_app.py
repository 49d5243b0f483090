"""Flask application factory and bootstrap.

This module provides the create_app() factory function for the admin API:
health checks, role mapping administration and manual member syncs.
"""
from __future__ import annotations
import logging
from typing import Optional

from flask import Flask

from rolebridge.config import AppConfig, load_settings
from rolebridge.core.role_sync import RoleSyncService


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(cfg: Optional[AppConfig] = None, service: Optional[RoleSyncService] = None) -> Flask:
    """Create and configure Flask application.

    Args:
        cfg: Loaded settings (defaults to load_settings())
        service: Pre-built service (defaults to one wired from cfg)
    """
    cfg = cfg or load_settings()

    if service is None:
        service = RoleSyncService.from_config(cfg)
        service.store.init_schema()

    app = Flask(__name__)

    # Store config and service for easy access in routes
    app.config["APP_CONFIG"] = cfg
    app.config["ROLE_SYNC_SERVICE"] = service

    # Register blueprints
    from rolebridge.api import health, errors, roles, members

    app.register_blueprint(health.bp)
    app.register_blueprint(roles.bp, url_prefix="/api")
    app.register_blueprint(members.bp, url_prefix="/api")

    # Register error handlers
    errors.register_error_handlers(app)

    if cfg.demo_mode:
        # keep/remove lists are logged at DEBUG by rolebridge.core.role_sync
        logging.getLogger("rolebridge").setLevel(logging.DEBUG)
        app.logger.warning("Demo mode active - do not deploy with demo credentials")

    mode_label = "DEMO" if cfg.demo_mode else "PRODUCTION"
    print(f"[flask_app] Mode={mode_label}")
    print(f"[flask_app] Admin API registered at /api (store: {cfg.database_path})")

    return app
