"""Admin endpoints for the role mapping table.

Routes (mounted under /api):
    GET    /roles                          - list mappings
    POST   /roles                          - add a mapping {remote_id, local_id}
    DELETE /roles/<remote_id>              - remove by chat role id (no-op if absent)
    DELETE /roles/by-local-id/<local_id>   - remove by game server role id (no-op if absent)
"""
from __future__ import annotations

from flask import Blueprint, abort, current_app, jsonify, request

from rolebridge.api.decorators import require_admin_token
from rolebridge.core import audit
from rolebridge.core.exceptions import RoleSyncError
from rolebridge.core.role_sync import RoleSyncService

bp = Blueprint("roles", __name__)

OPERATOR = "admin-api"


def get_service() -> RoleSyncService:
    return current_app.config["ROLE_SYNC_SERVICE"]


def _parse_new_role(payload) -> tuple[int, str]:
    if not isinstance(payload, dict):
        abort(400, description="JSON object body required")

    remote_id = payload.get("remote_id")
    local_id = payload.get("local_id")

    if isinstance(remote_id, bool) or not isinstance(remote_id, int):
        abort(400, description="remote_id must be an integer")
    if not isinstance(local_id, str) or not local_id.strip():
        abort(400, description="local_id must be a non-empty string")

    return remote_id, local_id.strip()


@bp.route("/roles", methods=["GET"])
@require_admin_token
def list_roles():
    roles = get_service().get_all_roles()
    return jsonify({"roles": [role.to_dict() for role in roles]})


@bp.route("/roles", methods=["POST"])
@require_admin_token
def create_role():
    remote_id, local_id = _parse_new_role(request.get_json(silent=True))

    try:
        get_service().add_role(remote_id, local_id)
    except RoleSyncError as e:
        audit.safe_log_sync_event(
            "role_add", local_id, operator=OPERATOR,
            details={"remote_id": remote_id, "error": type(e).__name__}, success=False,
        )
        raise

    audit.safe_log_sync_event("role_add", local_id, operator=OPERATOR, details={"remote_id": remote_id})
    return jsonify({"local_id": local_id, "remote_id": remote_id}), 201


@bp.route("/roles/<int:remote_id>", methods=["DELETE"])
@require_admin_token
def delete_role(remote_id: int):
    get_service().remove_role(remote_id)
    audit.safe_log_sync_event("role_remove", str(remote_id), operator=OPERATOR, details={"by": "remote_id"})
    return "", 204


@bp.route("/roles/by-local-id/<string:local_id>", methods=["DELETE"])
@require_admin_token
def delete_role_by_local_id(local_id: str):
    get_service().remove_role_by_local_id(local_id)
    audit.safe_log_sync_event("role_remove", local_id, operator=OPERATOR, details={"by": "local_id"})
    return "", 204
