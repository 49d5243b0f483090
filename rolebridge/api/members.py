"""Admin endpoints that trigger syncs for a single member.

The chat layer normally calls RoleSyncService directly; these routes let an
operator replay a sync or an unlink by hand.
"""
from __future__ import annotations

from flask import Blueprint, abort, request

from rolebridge.api.decorators import require_admin_token
from rolebridge.api.roles import OPERATOR, get_service
from rolebridge.core import audit
from rolebridge.core.exceptions import RoleSyncError
from rolebridge.core.models import Member

bp = Blueprint("members", __name__)


def _member_from_request(member_id: int) -> Member:
    payload = request.get_json(silent=True)
    if payload is not None and not isinstance(payload, dict):
        abort(400, description="JSON object body required")
    try:
        return Member.from_payload(member_id, payload)
    except ValueError as e:
        abort(400, description=str(e))


def _run_audited(event_type, member: Member, operation) -> None:
    """Run a service call and record its outcome in the audit trail."""
    details = {"display_name": member.display_name, "role_ids": sorted(member.role_ids)}
    try:
        operation(member)
    except RoleSyncError as e:
        details["error"] = type(e).__name__
        audit.safe_log_sync_event(event_type, str(member.member_id), operator=OPERATOR, details=details, success=False)
        raise
    audit.safe_log_sync_event(event_type, str(member.member_id), operator=OPERATOR, details=details)


@bp.route("/members/<int:member_id>/sync", methods=["POST"])
@require_admin_token
def sync_member(member_id: int):
    member = _member_from_request(member_id)
    _run_audited("role_sync", member, get_service().sync_roles)
    return "", 204


@bp.route("/members/<int:member_id>/unlink", methods=["POST"])
@require_admin_token
def unlink_member(member_id: int):
    member = _member_from_request(member_id)
    _run_audited("unlink", member, get_service().handle_unlink)
    return "", 204


@bp.route("/members/<int:member_id>/link", methods=["PUT"])
@require_admin_token
def link_member(member_id: int):
    """Development aid standing in for the external account-linking flow."""
    payload = request.get_json(silent=True)
    account_id = payload.get("account_id") if isinstance(payload, dict) else None
    if isinstance(account_id, bool) or not isinstance(account_id, int):
        abort(400, description="account_id must be an integer")

    get_service().store.link_member(member_id, account_id)
    audit.safe_log_sync_event("link", str(member_id), operator=OPERATOR, details={"account_id": account_id})
    return "", 204
