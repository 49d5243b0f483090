"""Command-line helper for the role mapping table and manual syncs.

This module serves as a CLI wrapper around rolebridge.core.
"""
from __future__ import annotations
import argparse
import logging
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rolebridge.config import load_settings
from rolebridge.config.settings import DEFAULT_DATABASE_PATH
from rolebridge.core import audit
from rolebridge.core.exceptions import RoleSyncError
from rolebridge.core.models import Member
from rolebridge.core.role_sync import RoleSyncService
from rolebridge.core.store import RoleStore


def _fail(cmd: str, error: Exception, operator: str, subject: str, details: dict | None = None) -> None:
    print(f"[{cmd}] Error: {error}", file=sys.stderr)
    event = {"sync": "role_sync", "unlink": "unlink", "add-role": "role_add", "link": "link"}.get(cmd)
    if event:
        audit.safe_log_sync_event(
            event, subject, operator=operator,
            details={**(details or {}), "error": type(error).__name__}, success=False,
        )
    sys.exit(1)


def _build_service(db_path: str) -> RoleSyncService:
    """Service wired from environment settings, with the store path taken from --db."""
    cfg = load_settings()
    cfg.database_path = db_path
    return RoleSyncService.from_config(cfg)


def main(argv: list[str] | None = None) -> None:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Role bridge admin helper")
    parser.add_argument("--db", default=os.environ.get("BOT_DATABASE_PATH", DEFAULT_DATABASE_PATH),
                        help="SQLite database path (default: $BOT_DATABASE_PATH)")
    parser.add_argument("--operator", default="cli",
                        help="Operator identifier for audit logs (default: cli)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log computed keep/remove lists")

    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("init-db")

    sa = sub.add_parser("add-role")
    sa.add_argument("--remote-id", type=int, required=True, help="Chat platform role id")
    sa.add_argument("--local-id", required=True, help="Game server role id")

    sr = sub.add_parser("remove-role")
    target = sr.add_mutually_exclusive_group(required=True)
    target.add_argument("--remote-id", type=int)
    target.add_argument("--local-id")

    sub.add_parser("list-roles")

    sk = sub.add_parser("link")
    sk.add_argument("--member-id", type=int, required=True)
    sk.add_argument("--account-id", type=int, required=True)

    ss = sub.add_parser("sync")
    ss.add_argument("--member-id", type=int, required=True)
    ss.add_argument("--role-id", type=int, action="append", default=[],
                    help="Chat role id held by the member (repeatable)")
    ss.add_argument("--name", default="", help="Display name for logs")

    su = sub.add_parser("unlink")
    su.add_argument("--member-id", type=int, required=True)
    su.add_argument("--name", default="", help="Display name for logs")

    sub.add_parser("verify-audit", help="Check HMAC signatures in the audit trail")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.cmd:
        parser.print_help()
        return

    if args.cmd == "verify-audit":
        total, valid = audit.verify_audit_log()
        print(f"[verify-audit] Audit log: {valid}/{total} events with valid signatures")
        if valid != total:
            sys.exit(1)
        return

    store = RoleStore(args.db)

    if args.cmd == "init-db":
        try:
            store.init_schema()
        except RoleSyncError as e:
            _fail(args.cmd, e, args.operator, "")
        print(f"[init-db] Schema ready at {args.db}")
    elif args.cmd == "add-role":
        try:
            store.add_role(args.remote_id, args.local_id)
        except RoleSyncError as e:
            _fail(args.cmd, e, args.operator, args.local_id, {"remote_id": args.remote_id})
        audit.safe_log_sync_event("role_add", args.local_id, operator=args.operator,
                                  details={"remote_id": args.remote_id})
        print(f"[add-role] {args.remote_id} -> '{args.local_id}'")
    elif args.cmd == "remove-role":
        try:
            if args.remote_id is not None:
                store.remove_role(args.remote_id)
                subject, by = str(args.remote_id), "remote_id"
            else:
                store.remove_role_by_local_id(args.local_id)
                subject, by = args.local_id, "local_id"
        except RoleSyncError as e:
            _fail(args.cmd, e, args.operator, "")
        audit.safe_log_sync_event("role_remove", subject, operator=args.operator, details={"by": by})
        print(f"[remove-role] Removed '{subject}' (if present)")
    elif args.cmd == "list-roles":
        try:
            roles = store.get_all_roles()
        except RoleSyncError as e:
            _fail(args.cmd, e, args.operator, "")
        for role in sorted(roles, key=lambda r: r.local_id):
            print(f"{role.remote_id}\t{role.local_id}")
    elif args.cmd == "link":
        try:
            store.link_member(args.member_id, args.account_id)
        except RoleSyncError as e:
            _fail(args.cmd, e, args.operator, str(args.member_id))
        audit.safe_log_sync_event("link", str(args.member_id), operator=args.operator,
                                  details={"account_id": args.account_id})
        print(f"[link] Member {args.member_id} -> account {args.account_id}")
    elif args.cmd in ("sync", "unlink"):
        try:
            service = _build_service(args.db)
        except (RuntimeError, ValueError) as e:
            print(f"[{args.cmd}] Configuration error: {e}", file=sys.stderr)
            sys.exit(1)

        role_ids = getattr(args, "role_id", [])
        member = Member(member_id=args.member_id, display_name=args.name or str(args.member_id),
                        role_ids=frozenset(role_ids))
        details = {"role_ids": sorted(member.role_ids)}
        operation = service.sync_roles if args.cmd == "sync" else service.handle_unlink
        try:
            operation(member)
        except RoleSyncError as e:
            _fail(args.cmd, e, args.operator, str(args.member_id), details)

        event = "role_sync" if args.cmd == "sync" else "unlink"
        audit.safe_log_sync_event(event, str(args.member_id), operator=args.operator, details=details)
        print(f"[{args.cmd}] Member {args.member_id} done")


if __name__ == "__main__":
    main()
