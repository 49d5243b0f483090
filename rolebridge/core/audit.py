"""Audit logging for role sync operations (sync, unlink, mapping changes)."""

from __future__ import annotations
import datetime
import hashlib
import hmac
import json
import logging
import os
from pathlib import Path
from typing import Any, Literal

logger = logging.getLogger(__name__)

AUDIT_LOG_DIR = Path(os.environ.get("AUDIT_LOG_DIR", ".runtime/audit"))
AUDIT_LOG_FILE = AUDIT_LOG_DIR / "role-sync-events.jsonl"


def _get_signing_key() -> bytes:
    """Get the audit signing key from environment (read lazily so tests can override it)."""
    return os.environ.get("AUDIT_LOG_SIGNING_KEY", "").strip().encode("utf-8")


EventType = Literal["role_sync", "unlink", "role_add", "role_remove", "link"]


def _ensure_audit_dir() -> None:
    """Create audit directory with restricted permissions."""
    AUDIT_LOG_DIR.mkdir(parents=True, exist_ok=True)
    AUDIT_LOG_DIR.chmod(0o700)


def _sign_event(event: dict[str, Any]) -> str:
    """Generate HMAC-SHA256 signature for audit event."""
    signing_key = _get_signing_key()
    if not signing_key:
        return ""
    # Canonical JSON representation for signing
    canonical = json.dumps(event, sort_keys=True, separators=(",", ":"))
    return hmac.new(signing_key, canonical.encode("utf-8"), hashlib.sha256).hexdigest()


def log_sync_event(
    event_type: EventType,
    subject: str,
    *,
    operator: str = "system",
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    """Append an event to the audit trail with timestamp and signature.

    Args:
        event_type: Operation performed
        subject: Member id or role id the operation targeted
        operator: Who performed the operation ("admin-api", "cli", ...)
        details: Additional context (roles, error kind, ...)
        success: Whether the operation succeeded
    """
    _ensure_audit_dir()

    event = {
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "event_type": event_type,
        "subject": subject,
        "operator": operator,
        "success": success,
        "details": details or {},
    }

    signature = _sign_event(event)
    if signature:
        event["signature"] = signature

    # One JSON object per line
    with AUDIT_LOG_FILE.open("a", encoding="utf-8") as f:
        f.write(json.dumps(event, ensure_ascii=False) + "\n")

    AUDIT_LOG_FILE.chmod(0o600)


def safe_log_sync_event(
    event_type: EventType,
    subject: str,
    *,
    operator: str = "system",
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> bool:
    """Log an audit event; failures are reported as warnings and never raised.

    Returns:
        True if the event was written, False otherwise
    """
    try:
        log_sync_event(
            event_type,
            subject,
            operator=operator,
            details=details,
            success=success,
        )
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.warning("[audit] Failed to log %s event for %s: %s", event_type, subject, e)
        return False


def verify_audit_log() -> tuple[int, int]:
    """Verify all signatures in the audit log.

    Returns:
        Tuple of (total_events, valid_signatures)
    """
    if not AUDIT_LOG_FILE.exists():
        return 0, 0

    total = 0
    valid = 0

    with AUDIT_LOG_FILE.open("r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            total += 1
            try:
                event = json.loads(line)
                stored_sig = event.pop("signature", "")
                if not stored_sig:
                    continue
                computed_sig = _sign_event(event)
                if computed_sig and hmac.compare_digest(stored_sig, computed_sig):
                    valid += 1
            except (json.JSONDecodeError, AttributeError):
                continue

    return total, valid
