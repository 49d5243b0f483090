"""Tests for the signed audit trail."""
import json
import stat

from rolebridge.core import audit


def _read_events():
    return [json.loads(line) for line in audit.AUDIT_LOG_FILE.read_text().splitlines()]


def test_log_sync_event_writes_signed_line(audit_dir):
    audit.log_sync_event("role_sync", "7", operator="cli", details={"role_ids": [100]})

    (event,) = _read_events()
    assert event["event_type"] == "role_sync"
    assert event["subject"] == "7"
    assert event["operator"] == "cli"
    assert event["success"] is True
    assert event["details"] == {"role_ids": [100]}
    assert len(event["signature"]) == 64


def test_audit_file_permissions(audit_dir):
    audit.log_sync_event("link", "7")

    assert stat.S_IMODE(audit.AUDIT_LOG_FILE.stat().st_mode) == 0o600
    assert stat.S_IMODE(audit_dir.stat().st_mode) == 0o700


def test_verify_counts_valid_signatures(audit_dir):
    audit.log_sync_event("role_add", "mod")
    audit.log_sync_event("role_remove", "mod", success=False)

    assert audit.verify_audit_log() == (2, 2)


def test_verify_detects_tampering(audit_dir):
    audit.log_sync_event("role_add", "mod")
    audit.log_sync_event("role_add", "vip")

    lines = audit.AUDIT_LOG_FILE.read_text().splitlines()
    forged = json.loads(lines[1])
    forged["subject"] = "admin"
    lines[1] = json.dumps(forged)
    audit.AUDIT_LOG_FILE.write_text("\n".join(lines) + "\n")

    assert audit.verify_audit_log() == (2, 1)


def test_unsigned_when_no_key(audit_dir, monkeypatch):
    monkeypatch.delenv("AUDIT_LOG_SIGNING_KEY")
    audit.log_sync_event("unlink", "7")

    (event,) = _read_events()
    assert "signature" not in event
    assert audit.verify_audit_log() == (1, 0)


def test_verify_missing_file(audit_dir):
    assert audit.verify_audit_log() == (0, 0)


def test_safe_log_reports_failure(audit_dir, monkeypatch, caplog):
    def broken(*args, **kwargs):
        raise OSError("read-only file system")

    monkeypatch.setattr(audit, "log_sync_event", broken)

    assert audit.safe_log_sync_event("role_sync", "7") is False
    assert "Failed to log role_sync event for 7" in caplog.text


def test_safe_log_success(audit_dir):
    assert audit.safe_log_sync_event("role_sync", "7") is True
    assert audit.AUDIT_LOG_FILE.exists()
