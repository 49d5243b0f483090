"""Tests for the rolesync command-line helper."""
import json

import pytest
import requests

from rolebridge.core import audit
from rolebridge.core.role_sync import RoleSyncService
from rolebridge.core.store import RoleStore
from scripts import rolesync


@pytest.fixture()
def db_path(tmp_path, audit_dir):
    path = tmp_path / "cli.db"
    rolesync.main(["--db", str(path), "init-db"])
    return path


@pytest.fixture()
def wire_service(monkeypatch, db_path, server_client):
    """Route sync/unlink through the fake HTTP session instead of real settings."""
    def build(path):
        return RoleSyncService(RoleStore(path), server_client)

    monkeypatch.setattr(rolesync, "_build_service", build)


def test_init_db_creates_file(tmp_path, audit_dir, capsys):
    path = tmp_path / "fresh" / "cli.db"
    rolesync.main(["--db", str(path), "init-db"])

    assert path.exists()
    assert "Schema ready" in capsys.readouterr().out


def test_add_and_list_roles(db_path, capsys):
    rolesync.main(["--db", str(db_path), "add-role", "--remote-id", "200", "--local-id", "vip"])
    rolesync.main(["--db", str(db_path), "add-role", "--remote-id", "100", "--local-id", "mod"])
    capsys.readouterr()

    rolesync.main(["--db", str(db_path), "list-roles"])

    assert capsys.readouterr().out.splitlines() == ["100\tmod", "200\tvip"]


def test_duplicate_add_exits_nonzero(db_path, capsys):
    rolesync.main(["--db", str(db_path), "add-role", "--remote-id", "100", "--local-id", "mod"])

    with pytest.raises(SystemExit) as excinfo:
        rolesync.main(["--db", str(db_path), "add-role", "--remote-id", "100", "--local-id", "vip"])

    assert excinfo.value.code == 1
    assert "[add-role] Error:" in capsys.readouterr().err

    last = json.loads(audit.AUDIT_LOG_FILE.read_text().splitlines()[-1])
    assert last["success"] is False
    assert last["details"]["error"] == "DuplicateRoleError"


def test_remove_role_by_either_id(db_path):
    rolesync.main(["--db", str(db_path), "add-role", "--remote-id", "100", "--local-id", "mod"])
    rolesync.main(["--db", str(db_path), "add-role", "--remote-id", "200", "--local-id", "vip"])

    rolesync.main(["--db", str(db_path), "remove-role", "--remote-id", "100"])
    rolesync.main(["--db", str(db_path), "remove-role", "--local-id", "vip"])

    assert RoleStore(db_path).get_all_roles() == []


def test_remove_role_requires_one_target(db_path):
    with pytest.raises(SystemExit) as excinfo:
        rolesync.main(["--db", str(db_path), "remove-role"])
    assert excinfo.value.code == 2


def test_sync_pushes_roles(db_path, wire_service, fake_session, capsys):
    rolesync.main(["--db", str(db_path), "add-role", "--remote-id", "100", "--local-id", "mod"])
    rolesync.main(["--db", str(db_path), "add-role", "--remote-id", "200", "--local-id", "vip"])
    rolesync.main(["--db", str(db_path), "link", "--member-id", "7", "--account-id", "42"])

    rolesync.main(["--db", str(db_path), "sync", "--member-id", "7", "--role-id", "100"])

    assert fake_session.payloads == [{"account_id": 42, "keep": ["mod"], "remove": ["vip"]}]
    assert "[sync] Member 7 done" in capsys.readouterr().out


def test_sync_unlinked_member_fails(db_path, wire_service, fake_session, capsys):
    with pytest.raises(SystemExit) as excinfo:
        rolesync.main(["--db", str(db_path), "sync", "--member-id", "8"])

    assert excinfo.value.code == 1
    assert "User not linked" in capsys.readouterr().err
    assert fake_session.calls == []


def test_unlink_removes_link_even_when_server_down(db_path, wire_service, fake_session):
    rolesync.main(["--db", str(db_path), "add-role", "--remote-id", "100", "--local-id", "mod"])
    rolesync.main(["--db", str(db_path), "link", "--member-id", "7", "--account-id", "42"])
    fake_session.error = requests.ConnectionError("Connection refused")

    with pytest.raises(SystemExit):
        rolesync.main(["--db", str(db_path), "unlink", "--member-id", "7"])

    assert RoleStore(db_path).get_linked_account(7) is None


def test_sync_configuration_error(db_path, monkeypatch, capsys):
    def broken(path):
        raise RuntimeError("Missing required environment variable: BOT_BASE_URL")

    monkeypatch.setattr(rolesync, "_build_service", broken)

    with pytest.raises(SystemExit) as excinfo:
        rolesync.main(["--db", str(db_path), "sync", "--member-id", "7"])

    assert excinfo.value.code == 1
    assert "Configuration error" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    rolesync.main([])
    assert "usage" in capsys.readouterr().out.lower()


def test_verify_audit_reports_signed_events(db_path, capsys):
    rolesync.main(["--db", str(db_path), "add-role", "--remote-id", "100", "--local-id", "mod"])
    capsys.readouterr()

    rolesync.main(["--db", str(db_path), "verify-audit"])

    assert "Audit log: 1/1 events with valid signatures" in capsys.readouterr().out


def test_verify_audit_fails_on_tampered_log(db_path, capsys):
    rolesync.main(["--db", str(db_path), "add-role", "--remote-id", "100", "--local-id", "mod"])
    event = json.loads(audit.AUDIT_LOG_FILE.read_text())
    event["subject"] = "admin"
    audit.AUDIT_LOG_FILE.write_text(json.dumps(event) + "\n")

    with pytest.raises(SystemExit) as excinfo:
        rolesync.main(["--db", str(db_path), "verify-audit"])

    assert excinfo.value.code == 1
    assert "0/1" in capsys.readouterr().out
