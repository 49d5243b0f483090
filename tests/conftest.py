"""Pytest shared fixtures."""
import json
import pathlib
import sys

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from rolebridge.config import AppConfig
from rolebridge.core.role_sync import RoleSyncService
from rolebridge.core.server_client import GameServerClient
from rolebridge.core.store import RoleStore

ADMIN_TOKEN = "test-admin-token"


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_real_http(monkeypatch, request):
    """
    Prevent unit tests from reaching a real game server.

    Integration tests are explicitly marked with @pytest.mark.integration and
    are allowed to perform real HTTP calls by skipping this fixture.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _refuse(self, prepared, **kwargs):
        raise RuntimeError(f"Unexpected HTTP {prepared.method} in unit test: {prepared.url}")

    monkeypatch.setattr(requests.Session, "send", _refuse)


# ─────────────────────────────────────────────────────────────────────────────
# Fake HTTP session
# ─────────────────────────────────────────────────────────────────────────────
class StubResponse:
    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    """Stands in for requests.Session; records every POST."""

    def __init__(self):
        self.headers = {}
        self.calls = []
        self.response = StubResponse(200, "")
        self.error = None

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append({"url": url, "data": data, "headers": headers or {}, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def payloads(self):
        return [json.loads(call["data"]) for call in self.calls]


# ─────────────────────────────────────────────────────────────────────────────
# Core fixtures
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def store(tmp_path):
    role_store = RoleStore(tmp_path / "rolebridge.db")
    role_store.init_schema()
    return role_store


@pytest.fixture()
def fake_session():
    return FakeSession()


@pytest.fixture()
def server_client(fake_session):
    return GameServerClient("https://gs.example.com/", "shared-secret", session=fake_session)


@pytest.fixture()
def service(store, server_client):
    return RoleSyncService(store, server_client)


@pytest.fixture()
def app_config(tmp_path):
    return AppConfig(
        demo_mode=False,
        base_url="https://gs.example.com",
        server_password="shared-secret",
        guild_id=1234,
        database_path=str(tmp_path / "rolebridge.db"),
        admin_token=ADMIN_TOKEN,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Flask Test Client
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def audit_dir(monkeypatch, tmp_path):
    """Redirect the audit trail into the test's temp directory."""
    from rolebridge.core import audit

    directory = tmp_path / "audit"
    monkeypatch.setattr(audit, "AUDIT_LOG_DIR", directory)
    monkeypatch.setattr(audit, "AUDIT_LOG_FILE", directory / "role-sync-events.jsonl")
    monkeypatch.setenv("AUDIT_LOG_SIGNING_KEY", "test-signing-key")
    return directory


@pytest.fixture()
def flask_app(app_config, service, audit_dir):
    from rolebridge.flask_app import create_app

    app = create_app(app_config, service)
    app.config.update(TESTING=True)
    return app


@pytest.fixture()
def client(flask_app):
    with flask_app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def auth_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
