"""HTTP client for the game server's role sync endpoint.

Handles serialization, the shared-secret Authorization header and the
classification of outcomes into typed exceptions. There are no retries: a
failed sync has to be re-invoked by the caller.
"""
from __future__ import annotations

import json
import logging
from typing import Optional

import requests

from rolebridge import __version__

from .exceptions import InternalError, ServerRequestError, ServerUpdateError
from .models import SyncRequest

logger = logging.getLogger(__name__)

SYNC_ROLES_PATH = "/gsp/sync_roles"
USER_AGENT = f"globed-game-server/discord-bot-{__version__}"
NO_MESSAGE = "<no message>"


class GameServerClient:
    """Sends role updates to the game server.

    Usage:
        client = GameServerClient("https://gs.example.com/", "secret")
        client.sync_roles(SyncRequest(42, keep=["mod"], remove=["vip"]))
    """

    def __init__(
        self,
        base_url: str,
        server_password: str,
        *,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Game server base URL (a trailing slash is stripped)
            server_password: Shared secret sent verbatim in the Authorization header
            timeout: Request timeout in seconds; None keeps the requests default
            session: Optional pre-built session (tests inject fakes here)
        """
        self.base_url = base_url[:-1] if base_url.endswith("/") else base_url
        self.server_password = server_password
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT

    @property
    def sync_url(self) -> str:
        return f"{self.base_url}{SYNC_ROLES_PATH}"

    def sync_roles(self, data: SyncRequest) -> None:
        """POST a role update.

        Raises:
            InternalError: Payload could not be serialized
            ServerRequestError: Transport failure (connection, DNS, TLS, timeout)
            ServerUpdateError: Server answered with a non-2xx status
        """
        body = self._serialize(data)

        try:
            resp = self.session.post(
                self.sync_url,
                data=body,
                headers={
                    "Authorization": self.server_password,
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ServerRequestError(exc) from exc

        if not 200 <= resp.status_code < 300:
            message = _read_body(resp)
            logger.warning("Role update failed: code %s, message: %s", resp.status_code, message)
            raise ServerUpdateError(resp.status_code, message)

    @staticmethod
    def _serialize(data: SyncRequest) -> str:
        try:
            return json.dumps(data.to_payload())
        except (TypeError, ValueError) as exc:
            logger.error("This should never fail: %s", exc, exc_info=True)
            raise InternalError("internal error in serializing data") from exc


def _read_body(resp: requests.Response) -> str:
    """Best-effort response text for diagnostics."""
    try:
        return resp.text
    except (requests.RequestException, ValueError, UnicodeDecodeError):
        return NO_MESSAGE
