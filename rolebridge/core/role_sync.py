"""Role Sync Service: keeps game server roles in line with chat roles.

Architecture:
    chat layer / admin API / CLI ──> RoleSyncService ──┬──> RoleStore (sqlite)
                                                       └──> GameServerClient (HTTP)

The service never retries and never swallows errors; every failure reaches
the caller as a RoleSyncError subclass.
"""
from __future__ import annotations

import logging
from typing import Iterable

from rolebridge.config import AppConfig

from .exceptions import NotLinkedError
from .models import LinkedAccount, MemberLike, RoleMapping, SyncRequest
from .server_client import GameServerClient
from .store import RoleStore

logger = logging.getLogger(__name__)


def partition_roles(mappings: Iterable[RoleMapping], role_ids: Iterable[int]) -> tuple[list[str], list[str]]:
    """Split mapped local roles into (keep, remove) by the chat roles a member holds.

    Every mapping lands in exactly one of the two lists.
    """
    held = {int(role_id) for role_id in role_ids}
    keep: list[str] = []
    remove: list[str] = []
    for mapping in mappings:
        if mapping.remote_id in held:
            keep.append(mapping.local_id)
        else:
            remove.append(mapping.local_id)
    return keep, remove


class RoleSyncService:
    """Entry points called by the chat command layer."""

    def __init__(self, store: RoleStore, client: GameServerClient):
        self.store = store
        self.client = client

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "RoleSyncService":
        """Wire a service from loaded settings."""
        store = RoleStore(cfg.database_path)
        client = GameServerClient(cfg.base_url, cfg.server_password, timeout=cfg.request_timeout)
        return cls(store, client)

    def _linked_account(self, member_id: int) -> LinkedAccount:
        linked = self.store.get_linked_account(member_id)
        if linked is None:
            raise NotLinkedError(member_id)
        return linked

    def sync_roles(self, member: MemberLike) -> None:
        """Push the member's current roles to the game server.

        Reads the store and performs one HTTP request; nothing is written locally.

        Raises:
            NotLinkedError: Member has no linked account (no request is sent)
            StoreError: Database failure
            ServerRequestError, ServerUpdateError, InternalError: See GameServerClient
        """
        linked = self._linked_account(member.member_id)
        mappings = self.store.get_all_roles()

        keep, remove = partition_roles(mappings, member.role_ids)
        logger.debug("for %s, keep: %s, remove: %s", member.display_name, keep, remove)

        self.client.sync_roles(
            SyncRequest(remote_account_id=linked.remote_account_id, keep=keep, remove=remove)
        )

    def handle_unlink(self, member: MemberLike) -> None:
        """Unlink the member locally, then tell the game server to revoke every mapped role.

        The local delete is committed before the request is sent. If the
        request fails the member stays unlinked here while the server still
        holds the roles. A later sync_roles() fails with NotLinkedError, so
        the caller has to surface this error.
        """
        linked = self._linked_account(member.member_id)
        mappings = self.store.get_all_roles()

        self.store.unlink_member(member.member_id)

        self.client.sync_roles(
            SyncRequest(
                remote_account_id=linked.remote_account_id,
                keep=[],
                remove=[mapping.local_id for mapping in mappings],
            )
        )

    # ── mapping administration ──────────────────────────────────────────────

    def add_role(self, remote_role_id: int, local_role_id: str) -> None:
        """Raises DuplicateRoleError if remote_role_id is already mapped."""
        self.store.add_role(remote_role_id, local_role_id)

    def remove_role(self, remote_role_id: int) -> None:
        self.store.remove_role(remote_role_id)

    def remove_role_by_local_id(self, local_role_id: str) -> None:
        self.store.remove_role_by_local_id(local_role_id)

    def get_all_roles(self) -> list[RoleMapping]:
        return self.store.get_all_roles()
