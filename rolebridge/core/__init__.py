"""Core Business Logic Module

Role synchronization independent of Flask and of the chat platform.

Module Structure:
    - models.py        : RoleMapping, LinkedAccount, SyncRequest, Member
    - store.py         : SQLite queries (roles, linked_users)
    - server_client.py : HTTP client for POST /gsp/sync_roles
    - role_sync.py     : RoleSyncService entry points
    - exceptions.py    : RoleSyncError hierarchy
    - audit.py         : Signed audit trail used by the API and CLI

Public APIs:
    RoleSyncService (rolebridge.core.role_sync):
        - sync_roles()
        - handle_unlink()
        - add_role() / remove_role() / remove_role_by_local_id()
        - get_all_roles()
"""
from .exceptions import (
    RoleSyncError,
    NotLinkedError,
    StoreError,
    DuplicateRoleError,
    ServerRequestError,
    ServerUpdateError,
    InternalError,
)
from .models import Member, RoleMapping, LinkedAccount, SyncRequest
from .store import RoleStore
from .server_client import GameServerClient
from .role_sync import RoleSyncService, partition_roles

__all__ = [
    # Exceptions
    "RoleSyncError",
    "NotLinkedError",
    "StoreError",
    "DuplicateRoleError",
    "ServerRequestError",
    "ServerUpdateError",
    "InternalError",

    # Models
    "Member",
    "RoleMapping",
    "LinkedAccount",
    "SyncRequest",

    # Services
    "RoleStore",
    "GameServerClient",
    "RoleSyncService",
    "partition_roles",
]
