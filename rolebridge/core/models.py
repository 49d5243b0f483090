"""Plain data types shared by the store, the server client and the service."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol


@dataclass(frozen=True)
class RoleMapping:
    """Maps a chat role (remote_id) to a game server role (local_id)."""
    local_id: str
    remote_id: int

    def to_dict(self) -> dict[str, Any]:
        return {"local_id": self.local_id, "remote_id": self.remote_id}


@dataclass(frozen=True)
class LinkedAccount:
    """Link between a community member and a game server account."""
    community_member_id: int
    remote_account_id: int


@dataclass
class SyncRequest:
    """Role update pushed to the game server; built fresh for every call."""
    remote_account_id: int
    keep: list[str] = field(default_factory=list)
    remove: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """Wire representation expected by /gsp/sync_roles."""
        return {
            "account_id": int(self.remote_account_id),
            "keep": [str(role) for role in self.keep],
            "remove": [str(role) for role in self.remove],
        }


class MemberLike(Protocol):
    """Anything exposing a member id, a display name and held role ids."""
    member_id: int
    display_name: str
    role_ids: Iterable[int]


@dataclass(frozen=True)
class Member:
    """Community member snapshot handed in by the chat layer."""
    member_id: int
    display_name: str = ""
    role_ids: frozenset[int] = frozenset()

    @classmethod
    def from_payload(cls, member_id: int, payload: dict[str, Any] | None) -> "Member":
        """Build a member from an admin API / CLI payload.

        Raises:
            ValueError: If role_ids is not a list of integers
        """
        payload = payload or {}
        raw_roles = payload.get("role_ids", [])
        if not isinstance(raw_roles, list):
            raise ValueError("role_ids must be a list of integers")
        if any(isinstance(role_id, bool) or not isinstance(role_id, int) for role_id in raw_roles):
            raise ValueError("role_ids must be a list of integers")
        role_ids = frozenset(raw_roles)
        display_name = str(payload.get("display_name") or member_id)
        return cls(member_id=int(member_id), display_name=display_name, role_ids=role_ids)
