"""SQLite persistence for role mappings and linked accounts.

Every operation opens its own short-lived connection, so a single RoleStore
can be shared by concurrent callers (threads, worker processes, the CLI).
sqlite3 exceptions never leave this module; they are converted with
store_error_from() at each query.
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .exceptions import store_error_from
from .models import LinkedAccount, RoleMapping

BUSY_TIMEOUT_SECONDS = 5.0

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS roles (
    id TEXT PRIMARY KEY,
    discord_id INTEGER UNIQUE
);
CREATE TABLE IF NOT EXISTS linked_users (
    id INTEGER PRIMARY KEY,
    gd_account_id INTEGER
);
"""


class RoleStore:
    """Queries over the roles and linked_users tables."""

    def __init__(self, database_path: str | Path):
        self.database_path = Path(database_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that commits on success and always closes."""
        try:
            conn = sqlite3.connect(str(self.database_path), timeout=BUSY_TIMEOUT_SECONDS)
        except sqlite3.Error as exc:
            raise store_error_from(exc) from exc
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        except (sqlite3.Error, OverflowError) as exc:
            # OverflowError: an id outside the signed 64-bit INTEGER range
            raise store_error_from(exc) from exc
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create tables if missing and switch the file to WAL journaling."""
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.executescript(SCHEMA_SQL)

    def ping(self) -> None:
        """Run a trivial query; raises StoreError if the database is unusable."""
        with self._connect() as conn:
            conn.execute("SELECT 1 FROM roles LIMIT 1").fetchall()

    # ── roles ───────────────────────────────────────────────────────────────

    def get_all_roles(self) -> list[RoleMapping]:
        with self._connect() as conn:
            rows = conn.execute("SELECT id, discord_id FROM roles").fetchall()
        return [RoleMapping(local_id=row["id"], remote_id=row["discord_id"]) for row in rows]

    def add_role(self, remote_role_id: int, local_role_id: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO roles (id, discord_id) VALUES (?, ?)",
                (local_role_id, remote_role_id),
            )

    def remove_role(self, remote_role_id: int) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM roles WHERE discord_id = ?", (remote_role_id,))

    def remove_role_by_local_id(self, local_role_id: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM roles WHERE id = ?", (local_role_id,))

    # ── linked users ────────────────────────────────────────────────────────

    def get_linked_account(self, member_id: int) -> Optional[LinkedAccount]:
        """Return the member's link, or None when no row exists."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, gd_account_id FROM linked_users WHERE id = ?",
                (member_id,),
            ).fetchone()
        if row is None:
            return None
        return LinkedAccount(community_member_id=row["id"], remote_account_id=row["gd_account_id"])

    def link_member(self, member_id: int, account_id: int) -> None:
        """Insert or replace the member's link (used by the linking flow)."""
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO linked_users (id, gd_account_id) VALUES (?, ?)",
                (member_id, account_id),
            )

    def unlink_member(self, member_id: int) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM linked_users WHERE id = ?", (member_id,))
