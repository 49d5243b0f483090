"""Typed exceptions for role synchronization."""
from __future__ import annotations

import sqlite3
from typing import Optional


class RoleSyncError(Exception):
    """Base exception for all role sync operations."""
    pass


class NotLinkedError(RoleSyncError):
    """Member has no linked game server account."""

    def __init__(self, member_id: int):
        self.member_id = member_id
        super().__init__("User not linked")


class StoreError(RoleSyncError):
    """Relational store returned an error other than "no row found".

    Attributes:
        cause: Underlying sqlite3 exception
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(f"Database error: {message}")


class DuplicateRoleError(StoreError):
    """Role mapping insert violated the uniqueness constraint."""
    pass


class ServerRequestError(RoleSyncError):
    """Request to the game server could not complete (network, DNS, TLS, timeout).

    Attributes:
        cause: Underlying requests exception
    """

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Error making a request to the server: {cause}")


class ServerUpdateError(RoleSyncError):
    """Game server answered with a non-2xx status.

    Attributes:
        status_code: HTTP status code
        body: Response body text (placeholder if unreadable)
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Server returned error (code {status_code}): {body}")


class InternalError(RoleSyncError):
    """An invariant that should never break did; details are only logged."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Internal error: {message}")


def store_error_from(exc: Exception) -> StoreError:
    """Map a sqlite3 exception (or a bound-parameter overflow) to the store error kind it represents."""
    if isinstance(exc, sqlite3.IntegrityError) and "UNIQUE" in str(exc).upper():
        return DuplicateRoleError(str(exc), cause=exc)
    return StoreError(str(exc), cause=exc)
