"""Base authentication adapter interface and types."""

from __future__ import annotations

from typing import NotRequired, Protocol, TypedDict
from uuid import UUID


class Principal(TypedDict):
    """Identity extracted from an incoming token."""

    subject: str  # local user id (sub)
    version: int
    email: NotRequired[str]
    claims: NotRequired[dict]


class AuthAdapter(Protocol):
    """Token verification and issuing interface."""

    async def verify_token(self, token: str) -> Principal:
        """
        Verify a token and return the principal identity.

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        ...

    async def issue_token(self, user_id: UUID, version: int, claims: dict | None = None) -> str:
        """Issue a new signed token for a local user."""
        ...


class AuthenticationError(Exception):
    """Raised when authentication fails."""

    pass
