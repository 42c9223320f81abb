"""Authentication for Chatter."""

from .adapters.base import AuthAdapter, AuthenticationError, Principal
from .context import create_pending_user, resolve_current_user
from .factory import get_auth_adapter

__all__ = [
    "AuthAdapter",
    "AuthenticationError",
    "Principal",
    "create_pending_user",
    "get_auth_adapter",
    "resolve_current_user",
]
