"""Authentication adapters."""

from .base import AuthAdapter, AuthenticationError, Principal
from .jwt import JWTAuthAdapter

__all__ = ["AuthAdapter", "AuthenticationError", "JWTAuthAdapter", "Principal"]
