"""
Chatter Backend
Resolver layer and API for a group chat application
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
