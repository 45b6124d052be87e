"""
Eventbook
GraphQL API for events and the users who create them
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
