"""
In-Memory Repository Implementations.

For testing, local tooling and offline audits. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .placement_catalog import InMemoryPlacementCatalog
from .user_directory import InMemoryUserDirectoryRepository

__all__ = [
    "InMemoryUserDirectoryRepository",
    "InMemoryPlacementCatalog",
]
