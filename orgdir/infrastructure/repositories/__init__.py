"""Repository implementations (persistence adapters)."""

from .in_memory import InMemoryPlacementCatalog, InMemoryUserDirectoryRepository

__all__ = [
    "InMemoryUserDirectoryRepository",
    "InMemoryPlacementCatalog",
]
