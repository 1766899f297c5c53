"""
===============================================================================
CRC CARD — domain/__init__.py
===============================================================================

Module:
    Domain layer exports (public API of the directory model)

Responsibilities:
    - Centralize exports for clean imports from application/interfaces.
    - Keep the surface area of the domain stable.

Collaborators:
    - domain.entities: User, UserRole
    - domain.value_objects: violations and results
    - domain.directory_rules: validation rules
    - domain.hierarchy: reporting index and hierarchy mutations
    - domain.repositories: persistence ports

Rules:
    - Only re-export domain contracts/entities.
    - Never import infrastructure here.
===============================================================================
"""

from .directory_rules import (
    normalize_email,
    validate_hierarchy,
    validate_population,
    validate_user,
)
from .entities import User, UserRole
from .hierarchy import (
    HierarchyChange,
    ReportingIndex,
    remove_user,
    set_manager,
    with_derived_reports,
)
from .repositories import (
    DirectoryUnitOfWork,
    PlacementCatalog,
    UserDirectoryRepository,
)
from .value_objects import (
    DEFAULT_POLICY,
    ValidationPolicy,
    ValidationResult,
    Violation,
    ViolationKind,
)

__all__ = [
    # Entities
    "User",
    "UserRole",
    # Rules
    "validate_user",
    "validate_hierarchy",
    "validate_population",
    "normalize_email",
    # Hierarchy
    "ReportingIndex",
    "HierarchyChange",
    "set_manager",
    "remove_user",
    "with_derived_reports",
    # Repository Interfaces (Ports)
    "UserDirectoryRepository",
    "DirectoryUnitOfWork",
    "PlacementCatalog",
    # Value Objects
    "Violation",
    "ViolationKind",
    "ValidationResult",
    "ValidationPolicy",
    "DEFAULT_POLICY",
]
