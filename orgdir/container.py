"""
===============================================================================
CRC CARD — orgdir/container.py (Composition Root / manual DI)
===============================================================================

Responsibilities:
  - Compose repositories, the placement catalog and the use cases.
  - Keep singletons cached with lru_cache.
  - Centralize runtime decisions based on Settings (logging, limits, seed).
  - Configure package logging on first composition.

Collaborators:
  - orgdir.crosscutting.config.get_settings
  - orgdir.crosscutting.logger.setup_logger
  - orgdir.domain.repositories (ports)
  - orgdir.infrastructure.repositories (in-memory implementations)
  - orgdir.interfaces.records.read_directory_file (seed file)
  - orgdir.application.usecases.directory (use cases)

Notes:
  - No business logic lives here.
  - Tests call reset_container() after changing the environment.
===============================================================================
"""

from __future__ import annotations

import logging
from functools import lru_cache

from .application.usecases.directory import (
    AuditDirectoryUseCase,
    CreateUserUseCase,
    GetDirectReportsUseCase,
    GetReportingChainUseCase,
    GetSubordinatesUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    RemoveUserUseCase,
    SetManagerUseCase,
    UpdateUserUseCase,
)
from .crosscutting.config import get_settings
from .crosscutting.logger import setup_logger
from .domain.repositories import PlacementCatalog, UserDirectoryRepository
from .infrastructure.repositories import (
    InMemoryPlacementCatalog,
    InMemoryUserDirectoryRepository,
)
from .interfaces.records import DirectoryExport, read_directory_file


@lru_cache(maxsize=1)
def configure_logging() -> logging.Logger:
    """Root package logger configured from Settings (idempotent)."""
    settings = get_settings()
    return setup_logger(level=settings.log_level, use_json=settings.log_json)


@lru_cache(maxsize=1)
def _load_seed() -> DirectoryExport | None:
    settings = get_settings()
    if not settings.seed_file:
        return None
    return read_directory_file(settings.seed_file)


# =============================================================================
# Repositories (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserDirectoryRepository:
    """In-memory directory, seeded from Settings.seed_file when set."""
    # Every use case factory resolves the repository first, so logging is
    # configured once here when the graph is composed.
    configure_logging()
    seed = _load_seed()
    return InMemoryUserDirectoryRepository(seed.users if seed is not None else None)


@lru_cache(maxsize=1)
def get_placement_catalog() -> PlacementCatalog | None:
    """
    Department/Team catalog, or None when the seed declares no placements.

    None disables departmentId/teamId existence checks.
    """
    seed = _load_seed()
    if seed is None or (seed.department_ids is None and seed.team_ids is None):
        return None
    return InMemoryPlacementCatalog(
        department_ids=seed.department_ids or (),
        team_ids=seed.team_ids or (),
    )


# =============================================================================
# Use cases
# =============================================================================


def get_create_user_use_case() -> CreateUserUseCase:
    return CreateUserUseCase(
        get_user_repository(),
        get_placement_catalog(),
        policy=get_settings().validation_policy(),
    )


def get_update_user_use_case() -> UpdateUserUseCase:
    return UpdateUserUseCase(
        get_user_repository(),
        get_placement_catalog(),
        policy=get_settings().validation_policy(),
    )


def get_set_manager_use_case() -> SetManagerUseCase:
    return SetManagerUseCase(get_user_repository())


def get_remove_user_use_case() -> RemoveUserUseCase:
    return RemoveUserUseCase(get_user_repository())


def get_get_user_use_case() -> GetUserUseCase:
    return GetUserUseCase(get_user_repository())


def get_list_users_use_case() -> ListUsersUseCase:
    return ListUsersUseCase(get_user_repository())


def get_direct_reports_use_case() -> GetDirectReportsUseCase:
    return GetDirectReportsUseCase(get_user_repository())


def get_reporting_chain_use_case() -> GetReportingChainUseCase:
    return GetReportingChainUseCase(get_user_repository())


def get_subordinates_use_case() -> GetSubordinatesUseCase:
    return GetSubordinatesUseCase(get_user_repository())


def get_audit_directory_use_case() -> AuditDirectoryUseCase:
    return AuditDirectoryUseCase(
        get_user_repository(),
        get_placement_catalog(),
        policy=get_settings().validation_policy(),
    )


def reset_container() -> None:
    """Drop cached singletons (Settings included)."""
    for factory in (
        get_settings,
        configure_logging,
        _load_seed,
        get_user_repository,
        get_placement_catalog,
    ):
        factory.cache_clear()
