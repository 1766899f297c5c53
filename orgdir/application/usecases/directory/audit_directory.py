"""
===============================================================================
USE CASE: Audit Directory
===============================================================================

Name:
    Audit Directory Use Case

Business Goal:
    Validate the whole stored population and report every violation as data
    corruption, for org-chart consumers and for scheduled checks.

Why (Context):
    - Mutations keep the invariants, but data may also arrive from imports or
      older systems; an audit finds what they broke.
    - The audit never repairs anything.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    AuditDirectoryUseCase

Responsibilities:
    - Run validate_population over the stored users.
    - Log a summary (counts per violation kind).

Collaborators:
    - UserDirectoryRepository.list_users
    - PlacementCatalog (optional)
    - domain.directory_rules.validate_population
===============================================================================
"""

from __future__ import annotations

import logging

from ....context import operation_scope
from ....domain.directory_rules import validate_population
from ....domain.repositories import PlacementCatalog, UserDirectoryRepository
from ....domain.value_objects import DEFAULT_POLICY, ValidationPolicy
from .directory_results import DirectoryAuditResult

logger = logging.getLogger(__name__)


class AuditDirectoryUseCase:
    def __init__(
        self,
        repository: UserDirectoryRepository,
        placements: PlacementCatalog | None = None,
        *,
        policy: ValidationPolicy = DEFAULT_POLICY,
    ) -> None:
        self._users = repository
        self._placements = placements
        self._policy = policy

    def execute(self) -> DirectoryAuditResult:
        with operation_scope("audit_directory"):
            users = self._users.list_users()
            report = DirectoryAuditResult(
                result=validate_population(
                    users, placements=self._placements, policy=self._policy
                ),
                user_count=len(users),
            )

            if report.ok:
                logger.info("Directory audit passed. users=%d", report.user_count)
            else:
                logger.warning(
                    "Directory audit found violations",
                    extra={
                        "users": report.user_count,
                        "violations": len(report.result),
                        "by_kind": report.counts_by_kind(),
                    },
                )
            return report
