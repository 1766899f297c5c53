"""
===============================================================================
USE CASE: Set Manager (Reassignment)
===============================================================================

Name:
    Set Manager Use Case

Business Goal:
    Move a user under a new manager, or make the user a hierarchy root, as one
    atomic and serializable change of the directory.

Why (Context):
    - Reassignment touches three records (the user, the old manager and the
      new manager); committing them together is what keeps managerId and
      directReports symmetric.
    - Concurrent reassignments serialize on the repository's unit of work, so
      two changes that are fine alone cannot combine into a cycle.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    SetManagerUseCase

Responsibilities:
    - Resolve the user inside the unit of work.
    - Delegate the change to domain.hierarchy.set_manager.
    - Commit the new population or return the violations.

Collaborators:
    - UserDirectoryRepository.unit_of_work()
    - domain.hierarchy.set_manager
    - directory_results
===============================================================================
"""

from __future__ import annotations

import logging

from ....context import operation_scope
from ....domain.directory_rules import index_by_id
from ....domain.hierarchy import set_manager
from ....domain.repositories import UserDirectoryRepository
from .directory_results import (
    DirectoryError,
    DirectoryErrorCode,
    UserResult,
    error_from_violations,
)

logger = logging.getLogger(__name__)


class SetManagerUseCase:
    """Reassigns the manager of one user."""

    def __init__(self, repository: UserDirectoryRepository) -> None:
        self._users = repository

    def execute(self, user_id: str, manager_id: str | None) -> UserResult:
        with operation_scope("set_manager"):
            with self._users.unit_of_work() as uow:
                population = uow.snapshot()

                # -------------------------------------------------------------
                # 1) Resolve the user.
                # -------------------------------------------------------------
                stored = index_by_id(population).get(user_id)
                if stored is None:
                    return UserResult(
                        error=DirectoryError(
                            code=DirectoryErrorCode.NOT_FOUND,
                            message="User not found.",
                        )
                    )

                # -------------------------------------------------------------
                # 2) Apply the change on the snapshot.
                # -------------------------------------------------------------
                change = set_manager(stored, manager_id, population)
                if not change.ok:
                    logger.info(
                        "Set manager rejected",
                        extra={
                            "user_id": user_id,
                            "manager_id": manager_id,
                            "violations": sorted(
                                k.value for k in change.result.kinds()
                            ),
                        },
                    )
                    return UserResult(error=error_from_violations(change.result))

                # -------------------------------------------------------------
                # 3) Commit (nothing to write when the manager is unchanged).
                # -------------------------------------------------------------
                if change.user is not stored:
                    uow.commit(list(change.population))

            logger.info(
                "Manager set. user_id=%s previous_manager_id=%s manager_id=%s",
                user_id,
                stored.manager_id,
                manager_id,
            )
            return UserResult(user=change.user)
