"""
===============================================================================
USE CASE: Remove User (Offboarding)
===============================================================================

Name:
    Remove User Use Case

Business Goal:
    Take a user out of the directory without leaving dangling managerId or
    directReports entries behind.

Why (Context):
    - Direct reports of the removed user are reassigned to `reassign_to`, or
      become hierarchy roots when no successor is given.
    - When the successor is one of the removed user's direct reports it is
      promoted into the vacated slot (it takes over the removed user's own
      manager).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    RemoveUserUseCase

Responsibilities:
    - Delegate the change to domain.hierarchy.remove_user.
    - Commit it inside one unit of work.
    - Report the ids that were reassigned.

Collaborators:
    - UserDirectoryRepository.unit_of_work()
    - domain.hierarchy.remove_user
    - directory_results: RemoveUserResult
===============================================================================
"""

from __future__ import annotations

import logging

from ....context import operation_scope
from ....domain.hierarchy import remove_user
from ....domain.repositories import UserDirectoryRepository
from .directory_results import (
    DirectoryError,
    DirectoryErrorCode,
    RemoveUserResult,
    error_from_violations,
)

logger = logging.getLogger(__name__)


class RemoveUserUseCase:
    """Offboards one user and reassigns its direct reports."""

    def __init__(self, repository: UserDirectoryRepository) -> None:
        self._users = repository

    def execute(
        self, user_id: str, *, reassign_to: str | None = None
    ) -> RemoveUserResult:
        with operation_scope("remove_user"):
            with self._users.unit_of_work() as uow:
                # -------------------------------------------------------------
                # 1) Apply the removal on the snapshot.
                # -------------------------------------------------------------
                change = remove_user(user_id, uow.snapshot(), reassign_to)

                if not change.ok:
                    if change.user is None:
                        return self._not_found()
                    logger.info(
                        "Remove user rejected",
                        extra={
                            "user_id": user_id,
                            "reassign_to": reassign_to,
                            "violations": sorted(
                                k.value for k in change.result.kinds()
                            ),
                        },
                    )
                    return RemoveUserResult(
                        error=error_from_violations(change.result)
                    )

                # -------------------------------------------------------------
                # 2) Commit.
                # -------------------------------------------------------------
                uow.commit(list(change.population))

            logger.info(
                "User removed. user_id=%s reassign_to=%s reassigned=%d",
                user_id,
                reassign_to,
                len(change.reassigned_ids),
            )
            return RemoveUserResult(
                removed=True,
                reassigned_ids=change.reassigned_ids,
            )

    @staticmethod
    def _not_found() -> RemoveUserResult:
        """Consistent NOT_FOUND result."""
        return RemoveUserResult(
            error=DirectoryError(
                code=DirectoryErrorCode.NOT_FOUND,
                message="User not found.",
            )
        )

