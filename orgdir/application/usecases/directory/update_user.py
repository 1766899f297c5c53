"""
===============================================================================
USE CASE: Update User (Profile / Placement / Role)
===============================================================================

Name:
    Update User Use Case

Business Goal:
    Edit the non-hierarchy attributes of a user (name, email, role,
    department, team, position, hire date, profile image) while keeping every
    record-level invariant.

Why (Context):
    - managerId and directReports are not editable here: they only change
      through SetManagerUseCase / RemoveUserUseCase so the hierarchy stays
      consistent.
    - Optional fields distinguish "leave as is" (None) from "clear" (listed in
      `clear`), because None cannot express both.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    UpdateUserUseCase

Responsibilities:
    - Reject empty updates and unknown/contradictory clear requests.
    - Load the stored user inside a unit of work.
    - Re-validate the edited record against the rest of the population.
    - Commit the edited record.

Collaborators:
    - UserDirectoryRepository.unit_of_work()
    - PlacementCatalog (optional)
    - domain.directory_rules: index_by_id, validate_user
    - directory_results
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Dict, Iterable

from ....context import operation_scope
from ....domain.directory_rules import index_by_id, validate_user
from ....domain.entities import UserRole
from ....domain.repositories import PlacementCatalog, UserDirectoryRepository
from ....domain.value_objects import DEFAULT_POLICY, ValidationPolicy
from .directory_results import (
    DirectoryError,
    DirectoryErrorCode,
    UserResult,
    error_from_violations,
)

logger = logging.getLogger(__name__)

CLEARABLE_FIELDS = frozenset(
    {"department_id", "team_id", "position", "hire_date", "profile_image"}
)


class UpdateUserUseCase:
    """
    Use Case (Application Service / Command):
        Applies attribute edits to one user with full record validation.
    """

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

    def execute(
        self,
        user_id: str,
        *,
        name: str | None = None,
        email: str | None = None,
        role: UserRole | str | None = None,
        department_id: str | None = None,
        team_id: str | None = None,
        position: str | None = None,
        hire_date: date | str | None = None,
        profile_image: str | None = None,
        clear: Iterable[str] = (),
    ) -> UserResult:
        """
        Update the given fields of user_id.

        Rules:
          - At least one field must be set or cleared.
          - clear may only name optional fields, and not one being set.
          - The edited record must pass validate_user.
        """
        with operation_scope("update_user"):
            # -----------------------------------------------------------------
            # 1) Collect the requested changes.
            # -----------------------------------------------------------------
            changes: Dict[str, Any] = {
                key: value
                for key, value in (
                    ("name", self._strip(name)),
                    ("email", self._strip(email)),
                    ("role", role),
                    ("department_id", department_id),
                    ("team_id", team_id),
                    ("position", position),
                    ("hire_date", hire_date),
                    ("profile_image", profile_image),
                )
                if value is not None
            }
            to_clear = set(clear)

            if not changes and not to_clear:
                return self._validation_error("No fields provided to update.")

            unknown = sorted(to_clear - CLEARABLE_FIELDS)
            if unknown:
                return self._validation_error(
                    f"Fields cannot be cleared: {', '.join(unknown)}."
                )
            both = sorted(to_clear & changes.keys())
            if both:
                return self._validation_error(
                    f"Fields both set and cleared: {', '.join(both)}."
                )
            changes.update({key: None for key in to_clear})

            with self._users.unit_of_work() as uow:
                population = uow.snapshot()

                # -------------------------------------------------------------
                # 2) Load the stored user.
                # -------------------------------------------------------------
                stored = index_by_id(population).get(user_id)
                if stored is None:
                    return self._not_found()

                # -------------------------------------------------------------
                # 3) Validate the edited record against everyone else.
                # -------------------------------------------------------------
                updated = replace(stored, **changes)
                others = [u for u in population if u is not stored]
                checked = validate_user(
                    updated,
                    others,
                    placements=self._placements,
                    policy=self._policy,
                )
                if not checked.ok:
                    logger.info(
                        "Update user rejected",
                        extra={
                            "user_id": user_id,
                            "violations": sorted(k.value for k in checked.kinds()),
                        },
                    )
                    return UserResult(error=error_from_violations(checked))

                # -------------------------------------------------------------
                # 4) Commit.
                # -------------------------------------------------------------
                uow.commit([updated if u is stored else u for u in population])

            logger.info(
                "User updated. user_id=%s fields=%s",
                user_id,
                ",".join(sorted(changes)),
            )
            return UserResult(user=updated)

    @staticmethod
    def _strip(raw: str | None) -> str | None:
        return raw.strip() if isinstance(raw, str) else raw

    @staticmethod
    def _validation_error(message: str) -> UserResult:
        """Consistent VALIDATION_ERROR result."""
        return UserResult(
            error=DirectoryError(
                code=DirectoryErrorCode.VALIDATION_ERROR,
                message=message,
            )
        )

    @staticmethod
    def _not_found() -> UserResult:
        """Consistent NOT_FOUND result."""
        return UserResult(
            error=DirectoryError(
                code=DirectoryErrorCode.NOT_FOUND,
                message="User not found.",
            )
        )
