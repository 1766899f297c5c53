"""
===============================================================================
USE CASE: List Users
===============================================================================

Name:
    List Users Use Case

Business Goal:
    List directory members, optionally filtered by department, team and role
    (department / team members views of the directory).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ListUsersUseCase

Responsibilities:
    - Validate the role filter against the closed role set.
    - Use the narrowest repository listing, then apply remaining filters.
    - Keep the repository ordering (name, then id).

Collaborators:
    - UserDirectoryRepository: list_users, list_users_by_department,
      list_users_by_team
===============================================================================
"""

from __future__ import annotations

from ....domain.entities import UserRole
from ....domain.repositories import UserDirectoryRepository
from .directory_results import DirectoryError, DirectoryErrorCode, UserListResult


class ListUsersUseCase:
    def __init__(self, repository: UserDirectoryRepository) -> None:
        self._users = repository

    def execute(
        self,
        *,
        department_id: str | None = None,
        team_id: str | None = None,
        role: UserRole | str | None = None,
    ) -> UserListResult:
        # ---------------------------------------------------------------------
        # 1) Validate filters.
        # ---------------------------------------------------------------------
        wanted_role = None
        if role is not None:
            wanted_role = UserRole.parse(role)
            if wanted_role is None:
                return UserListResult(
                    error=DirectoryError(
                        code=DirectoryErrorCode.VALIDATION_ERROR,
                        message=f"Unknown role {role!r}.",
                    )
                )

        # ---------------------------------------------------------------------
        # 2) Narrowest listing first.
        # ---------------------------------------------------------------------
        if department_id is not None:
            users = self._users.list_users_by_department(department_id)
        elif team_id is not None:
            users = self._users.list_users_by_team(team_id)
        else:
            users = self._users.list_users()

        # ---------------------------------------------------------------------
        # 3) Remaining filters.
        # ---------------------------------------------------------------------
        if team_id is not None:
            users = [u for u in users if u.team_id == team_id]
        if wanted_role is not None:
            users = [u for u in users if UserRole.parse(u.role) == wanted_role]

        return UserListResult(users=users)
