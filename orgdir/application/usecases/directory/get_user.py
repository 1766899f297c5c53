"""
===============================================================================
USE CASE: Get User
===============================================================================

Name:
    Get User Use Case

Business Goal:
    Fetch one user either by id or by email (case-insensitive).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    GetUserUseCase

Responsibilities:
    - Require exactly one lookup key.
    - Return UserResult with NOT_FOUND when nothing matches.

Collaborators:
    - UserDirectoryRepository: get_user, get_user_by_email
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import UserDirectoryRepository
from .directory_results import DirectoryError, DirectoryErrorCode, UserResult


class GetUserUseCase:
    def __init__(self, repository: UserDirectoryRepository) -> None:
        self._users = repository

    def execute(
        self, *, user_id: str | None = None, email: str | None = None
    ) -> UserResult:
        if (user_id is None) == (email is None):
            return UserResult(
                error=DirectoryError(
                    code=DirectoryErrorCode.VALIDATION_ERROR,
                    message="Provide exactly one of user_id or email.",
                )
            )

        if user_id is not None:
            user = self._users.get_user(user_id)
        else:
            user = self._users.get_user_by_email(email or "")

        if user is None:
            return UserResult(
                error=DirectoryError(
                    code=DirectoryErrorCode.NOT_FOUND,
                    message="User not found.",
                )
            )
        return UserResult(user=user)
