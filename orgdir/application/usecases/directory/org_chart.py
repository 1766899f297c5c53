"""
===============================================================================
USE CASES: Org Chart Queries
===============================================================================

Name:
    Org chart read models (direct reports, reporting chain, subordinates)

Business Goal:
    Answer the questions an org-chart view asks, from managerId links only:
      - who reports directly to X
      - who X reports to, up to the top
      - everyone below X

Why (Context):
    - Queries run on a ReportingIndex built from one consistent listing, so
      they never read the stored directReports (which may be corrupt) and
      never loop on a corrupt cycle.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Classes:
    GetDirectReportsUseCase, GetReportingChainUseCase, GetSubordinatesUseCase

Responsibilities:
    - Return NOT_FOUND for unknown users.
    - Return User records (not bare ids) in a stable order.

Collaborators:
    - UserDirectoryRepository.list_users
    - domain.hierarchy.ReportingIndex
===============================================================================
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from ....domain.directory_rules import index_by_id
from ....domain.entities import User
from ....domain.hierarchy import ReportingIndex
from ....domain.repositories import UserDirectoryRepository
from .directory_results import DirectoryError, DirectoryErrorCode, UserListResult


def _not_found() -> UserListResult:
    return UserListResult(
        error=DirectoryError(
            code=DirectoryErrorCode.NOT_FOUND,
            message="User not found.",
        )
    )


class _OrgChartQuery:
    """Shared loading for the org chart read models."""

    def __init__(self, repository: UserDirectoryRepository) -> None:
        self._users = repository

    def _load(self) -> Tuple[List[User], Dict[str, User], ReportingIndex]:
        users = self._users.list_users()
        return users, index_by_id(users), ReportingIndex(users)

    @staticmethod
    def _in_listing_order(users: List[User], ids: Iterable[str]) -> List[User]:
        wanted = set(ids)
        return [u for u in users if u.id in wanted]


class GetDirectReportsUseCase(_OrgChartQuery):
    def execute(self, user_id: str) -> UserListResult:
        users, by_id, index = self._load()
        if user_id not in by_id:
            return _not_found()
        return UserListResult(
            users=self._in_listing_order(users, index.direct_reports(user_id))
        )


class GetReportingChainUseCase(_OrgChartQuery):
    """Managers above the user, nearest first."""

    def execute(self, user_id: str) -> UserListResult:
        _, by_id, index = self._load()
        if user_id not in by_id:
            return _not_found()
        return UserListResult(
            users=[by_id[uid] for uid in index.chain_of_command(user_id)]
        )


class GetSubordinatesUseCase(_OrgChartQuery):
    """Everyone below the user at any depth."""

    def execute(self, user_id: str) -> UserListResult:
        users, by_id, index = self._load()
        if user_id not in by_id:
            return _not_found()
        return UserListResult(
            users=self._in_listing_order(users, index.descendants(user_id))
        )
