"""
===============================================================================
DIRECTORY USE CASES PACKAGE (Public API / Exports)
===============================================================================

Business Goal:
    Single, stable import point for the directory use cases and their
    result/error models.

-------------------------------------------------------------------------------
CRC CARD (Module-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    directory usecases package (__init__.py)

Responsibilities:
    - Re-export commands (create, update, set manager, remove).
    - Re-export queries (get, list, org chart, audit).
    - Re-export results and errors.
===============================================================================
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Use Cases
# -----------------------------------------------------------------------------
from .audit_directory import AuditDirectoryUseCase
from .create_user import CreateUserInput, CreateUserUseCase
from .get_user import GetUserUseCase
from .list_users import ListUsersUseCase
from .org_chart import (
    GetDirectReportsUseCase,
    GetReportingChainUseCase,
    GetSubordinatesUseCase,
)
from .remove_user import RemoveUserUseCase
from .set_manager import SetManagerUseCase
from .update_user import CLEARABLE_FIELDS, UpdateUserUseCase

# -----------------------------------------------------------------------------
# Results / Errors
# -----------------------------------------------------------------------------
from .directory_results import (
    DirectoryAuditResult,
    DirectoryError,
    DirectoryErrorCode,
    RemoveUserResult,
    UserListResult,
    UserResult,
    code_for,
    error_from_violations,
)

__all__ = [
    # Commands
    "CreateUserInput",
    "CreateUserUseCase",
    "UpdateUserUseCase",
    "CLEARABLE_FIELDS",
    "SetManagerUseCase",
    "RemoveUserUseCase",
    # Queries
    "GetUserUseCase",
    "ListUsersUseCase",
    "GetDirectReportsUseCase",
    "GetReportingChainUseCase",
    "GetSubordinatesUseCase",
    "AuditDirectoryUseCase",
    # Results
    "UserResult",
    "UserListResult",
    "RemoveUserResult",
    "DirectoryAuditResult",
    "DirectoryError",
    "DirectoryErrorCode",
    "code_for",
    "error_from_violations",
]
