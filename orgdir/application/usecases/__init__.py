"""
Use Cases Layer (Business Operations)

Structure
---------
usecases/
└── directory/      # Users, reporting hierarchy, audits

Usage
-----
    from orgdir.application.usecases.directory import CreateUserUseCase

Or use the barrel exports from this module:

    from orgdir.application.usecases import CreateUserUseCase
"""

from .directory import (
    AuditDirectoryUseCase,
    CreateUserInput,
    CreateUserUseCase,
    DirectoryAuditResult,
    DirectoryError,
    DirectoryErrorCode,
    GetDirectReportsUseCase,
    GetReportingChainUseCase,
    GetSubordinatesUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    RemoveUserResult,
    RemoveUserUseCase,
    SetManagerUseCase,
    UpdateUserUseCase,
    UserListResult,
    UserResult,
)

__all__ = [
    "AuditDirectoryUseCase",
    "CreateUserInput",
    "CreateUserUseCase",
    "GetDirectReportsUseCase",
    "GetReportingChainUseCase",
    "GetSubordinatesUseCase",
    "GetUserUseCase",
    "ListUsersUseCase",
    "RemoveUserUseCase",
    "SetManagerUseCase",
    "UpdateUserUseCase",
    "DirectoryAuditResult",
    "DirectoryError",
    "DirectoryErrorCode",
    "RemoveUserResult",
    "UserListResult",
    "UserResult",
]
