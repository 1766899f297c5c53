"""
===============================================================================
DIRECTORY USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Directory Use Case Results

Business Goal:
    Shared result and error models for the directory use cases, with a stable
    contract for:
      - invalid fields
      - uniqueness conflicts
      - unknown users / dangling references
      - hierarchy violations (cycles, asymmetry, self references)

Why (Context):
    - Use cases return typed results instead of raising, which keeps callers
      (scripts, future transports, tests) free of try/except around business
      failures.
    - The violations that caused a rejection travel with the error, so a
      caller can show every problem at once.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    directory_results models (module)

Responsibilities:
    - Define DirectoryErrorCode and DirectoryError (code + message + violations).
    - Map ValidationResult violations to a single error code.
    - Represent results:
        * UserResult (single user)
        * UserListResult (list of users)
        * RemoveUserResult (removed flag + reassigned ids)
        * DirectoryAuditResult (full validation report)

Collaborators:
    - domain.entities.User
    - domain.value_objects: ValidationResult, Violation, ViolationKind
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from ....domain.entities import User
from ....domain.value_objects import ValidationResult, Violation, ViolationKind


class DirectoryErrorCode(str, Enum):
    """
    Error codes of the directory use cases.

    Codes:
      - VALIDATION_ERROR: field constraints (missing name, bad email, bad role...).
      - CONFLICT: id or email already used by another user.
      - NOT_FOUND: unknown user, or a reference to one that does not exist.
      - HIERARCHY_VIOLATION: cycle, managerId/directReports asymmetry or a
        self reference.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    HIERARCHY_VIOLATION = "HIERARCHY_VIOLATION"


_CODE_BY_KIND: Dict[ViolationKind, DirectoryErrorCode] = {
    ViolationKind.FIELD_CONSTRAINT: DirectoryErrorCode.VALIDATION_ERROR,
    ViolationKind.UNIQUENESS: DirectoryErrorCode.CONFLICT,
    ViolationKind.REFERENTIAL_INTEGRITY: DirectoryErrorCode.NOT_FOUND,
    ViolationKind.HIERARCHY_CYCLE: DirectoryErrorCode.HIERARCHY_VIOLATION,
    ViolationKind.SYMMETRY: DirectoryErrorCode.HIERARCHY_VIOLATION,
    ViolationKind.SELF_REFERENCE: DirectoryErrorCode.HIERARCHY_VIOLATION,
}

# When several kinds are present the first listed code wins.
_CODE_PRIORITY: Tuple[DirectoryErrorCode, ...] = (
    DirectoryErrorCode.VALIDATION_ERROR,
    DirectoryErrorCode.CONFLICT,
    DirectoryErrorCode.NOT_FOUND,
    DirectoryErrorCode.HIERARCHY_VIOLATION,
)


@dataclass(frozen=True)
class DirectoryError:
    """
    Use case error.

    Fields:
      - code: stable category (DirectoryErrorCode)
      - message: human description, safe for logs (no emails)
      - violations: every violation behind the rejection (may be empty)
    """

    code: DirectoryErrorCode
    message: str
    violations: Tuple[Violation, ...] = ()

    @property
    def kinds(self) -> set[ViolationKind]:
        return {v.kind for v in self.violations}


def code_for(result: ValidationResult) -> DirectoryErrorCode:
    codes = {_CODE_BY_KIND[v.kind] for v in result}
    for code in _CODE_PRIORITY:
        if code in codes:
            return code
    return DirectoryErrorCode.VALIDATION_ERROR


def error_from_violations(
    result: ValidationResult, message: str | None = None
) -> DirectoryError:
    """Collapse a failed ValidationResult into a DirectoryError."""
    if message is None:
        first = result.violations[0] if result.violations else None
        message = first.message if first is not None else "Invalid directory change."
    return DirectoryError(
        code=code_for(result),
        message=message,
        violations=tuple(result.violations),
    )


@dataclass
class UserResult:
    """
    Result for use cases returning a single User.

    Contract:
      - error is None => user is present
      - error is not None => user is None
    """

    user: User | None = None
    error: DirectoryError | None = None


@dataclass
class UserListResult:
    """List result; users is always a list (possibly empty)."""

    users: List[User] = field(default_factory=list)
    error: DirectoryError | None = None


@dataclass
class RemoveUserResult:
    """
    Result of offboarding a user.

    Fields:
      - removed: True when the user left the directory
      - reassigned_ids: ids of the former direct reports, sorted
      - error: present when nothing was committed
    """

    removed: bool = False
    reassigned_ids: Tuple[str, ...] = ()
    error: DirectoryError | None = None


@dataclass
class DirectoryAuditResult:
    """Full validation report of the stored population."""

    result: ValidationResult = field(default_factory=ValidationResult)
    user_count: int = 0

    @property
    def ok(self) -> bool:
        return self.result.ok

    def counts_by_kind(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for violation in self.result:
            counts[violation.kind.value] = counts.get(violation.kind.value, 0) + 1
        return dict(sorted(counts.items()))
