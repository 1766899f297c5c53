"""
===============================================================================
MODULE: Typed exceptions (boundary and programming errors)
===============================================================================

Goal
----
Business failures travel as typed results. Exceptions are kept for:
- records that cannot be parsed at all at the persistence boundary
- callers that opt into raising on violations
- misuse of the unit of work

Each exception carries:
- a stable error_code
- an error_id to correlate with logs
- a human message (no personal data)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  OrgDirectoryError + subclasses

Responsibilities:
  - Standardize internal errors
  - Generate error_id for tracing

Collaborators:
  - interfaces/records.py (RecordFormatError)
  - domain/value_objects.py (InvariantViolationError)
  - infrastructure/repositories/in_memory (UnitOfWorkError)
===============================================================================
"""

from __future__ import annotations

from typing import Any, Sequence
from uuid import uuid4


class OrgDirectoryError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      OrgDirectoryError

    Responsibilities:
      - Base for internal errors of the directory
      - Provide error_code + error_id + message
    ----------------------------------------------------------------------------
    """

    error_code: str = "ORG_DIRECTORY_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class RecordFormatError(OrgDirectoryError):
    """A record is not a mapping or misses required keys."""

    error_code: str = "RECORD_FORMAT_ERROR"

    def __init__(
        self,
        message: str,
        *,
        index: int | None = None,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.index = index
        super().__init__(message, error_id=error_id, original_error=original_error)


class InvariantViolationError(OrgDirectoryError):
    """Raised on demand when a ValidationResult carries violations."""

    error_code: str = "INVARIANT_VIOLATION"

    def __init__(self, violations: Sequence[Any], error_id: str | None = None):
        self.violations = tuple(violations)
        kinds = sorted(
            {v.kind.value if hasattr(v, "kind") else str(v) for v in self.violations}
        )
        super().__init__(
            f"{len(self.violations)} invariant violation(s): {', '.join(kinds)}",
            error_id=error_id,
        )


class UnitOfWorkError(OrgDirectoryError):
    """The unit of work was used outside its block or committed twice."""

    error_code: str = "UNIT_OF_WORK_ERROR"
