"""
===============================================================================
CRC CARD — domain/value_objects.py
===============================================================================

Module:
    Value objects of the directory model

Responsibilities:
    - ViolationKind: stable taxonomy of invariant violations.
    - Violation: one reported problem (who, which field, why, cycle path).
    - ValidationResult: immutable collection of violations (empty = valid).
    - ValidationPolicy: tunable field limits handed in by configuration.

Collaborators:
    - domain.directory_rules / domain.hierarchy: produce these objects.
    - application.usecases.directory: maps them to error codes.
    - crosscutting.exceptions.InvariantViolationError: raised on demand.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Tuple

from ..crosscutting.exceptions import InvariantViolationError


class ViolationKind(str, Enum):
    """Violation categories. Values are the names used in reports."""

    FIELD_CONSTRAINT = "FieldConstraintViolation"
    UNIQUENESS = "UniquenessViolation"
    REFERENTIAL_INTEGRITY = "ReferentialIntegrityViolation"
    HIERARCHY_CYCLE = "HierarchyCycleViolation"
    SYMMETRY = "SymmetryViolation"
    SELF_REFERENCE = "SelfReferenceViolation"


@dataclass(frozen=True, slots=True)
class Violation:
    """
    One violated invariant.

    Fields:
      - kind: ViolationKind
      - user_id: record the violation is attached to (None if unknown)
      - field: attribute involved (record-level name, e.g. "managerId")
      - message: human description, no personal data
      - cycle: full cycle path for HIERARCHY_CYCLE (first id repeated last)
      - related_ids: other records involved (duplicate holder, missing report...)
    """

    kind: ViolationKind
    user_id: str | None
    field: str | None
    message: str
    cycle: Tuple[str, ...] = ()
    related_ids: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        payload: dict = {
            "kind": self.kind.value,
            "user_id": self.user_id,
            "field": self.field,
            "message": self.message,
        }
        if self.cycle:
            payload["cycle"] = list(self.cycle)
        if self.related_ids:
            payload["related_ids"] = list(self.related_ids)
        return payload


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of a validation: every detected violation, in detection order.

    An empty result means valid.
    """

    violations: Tuple[Violation, ...] = ()

    @classmethod
    def of(cls, violations: Iterable[Violation]) -> "ValidationResult":
        return cls(tuple(violations))

    @property
    def ok(self) -> bool:
        return not self.violations

    def kinds(self) -> set[ViolationKind]:
        return {v.kind for v in self.violations}

    def of_kind(self, kind: ViolationKind) -> Tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.kind == kind)

    def has(self, kind: ViolationKind) -> bool:
        return any(v.kind == kind for v in self.violations)

    def merge(self, *others: "ValidationResult") -> "ValidationResult":
        merged = list(self.violations)
        for other in others:
            merged.extend(other.violations)
        return ValidationResult(tuple(merged))

    def raise_for_violations(self) -> None:
        """Raise InvariantViolationError when not ok."""
        if self.violations:
            raise InvariantViolationError(self.violations)

    def __iter__(self) -> Iterator[Violation]:
        return iter(self.violations)

    def __len__(self) -> int:
        return len(self.violations)


@dataclass(frozen=True, slots=True)
class ValidationPolicy:
    """Field limits applied by validate_user."""

    max_name_chars: int = 200
    max_email_chars: int = 320
    allow_smtputf8: bool = True


DEFAULT_POLICY = ValidationPolicy()

