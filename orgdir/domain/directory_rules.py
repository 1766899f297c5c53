"""
===============================================================================
CRC CARD — domain/directory_rules.py
===============================================================================

Module:
    Directory invariants (pure validation rules)

Responsibilities:
    - validate_user: field constraints of one record plus, against the
      population, id/email uniqueness, self references and referential validity.
    - validate_hierarchy: acyclicity of managerId links and managerId /
      directReports symmetry over the whole population (or a scope of it).
    - validate_population: every record plus the hierarchy (audits).

Collaborators:
    - domain.entities.User, UserRole
    - domain.value_objects: Violation, ViolationKind, ValidationResult,
      ValidationPolicy
    - domain.repositories.PlacementCatalog: existence of Departments / Teams
    - email_validator: email syntax

Rules (intent):
    - Report every violation, never stop at the first one.
    - Never raise for malformed input: malformed input is itself a violation.
    - Pure functions: inputs are never mutated.
===============================================================================
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from email_validator import EmailNotValidError, validate_email

from .entities import User, UserRole, parse_calendar_date
from .repositories import PlacementCatalog
from .value_objects import (
    DEFAULT_POLICY,
    ValidationPolicy,
    ValidationResult,
    Violation,
    ViolationKind,
)

# (entity attribute, record attribute)
_OPTIONAL_TEXT_FIELDS = (
    ("department_id", "departmentId"),
    ("team_id", "teamId"),
    ("position", "position"),
    ("profile_image", "profileImage"),
    ("manager_id", "managerId"),
)

_ROLE_CHOICES = ", ".join(role.value for role in UserRole)


def normalize_email(email: str) -> str:
    """Comparison key for email uniqueness."""
    return email.strip().lower()


def _is_text(value: object) -> bool:
    return isinstance(value, str)


def _has_text(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _owner(user: User) -> Optional[str]:
    return user.id if _has_text(user.id) else None


def _field_violation(user: User, field: str, message: str) -> Violation:
    return Violation(
        kind=ViolationKind.FIELD_CONSTRAINT,
        user_id=_owner(user),
        field=field,
        message=message,
    )


# =============================================================================
# validate_user
# =============================================================================


def _check_fields(user: User, policy: ValidationPolicy) -> Iterator[Violation]:
    if not _has_text(user.id):
        yield _field_violation(user, "id", "id must be a non-empty string.")

    if not _has_text(user.name):
        yield _field_violation(user, "name", "name is required and cannot be empty.")
    elif len(user.name.strip()) > policy.max_name_chars:
        yield _field_violation(
            user, "name", f"name exceeds {policy.max_name_chars} characters."
        )

    yield from _check_email(user, policy)

    if UserRole.parse(user.role) is None:
        yield _field_violation(
            user, "role", f"role {user.role!r} is not one of: {_ROLE_CHOICES}."
        )

    for attr, record_name in _OPTIONAL_TEXT_FIELDS:
        value = getattr(user, attr)
        if value is not None and not _is_text(value):
            yield _field_violation(
                user, record_name, f"{record_name} must be text when present."
            )

    yield from _check_hire_date(user)
    yield from _check_direct_reports_shape(user)


def _check_email(user: User, policy: ValidationPolicy) -> Iterator[Violation]:
    email = user.email
    if not _has_text(email):
        yield _field_violation(user, "email", "email is required and cannot be empty.")
        return
    if len(email.strip()) > policy.max_email_chars:
        yield _field_violation(
            user, "email", f"email exceeds {policy.max_email_chars} characters."
        )
        return
    try:
        validate_email(
            email.strip(),
            check_deliverability=False,
            allow_smtputf8=policy.allow_smtputf8,
        )
    except EmailNotValidError as exc:
        yield _field_violation(user, "email", f"email is not valid: {exc}")


def _check_hire_date(user: User) -> Iterator[Violation]:
    value = user.hire_date
    if value is None:
        return
    if isinstance(value, datetime):
        yield _field_violation(
            user, "hireDate", "hireDate must be a calendar date, not a timestamp."
        )
        return
    if isinstance(value, date):
        return
    if _is_text(value) and parse_calendar_date(value) is not None:
        return
    yield _field_violation(
        user, "hireDate", "hireDate must be an ISO-8601 calendar date (YYYY-MM-DD)."
    )


def _check_direct_reports_shape(user: User) -> Iterator[Violation]:
    reports = user.direct_reports
    if reports is None:
        return
    if not isinstance(reports, frozenset):
        yield _field_violation(
            user, "directReports", "directReports must be a set of user ids."
        )
        return
    if any(not _has_text(rid) for rid in reports):
        yield _field_violation(
            user, "directReports", "directReports entries must be non-empty ids."
        )


def _check_uniqueness(user: User, others: Sequence[User]) -> Iterator[Violation]:
    if _has_text(user.id):
        holders = [o for o in others if o.id == user.id]
        if holders:
            yield Violation(
                kind=ViolationKind.UNIQUENESS,
                user_id=user.id,
                field="id",
                message=f"id {user.id!r} is already used by another user.",
            )

    if _has_text(user.email):
        key = normalize_email(user.email)
        holders = [o for o in others if _has_text(o.email) and normalize_email(o.email) == key]
        if holders:
            yield Violation(
                kind=ViolationKind.UNIQUENESS,
                user_id=_owner(user),
                field="email",
                message="email is already used by another user.",
                related_ids=tuple(o.id for o in holders if _is_text(o.id)),
            )


def _check_self_reference(user: User) -> Iterator[Violation]:
    if not _has_text(user.id):
        return
    if user.manager_id == user.id:
        yield Violation(
            kind=ViolationKind.SELF_REFERENCE,
            user_id=user.id,
            field="managerId",
            message="a user cannot be their own manager.",
        )
    if user.id in user.reports:
        yield Violation(
            kind=ViolationKind.SELF_REFERENCE,
            user_id=user.id,
            field="directReports",
            message="a user cannot be their own direct report.",
        )


def _check_references(
    user: User,
    others: Sequence[User],
    placements: PlacementCatalog | None,
) -> Iterator[Violation]:
    known_ids = {o.id for o in others if _is_text(o.id)}

    manager_id = user.manager_id
    if _is_text(manager_id) and manager_id != user.id and manager_id not in known_ids:
        yield Violation(
            kind=ViolationKind.REFERENTIAL_INTEGRITY,
            user_id=_owner(user),
            field="managerId",
            message=f"managerId {manager_id!r} does not reference an existing user.",
            related_ids=(manager_id,),
        )

    for report_id in sorted(rid for rid in user.reports if _is_text(rid)):
        if report_id == user.id or report_id in known_ids:
            continue
        yield Violation(
            kind=ViolationKind.REFERENTIAL_INTEGRITY,
            user_id=_owner(user),
            field="directReports",
            message=f"directReports entry {report_id!r} does not reference an existing user.",
            related_ids=(report_id,),
        )

    if placements is None:
        return

    if _is_text(user.department_id) and not placements.department_exists(
        user.department_id
    ):
        yield Violation(
            kind=ViolationKind.REFERENTIAL_INTEGRITY,
            user_id=_owner(user),
            field="departmentId",
            message=f"departmentId {user.department_id!r} does not reference an existing department.",
            related_ids=(user.department_id,),
        )
    if _is_text(user.team_id) and not placements.team_exists(user.team_id):
        yield Violation(
            kind=ViolationKind.REFERENTIAL_INTEGRITY,
            user_id=_owner(user),
            field="teamId",
            message=f"teamId {user.team_id!r} does not reference an existing team.",
            related_ids=(user.team_id,),
        )


def validate_user(
    user: User,
    population: Iterable[User],
    *,
    placements: PlacementCatalog | None = None,
    policy: ValidationPolicy = DEFAULT_POLICY,
) -> ValidationResult:
    """
    Validate one record against its own constraints and the population.

    Entries of population that are the very same object as user are ignored,
    so a stored member can be validated in place. To validate an edited copy
    of a stored user, pass the population without the stored version.

    Department/Team references are checked only when placements is given.
    """
    others = [u for u in population if u is not user]

    violations: List[Violation] = []
    violations.extend(_check_fields(user, policy))
    violations.extend(_check_uniqueness(user, others))
    violations.extend(_check_self_reference(user))
    violations.extend(_check_references(user, others, placements))
    return ValidationResult.of(violations)


# =============================================================================
# validate_hierarchy
# =============================================================================

_IN_PROGRESS = 1
_DONE = 2


def index_by_id(population: Iterable[User]) -> Dict[str, User]:
    """id -> user, first occurrence wins (duplicates are a uniqueness issue)."""
    users: Dict[str, User] = {}
    for user in population:
        if _is_text(user.id) and user.id not in users:
            users[user.id] = user
    return users


def _manager_of(user: User) -> Optional[str]:
    return user.manager_id if _is_text(user.manager_id) else None


def _detect_cycles(
    users: Dict[str, User], starts: Optional[set[str]]
) -> Iterator[Violation]:
    # Every node has at most one outgoing managerId edge, so the depth-first
    # walk from a node is the path up its management chain.
    state: Dict[str, int] = {}
    start_ids = [uid for uid in users if starts is None or uid in starts]

    for start in start_ids:
        if state.get(start):
            continue
        path: List[str] = []
        node: Optional[str] = start
        while node is not None and node in users:
            mark = state.get(node)
            if mark == _DONE:
                break
            if mark == _IN_PROGRESS:
                cycle = tuple(path[path.index(node):]) + (node,)
                yield Violation(
                    kind=ViolationKind.HIERARCHY_CYCLE,
                    user_id=node,
                    field="managerId",
                    message="managerId links form a cycle: " + " -> ".join(cycle),
                    cycle=cycle,
                )
                break
            state[node] = _IN_PROGRESS
            path.append(node)
            node = _manager_of(users[node])
        for visited in path:
            state[visited] = _DONE


def expected_reports(users: Iterable[User]) -> Dict[str, set[str]]:
    """manager id -> ids whose managerId points at it (self edges excluded)."""
    expected: Dict[str, set[str]] = {}
    for user in users:
        manager_id = _manager_of(user)
        if manager_id is None or manager_id == user.id:
            continue
        expected.setdefault(manager_id, set()).add(user.id)
    return expected


def _check_symmetry(
    users: Dict[str, User], scope: Optional[set[str]]
) -> Iterator[Violation]:
    expected = expected_reports(users.values())

    for uid, user in users.items():
        if scope is not None and uid not in scope:
            continue
        stored = {rid for rid in user.reports if _is_text(rid)} - {uid}
        wanted = expected.get(uid, set())

        for missing in sorted(wanted - stored):
            yield Violation(
                kind=ViolationKind.SYMMETRY,
                user_id=uid,
                field="directReports",
                message=(
                    f"{missing!r} has managerId {uid!r} but is missing from "
                    f"{uid!r} directReports."
                ),
                related_ids=(missing,),
            )
        for extra in sorted(stored - wanted):
            actual = users.get(extra)
            actual_manager = _manager_of(actual) if actual is not None else None
            yield Violation(
                kind=ViolationKind.SYMMETRY,
                user_id=uid,
                field="directReports",
                message=(
                    f"{uid!r} lists {extra!r} in directReports but its managerId "
                    f"is {actual_manager!r}."
                ),
                related_ids=(extra,),
            )


def validate_hierarchy(
    population: Iterable[User],
    *,
    scope: Iterable[str] | None = None,
) -> ValidationResult:
    """
    Check acyclicity and managerId / directReports symmetry.

    scope restricts the walk starts and the symmetry diff to the given ids;
    cycles reachable from a scoped node are still found in full.
    """
    users = index_by_id(population)
    wanted = None if scope is None else {sid for sid in scope if sid is not None}

    violations: List[Violation] = []
    violations.extend(_detect_cycles(users, wanted))
    violations.extend(_check_symmetry(users, wanted))
    return ValidationResult.of(violations)


def validate_population(
    population: Iterable[User],
    *,
    placements: PlacementCatalog | None = None,
    policy: ValidationPolicy = DEFAULT_POLICY,
) -> ValidationResult:
    """Every record plus the hierarchy. Used for full audits."""
    users = list(population)
    result = ValidationResult()
    for user in users:
        result = result.merge(
            validate_user(user, users, placements=placements, policy=policy)
        )
    return result.merge(validate_hierarchy(users))
