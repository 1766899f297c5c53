"""
Name: Directory Use Case Tests

Responsibilities:
  - Commands: create, update, set manager, remove (typed errors, atomicity)
  - Queries: get, list, org chart, audit
  - Error code mapping from violation kinds
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from orgdir.application.usecases.directory import (
    AuditDirectoryUseCase,
    CreateUserInput,
    CreateUserUseCase,
    DirectoryErrorCode,
    GetDirectReportsUseCase,
    GetReportingChainUseCase,
    GetSubordinatesUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    RemoveUserUseCase,
    SetManagerUseCase,
    UpdateUserUseCase,
    code_for,
)
from orgdir.domain import (
    UserRole,
    ValidationResult,
    Violation,
    ViolationKind,
    validate_hierarchy,
)
from orgdir.infrastructure.repositories import InMemoryUserDirectoryRepository

pytestmark = pytest.mark.unit


def _ids(users) -> list[str]:
    return [u.id for u in users]


def _new_hire(**overrides) -> CreateUserInput:
    data = dict(
        name="  Gina  ",
        email="gina@acme.io",
        role="employee",
        department_id="eng",
        team_id="platform",
        manager_id="bob",
    )
    data.update(overrides)
    return CreateUserInput(**data)


# =============================================================================
# CreateUserUseCase
# =============================================================================


def test_create_user_links_under_manager(repository, placements):
    use_case = CreateUserUseCase(repository, placements, id_factory=lambda: "gina")

    result = use_case.execute(_new_hire())

    assert result.error is None
    assert result.user.id == "gina"
    assert result.user.name == "Gina"
    assert result.user.manager_id == "bob"
    assert result.user.direct_reports == frozenset()
    assert repository.get_user("bob").direct_reports == frozenset(
        {"dave", "erin", "gina"}
    )
    assert validate_hierarchy(repository.list_users()).ok


def test_create_user_as_root(repository):
    result = CreateUserUseCase(repository).execute(
        _new_hire(manager_id=None, user_id="gina")
    )

    assert result.error is None
    assert repository.get_user("gina").is_root


def test_create_root_claimed_as_manager_is_rejected(make_user):
    """R: A new id that existing records already name as manager is refused."""
    orphan = make_user("x", manager_id="n1")
    repository = InMemoryUserDirectoryRepository([orphan])

    result = CreateUserUseCase(repository).execute(
        _new_hire(manager_id=None, user_id="n1", department_id=None, team_id=None)
    )

    assert result.user is None
    assert result.error.code == DirectoryErrorCode.HIERARCHY_VIOLATION
    assert result.error.kinds == {ViolationKind.SYMMETRY}
    assert _ids(repository.list_users()) == ["x"]


def test_create_user_assigns_id_when_missing(repository):
    result = CreateUserUseCase(repository).execute(_new_hire())

    assert result.user.id
    assert repository.get_user(result.user.id) is not None


def test_create_user_duplicate_email_is_conflict(repository, org):
    result = CreateUserUseCase(repository).execute(_new_hire(email="DAVE@acme.io"))

    assert result.error.code == DirectoryErrorCode.CONFLICT
    assert result.error.kinds == {ViolationKind.UNIQUENESS}
    assert len(repository) == len(org)


def test_create_user_duplicate_id_is_conflict(repository):
    result = CreateUserUseCase(repository).execute(_new_hire(user_id="dave"))
    assert result.error.code == DirectoryErrorCode.CONFLICT


def test_create_user_unknown_role_is_validation_error(repository):
    result = CreateUserUseCase(repository).execute(_new_hire(role="contractor"))

    assert result.error.code == DirectoryErrorCode.VALIDATION_ERROR
    assert result.user is None


def test_create_user_unknown_manager_is_not_found(repository, org):
    result = CreateUserUseCase(repository).execute(_new_hire(manager_id="ghost"))

    assert result.error.code == DirectoryErrorCode.NOT_FOUND
    assert len(repository) == len(org)


def test_create_user_unknown_department_is_not_found(repository, placements):
    result = CreateUserUseCase(repository, placements).execute(
        _new_hire(department_id="legal")
    )
    assert result.error.code == DirectoryErrorCode.NOT_FOUND


def test_create_user_reports_every_violation(repository):
    result = CreateUserUseCase(repository).execute(
        _new_hire(name="", email="nope", role="contractor")
    )

    assert result.error.code == DirectoryErrorCode.VALIDATION_ERROR
    assert {v.field for v in result.error.violations} == {"name", "email", "role"}


# =============================================================================
# UpdateUserUseCase
# =============================================================================


def test_update_user_changes_fields(repository):
    result = UpdateUserUseCase(repository).execute(
        "dave",
        position="Staff Engineer",
        role=UserRole.MANAGER,
        hire_date=date(2019, 5, 1),
    )

    stored = repository.get_user("dave")
    assert result.error is None
    assert stored.position == "Staff Engineer"
    assert stored.role is UserRole.MANAGER
    assert stored.hire_date == date(2019, 5, 1)
    assert stored.manager_id == "bob"


def test_update_user_clears_optional_fields(repository):
    result = UpdateUserUseCase(repository).execute("dave", clear=["team_id"])

    assert result.error is None
    assert repository.get_user("dave").team_id is None


def test_update_user_without_fields_is_validation_error(repository):
    result = UpdateUserUseCase(repository).execute("dave")
    assert result.error.code == DirectoryErrorCode.VALIDATION_ERROR


def test_update_user_cannot_clear_required_or_hierarchy_fields(repository):
    result = UpdateUserUseCase(repository).execute("dave", clear=["manager_id", "name"])

    assert result.error.code == DirectoryErrorCode.VALIDATION_ERROR
    assert "manager_id" in result.error.message


def test_update_user_set_and_clear_same_field(repository):
    result = UpdateUserUseCase(repository).execute(
        "dave", team_id="emea", clear=["team_id"]
    )
    assert result.error.code == DirectoryErrorCode.VALIDATION_ERROR


def test_update_user_email_conflict(repository):
    result = UpdateUserUseCase(repository).execute("dave", email="BOB@acme.io")

    assert result.error.code == DirectoryErrorCode.CONFLICT
    assert repository.get_user("dave").email == "dave@acme.io"


def test_update_user_may_recase_own_email(repository):
    result = UpdateUserUseCase(repository).execute("dave", email="Dave@Acme.io")

    assert result.error is None
    assert repository.get_user("dave").email == "Dave@Acme.io"


def test_update_user_invalid_name(repository):
    result = UpdateUserUseCase(repository).execute("dave", name="   ")
    assert result.error.code == DirectoryErrorCode.VALIDATION_ERROR


def test_update_unknown_user_is_not_found(repository):
    result = UpdateUserUseCase(repository).execute("ghost", position="x")
    assert result.error.code == DirectoryErrorCode.NOT_FOUND


# =============================================================================
# SetManagerUseCase
# =============================================================================


def test_set_manager_commits_move(repository):
    result = SetManagerUseCase(repository).execute("dave", "carol")

    assert result.error is None
    assert repository.get_user("dave").manager_id == "carol"
    assert repository.get_user("bob").direct_reports == frozenset({"erin"})
    assert "dave" in repository.get_user("carol").direct_reports


def test_set_manager_cycle_is_rejected_atomically(repository, org):
    before = repository.list_users()

    result = SetManagerUseCase(repository).execute("alice", "dave")

    assert result.error.code == DirectoryErrorCode.HIERARCHY_VIOLATION
    assert result.error.violations[0].cycle == ("alice", "dave", "bob", "alice")
    assert repository.list_users() == before


def test_set_manager_unknown_user(repository):
    result = SetManagerUseCase(repository).execute("ghost", "alice")
    assert result.error.code == DirectoryErrorCode.NOT_FOUND


def test_set_manager_unknown_manager(repository):
    result = SetManagerUseCase(repository).execute("dave", "ghost")
    assert result.error.code == DirectoryErrorCode.NOT_FOUND


def test_set_manager_self_is_hierarchy_violation(repository):
    result = SetManagerUseCase(repository).execute("dave", "dave")
    assert result.error.code == DirectoryErrorCode.HIERARCHY_VIOLATION


def test_set_manager_same_manager_is_a_no_op(repository):
    result = SetManagerUseCase(repository).execute("dave", "bob")

    assert result.error is None
    assert result.user.manager_id == "bob"


# =============================================================================
# RemoveUserUseCase
# =============================================================================


def test_remove_user_reassigns_reports(repository):
    result = RemoveUserUseCase(repository).execute("bob", reassign_to="carol")

    assert result.error is None
    assert result.removed
    assert result.reassigned_ids == ("dave", "erin")
    assert repository.get_user("bob") is None
    assert repository.get_user("dave").manager_id == "carol"
    assert validate_hierarchy(repository.list_users()).ok


def test_remove_user_without_successor(repository):
    result = RemoveUserUseCase(repository).execute("carol")

    assert result.removed
    assert repository.get_user("frank").is_root
    assert repository.get_user("alice").direct_reports == frozenset({"bob"})


def test_remove_unknown_user_is_not_found(repository):
    result = RemoveUserUseCase(repository).execute("ghost")

    assert not result.removed
    assert result.error.code == DirectoryErrorCode.NOT_FOUND


def test_remove_user_to_deeper_descendant_is_rejected(repository, org):
    result = RemoveUserUseCase(repository).execute("alice", reassign_to="dave")

    assert result.error.code == DirectoryErrorCode.HIERARCHY_VIOLATION
    assert len(repository) == len(org)


# =============================================================================
# Queries
# =============================================================================


def test_get_user_by_id_and_email(repository):
    use_case = GetUserUseCase(repository)

    assert use_case.execute(user_id="erin").user.id == "erin"
    assert use_case.execute(email="ERIN@acme.io").user.id == "erin"


@pytest.mark.parametrize(
    "kwargs", [{}, {"user_id": "erin", "email": "erin@acme.io"}]
)
def test_get_user_requires_exactly_one_key(repository, kwargs):
    result = GetUserUseCase(repository).execute(**kwargs)
    assert result.error.code == DirectoryErrorCode.VALIDATION_ERROR


def test_get_user_not_found(repository):
    result = GetUserUseCase(repository).execute(email="nobody@acme.io")
    assert result.error.code == DirectoryErrorCode.NOT_FOUND


def test_list_users_filters(repository):
    use_case = ListUsersUseCase(repository)

    assert _ids(use_case.execute().users) == [
        "alice",
        "bob",
        "carol",
        "dave",
        "erin",
        "frank",
    ]
    assert _ids(use_case.execute(department_id="sales").users) == ["carol", "frank"]
    assert _ids(use_case.execute(team_id="platform").users) == ["bob", "dave", "erin"]
    assert _ids(
        use_case.execute(department_id="eng", role="manager").users
    ) == ["bob"]
    assert _ids(
        use_case.execute(department_id="eng", team_id="emea").users
    ) == []


def test_list_users_unknown_role(repository):
    result = ListUsersUseCase(repository).execute(role="contractor")

    assert result.error.code == DirectoryErrorCode.VALIDATION_ERROR
    assert result.users == []


def test_org_chart_queries(repository):
    assert _ids(GetDirectReportsUseCase(repository).execute("alice").users) == [
        "bob",
        "carol",
    ]
    assert _ids(GetReportingChainUseCase(repository).execute("dave").users) == [
        "bob",
        "alice",
    ]
    assert _ids(GetSubordinatesUseCase(repository).execute("bob").users) == [
        "dave",
        "erin",
    ]
    assert GetDirectReportsUseCase(repository).execute("frank").users == []


@pytest.mark.parametrize(
    "use_case_cls",
    [GetDirectReportsUseCase, GetReportingChainUseCase, GetSubordinatesUseCase],
)
def test_org_chart_unknown_user(repository, use_case_cls):
    result = use_case_cls(repository).execute("ghost")
    assert result.error.code == DirectoryErrorCode.NOT_FOUND


def test_audit_clean_directory(repository, placements, org):
    report = AuditDirectoryUseCase(repository, placements).execute()

    assert report.ok
    assert report.user_count == len(org)
    assert report.counts_by_kind() == {}


def test_audit_reports_corruption_without_repairing(org):
    corrupted = [
        replace(u, direct_reports=frozenset()) if u.id == "carol" else u
        for u in org
    ]
    repository = InMemoryUserDirectoryRepository(corrupted)

    report = AuditDirectoryUseCase(repository).execute()

    assert not report.ok
    assert report.counts_by_kind() == {"SymmetryViolation": 1}
    assert repository.get_user("carol").direct_reports == frozenset()


# =============================================================================
# Error mapping
# =============================================================================


def _violation(kind: ViolationKind) -> Violation:
    return Violation(kind=kind, user_id="u", field=None, message="m")


@pytest.mark.parametrize(
    ("kinds", "expected"),
    [
        ([ViolationKind.HIERARCHY_CYCLE], DirectoryErrorCode.HIERARCHY_VIOLATION),
        ([ViolationKind.SYMMETRY], DirectoryErrorCode.HIERARCHY_VIOLATION),
        ([ViolationKind.SELF_REFERENCE], DirectoryErrorCode.HIERARCHY_VIOLATION),
        ([ViolationKind.REFERENTIAL_INTEGRITY], DirectoryErrorCode.NOT_FOUND),
        ([ViolationKind.UNIQUENESS], DirectoryErrorCode.CONFLICT),
        (
            [ViolationKind.UNIQUENESS, ViolationKind.FIELD_CONSTRAINT],
            DirectoryErrorCode.VALIDATION_ERROR,
        ),
    ],
)
def test_code_for(kinds, expected):
    result = ValidationResult.of(_violation(k) for k in kinds)
    assert code_for(result) == expected
