"""
Name: User Entity Unit Tests

Responsibilities:
  - Test User construction and coercions (role, directReports, hireDate)
  - Test present/absent handling of optional fields
  - Test the copy helpers used by hierarchy mutations
"""

from datetime import date

import pytest

from orgdir.domain.entities import User, UserRole


@pytest.mark.unit
class TestUserRole:
    def test_parse_known_value(self):
        """R: Should parse the string value of a role."""
        assert UserRole.parse("hr_admin") is UserRole.HR_ADMIN

    def test_parse_unknown_value_returns_none(self):
        """R: Should not fall back to a default role."""
        assert UserRole.parse("contractor") is None
        assert UserRole.parse(None) is None
        assert UserRole.parse(3) is None

    def test_role_set_is_closed(self):
        assert {r.value for r in UserRole} == {
            "employee",
            "manager",
            "hr_admin",
            "executive",
        }


@pytest.mark.unit
class TestUser:
    def test_create_with_required_fields(self):
        """R: Optional fields default to absent (None)."""
        user = User(id="u1", name="Ana", email="ana@acme.io", role="employee")

        assert user.role is UserRole.EMPLOYEE
        assert user.department_id is None
        assert user.team_id is None
        assert user.position is None
        assert user.hire_date is None
        assert user.profile_image is None
        assert user.manager_id is None
        assert user.direct_reports is None
        assert user.is_root

    def test_unknown_role_is_kept_verbatim(self):
        """R: Unknown roles survive construction so validation can report them."""
        user = User(id="u1", name="Ana", email="ana@acme.io", role="contractor")
        assert user.role == "contractor"

    def test_direct_reports_list_becomes_frozenset(self):
        user = User(
            id="m", name="M", email="m@acme.io", role="manager",
            direct_reports=["a", "b", "a"],
        )
        assert user.direct_reports == frozenset({"a", "b"})

    def test_empty_direct_reports_is_present(self):
        """R: An empty set is a present value, distinct from absent."""
        user = User(
            id="m", name="M", email="m@acme.io", role="manager", direct_reports=[]
        )
        assert user.direct_reports == frozenset()
        assert user.direct_reports is not None

    def test_iso_hire_date_string_is_parsed(self):
        user = User(
            id="u", name="U", email="u@acme.io", role="employee",
            hire_date="2021-03-15",
        )
        assert user.hire_date == date(2021, 3, 15)

    def test_invalid_hire_date_string_is_kept(self):
        user = User(
            id="u", name="U", email="u@acme.io", role="employee",
            hire_date="15/03/2021",
        )
        assert user.hire_date == "15/03/2021"

    @pytest.mark.parametrize("raw", ["2024-W01-1", "20240101", "2024-001"])
    def test_non_calendar_iso_forms_are_kept_as_text(self, raw):
        """R: Week dates, ordinal dates and the basic format are never coerced."""
        user = User(
            id="u", name="U", email="u@acme.io", role="employee", hire_date=raw,
        )
        assert user.hire_date == raw

    def test_reports_property_is_empty_when_absent(self):
        user = User(id="u", name="U", email="u@acme.io", role="employee")
        assert user.reports == frozenset()

    def test_with_manager_returns_new_instance(self):
        user = User(id="u", name="U", email="u@acme.io", role="employee")
        moved = user.with_manager("boss")

        assert moved is not user
        assert moved.manager_id == "boss"
        assert user.manager_id is None
        assert not moved.is_root

    def test_with_reports_returns_new_instance(self):
        user = User(id="m", name="M", email="m@acme.io", role="manager")
        updated = user.with_reports(["a"])

        assert updated.direct_reports == frozenset({"a"})
        assert user.direct_reports is None
