"""
===============================================================================
CRC CARD — domain/entities.py
===============================================================================

Module:
    Domain entities (User, UserRole)

Responsibilities:
    - Define the User record of the organization directory (no infrastructure).
    - Keep the present/absent distinction of optional fields explicit:
      None means absent, "" and frozenset() are present values.
    - Offer minimal helpers (is_root, reports) used by the rules.

Collaborators:
    - domain.directory_rules: validates these records.
    - domain.hierarchy: derives and mutates the reporting structure.
    - interfaces.records: maps camelCase records to/from this entity.

Principles:
    - No dependency on pydantic/DB/HTTP.
    - Construction never raises: malformed values survive so that validation
      can report them.
===============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import FrozenSet, Iterable, Optional


class UserRole(str, Enum):
    """
    Roles of the directory.

    The set is exhaustive: there is no default or fallback role.
    Role does not constrain the position in the reporting tree.
    """

    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR_ADMIN = "hr_admin"
    EXECUTIVE = "executive"

    @classmethod
    def parse(cls, value: object) -> "UserRole | None":
        """Known role for value, or None."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return None
        return None


def _coerce_reports(value: object) -> object:
    # Lists and tuples from records become sets; anything else is kept as-is
    # for the validator to report.
    if value is None or isinstance(value, frozenset):
        return value
    if isinstance(value, (list, tuple, set)):
        return frozenset(value)
    return value


_CALENDAR_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_calendar_date(raw: str) -> date | None:
    """
    YYYY-MM-DD text as a date, or None.

    Week dates (2024-W01-1) and the basic format (20240101) are rejected on
    every interpreter, although date.fromisoformat accepts them from 3.11.
    """
    text = raw.strip()
    if not _CALENDAR_DATE.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def _coerce_hire_date(value: object) -> object:
    if isinstance(value, str):
        parsed = parse_calendar_date(value)
        return value if parsed is None else parsed
    return value


@dataclass
class User:
    """
    One person in the organization.

    Required: id, name, email, role.
    Everything else is optional and None when absent.
    """

    id: str
    name: str
    email: str
    role: UserRole | str

    # Placement (external Department / Team)
    department_id: Optional[str] = None
    team_id: Optional[str] = None

    # Profile
    position: Optional[str] = None
    hire_date: date | str | None = None
    profile_image: Optional[str] = None

    # Reporting hierarchy
    manager_id: Optional[str] = None
    direct_reports: Optional[FrozenSet[str]] = None

    def __post_init__(self) -> None:
        role = UserRole.parse(self.role)
        if role is not None:
            self.role = role
        self.direct_reports = _coerce_reports(self.direct_reports)  # type: ignore[assignment]
        self.hire_date = _coerce_hire_date(self.hire_date)  # type: ignore[assignment]

    @property
    def is_root(self) -> bool:
        """True when the user has no manager."""
        return self.manager_id is None

    @property
    def reports(self) -> FrozenSet[str]:
        """Stored direct reports, empty when absent."""
        if isinstance(self.direct_reports, frozenset):
            return self.direct_reports
        return frozenset()

    def with_manager(self, manager_id: str | None) -> "User":
        return replace(self, manager_id=manager_id)

    def with_reports(self, report_ids: Iterable[str]) -> "User":
        return replace(self, direct_reports=frozenset(report_ids))
