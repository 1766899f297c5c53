"""
===============================================================================
CRC CARD — interfaces/records.py
===============================================================================

Module:
    Record schema at the persistence boundary

Responsibilities:
    - Define UserRecord: the camelCase attribute table exchanged with the
      persistence collaborator (id, name, email, role, departmentId, teamId,
      position, hireDate, profileImage, managerId, directReports).
    - Map records to/from the domain User, keeping absent keys absent.
    - Parse whole exports (parse_population) and dump them back.
    - Read directory files: a JSON list of records, or an object with
      "users" plus optional "departments" / "teams" id lists.

Collaborators:
    - domain.entities.User
    - domain.hierarchy.with_derived_reports (records without directReports)
    - crosscutting.exceptions.RecordFormatError
    - pydantic: shape parsing

Notes:
    - Parsing checks SHAPE only (mapping, required keys, text types). Values
      such as an unknown role or a bad date survive so that the domain
      validation can report them as violations.
===============================================================================
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..crosscutting.exceptions import RecordFormatError
from ..domain.entities import User, UserRole
from ..domain.hierarchy import with_derived_reports


class UserRecord(BaseModel):
    """One User record as stored/exported."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    email: str
    role: str
    department_id: str | None = Field(default=None, alias="departmentId")
    team_id: str | None = Field(default=None, alias="teamId")
    position: str | None = None
    hire_date: str | None = Field(default=None, alias="hireDate")
    profile_image: str | None = Field(default=None, alias="profileImage")
    manager_id: str | None = Field(default=None, alias="managerId")
    direct_reports: list[str] | None = Field(default=None, alias="directReports")

    def to_entity(self) -> User:
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            department_id=self.department_id,
            team_id=self.team_id,
            position=self.position,
            hire_date=self.hire_date,
            profile_image=self.profile_image,
            manager_id=self.manager_id,
            direct_reports=(
                frozenset(self.direct_reports)
                if self.direct_reports is not None
                else None
            ),
        )

    @classmethod
    def from_entity(cls, user: User) -> "UserRecord":
        hire_date = user.hire_date
        if isinstance(hire_date, date):
            hire_date = hire_date.isoformat()
        role = user.role.value if isinstance(user.role, UserRole) else str(user.role)
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=role,
            department_id=user.department_id,
            team_id=user.team_id,
            position=user.position,
            hire_date=hire_date,
            profile_image=user.profile_image,
            manager_id=user.manager_id,
            direct_reports=(
                sorted(user.direct_reports)
                if user.direct_reports is not None
                else None
            ),
        )

    def to_record(self) -> dict[str, Any]:
        """camelCase dict; absent optional fields are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


def parse_record(raw: object, *, index: int | None = None) -> User:
    """Parse one record into a User. Raises RecordFormatError on bad shape."""
    label = "record" if index is None else f"record {index}"
    if not isinstance(raw, Mapping):
        raise RecordFormatError(f"{label} is not a mapping", index=index)
    try:
        return UserRecord.model_validate(raw).to_entity()
    except ValidationError as exc:
        problems = ", ".join(
            ".".join(str(part) for part in err["loc"]) or "record"
            for err in exc.errors()
        )
        raise RecordFormatError(
            f"{label} is malformed ({problems})",
            index=index,
            original_error=exc,
        ) from exc


def parse_population(
    records: Iterable[object],
    *,
    derive_reports: bool = False,
) -> List[User]:
    """
    Parse an export into Users, in the given order.

    derive_reports=True fills directReports from managerId links for records
    that omit the key. Records that carry directReports keep them as given.
    """
    users = [parse_record(raw, index=i) for i, raw in enumerate(records)]
    if derive_reports:
        return list(with_derived_reports(users))
    return users


def dump_population(users: Sequence[User]) -> List[dict[str, Any]]:
    return [UserRecord.from_entity(user).to_record() for user in users]


@dataclass(frozen=True)
class DirectoryExport:
    """Contents of a directory file. Placement ids are None when not declared."""

    users: List[User]
    department_ids: Tuple[str, ...] | None = None
    team_ids: Tuple[str, ...] | None = None


def _id_list(payload: Mapping[str, Any], key: str) -> Tuple[str, ...] | None:
    raw = payload.get(key)
    if raw is None:
        return None
    if not isinstance(raw, list) or not all(isinstance(i, str) for i in raw):
        raise RecordFormatError(f"{key!r} must be a list of ids")
    return tuple(raw)


def read_directory_file(
    path: str | Path, *, derive_reports: bool = False
) -> DirectoryExport:
    """
    Load a directory file.

    Raises:
        RecordFormatError: unreadable JSON or unexpected top-level shape
        OSError: the file cannot be opened
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RecordFormatError(
            f"{path} is not valid JSON: {exc.msg}", original_error=exc
        ) from exc

    if isinstance(payload, list):
        return DirectoryExport(
            users=parse_population(payload, derive_reports=derive_reports)
        )
    if isinstance(payload, Mapping) and isinstance(payload.get("users"), list):
        return DirectoryExport(
            users=parse_population(payload["users"], derive_reports=derive_reports),
            department_ids=_id_list(payload, "departments"),
            team_ids=_id_list(payload, "teams"),
        )
    raise RecordFormatError(
        f"{path} must hold a list of records or an object with a 'users' list"
    )
