"""
============================================================
CRC CARD — infrastructure/repositories/in_memory/placement_catalog.py
============================================================
Class: InMemoryPlacementCatalog

Responsibilities:
  - Hold the ids of external Departments and Teams (tests / local tooling).
  - Answer existence checks for departmentId / teamId references.

Collaborators:
  - domain.repositories.PlacementCatalog (contract)

Constraints / Notes:
  - Thread-safe: Lock protects both sets.
  - Read-mostly: registration exists only to build fixtures and seeds.
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import Iterable, List, Set

from ....domain.repositories import PlacementCatalog


class InMemoryPlacementCatalog(PlacementCatalog):
    """In-memory catalog of department and team ids."""

    def __init__(
        self,
        *,
        department_ids: Iterable[str] = (),
        team_ids: Iterable[str] = (),
    ) -> None:
        self._lock = Lock()
        self._departments: Set[str] = set(department_ids)
        self._teams: Set[str] = set(team_ids)

    def department_exists(self, department_id: str) -> bool:
        with self._lock:
            return department_id in self._departments

    def team_exists(self, team_id: str) -> bool:
        with self._lock:
            return team_id in self._teams

    def add_department(self, department_id: str) -> None:
        with self._lock:
            self._departments.add(department_id)

    def add_team(self, team_id: str) -> None:
        with self._lock:
            self._teams.add(team_id)

    def list_department_ids(self) -> List[str]:
        with self._lock:
            return sorted(self._departments)

    def list_team_ids(self) -> List[str]:
        with self._lock:
            return sorted(self._teams)
