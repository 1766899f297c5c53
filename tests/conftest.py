"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Put the project root on sys.path (tests run without installing)
  - Keep Settings independent from any local .env file
  - Provide user factories and a small, valid organization

Collaborators:
  - pytest: Test framework
  - orgdir.domain: User, with_derived_reports
  - orgdir.infrastructure: in-memory repositories

Notes:
  - The "org" fixture is symmetric and acyclic:

        alice (executive)
        ├── bob (manager)
        │   ├── dave
        │   └── erin
        └── carol (manager)
            └── frank
"""

import sys
from pathlib import Path
from typing import Callable, List

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from orgdir.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from orgdir.domain import User, UserRole, with_derived_reports  # noqa: E402
from orgdir.infrastructure.repositories import (  # noqa: E402
    InMemoryPlacementCatalog,
    InMemoryUserDirectoryRepository,
)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# User Factories
# ============================================================================


def build_user(
    user_id: str,
    *,
    manager_id: str | None = None,
    role: UserRole | str = UserRole.EMPLOYEE,
    **fields,
) -> User:
    """R: User with derived defaults for name/email (email on acme.io)."""
    fields.setdefault("name", user_id.capitalize())
    fields.setdefault("email", f"{user_id}@acme.io")
    return User(id=user_id, role=role, manager_id=manager_id, **fields)


@pytest.fixture
def make_user() -> Callable[..., User]:
    """R: Factory fixture around build_user."""
    return build_user


@pytest.fixture
def org() -> List[User]:
    """R: Small valid organization (see module docstring)."""
    return list(
        with_derived_reports(
            [
                build_user("alice", role=UserRole.EXECUTIVE, department_id="eng"),
                build_user(
                    "bob", manager_id="alice", role=UserRole.MANAGER,
                    department_id="eng", team_id="platform",
                ),
                build_user(
                    "carol", manager_id="alice", role=UserRole.MANAGER,
                    department_id="sales", team_id="emea",
                ),
                build_user(
                    "dave", manager_id="bob", department_id="eng", team_id="platform",
                ),
                build_user(
                    "erin", manager_id="bob", department_id="eng", team_id="platform",
                ),
                build_user(
                    "frank", manager_id="carol", department_id="sales", team_id="emea",
                ),
            ]
        )
    )


# ============================================================================
# Repository Fixtures
# ============================================================================


@pytest.fixture
def placements() -> InMemoryPlacementCatalog:
    """R: Catalog holding the departments and teams used by org."""
    return InMemoryPlacementCatalog(
        department_ids=("eng", "sales"),
        team_ids=("platform", "emea"),
    )


@pytest.fixture
def repository(org: List[User]) -> InMemoryUserDirectoryRepository:
    """R: In-memory directory seeded with org."""
    return InMemoryUserDirectoryRepository(org)
