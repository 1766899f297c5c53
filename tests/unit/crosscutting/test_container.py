"""
Name: Composition Root Tests

Responsibilities:
  - Repository singletons and seed loading from ORGDIR_SEED_FILE
  - Placement catalog only when the seed declares placements
  - Use case factories wired to the shared repository
"""

import json
import logging

import pytest

from orgdir import container
from orgdir.application.usecases.directory import CreateUserInput, DirectoryErrorCode

pytestmark = pytest.mark.unit


SEED = {
    "users": [
        {
            "id": "m1",
            "name": "Mara",
            "email": "mara@acme.io",
            "role": "executive",
            "departmentId": "eng",
            "directReports": ["e1"],
        },
        {
            "id": "e1",
            "name": "Eli",
            "email": "eli@acme.io",
            "role": "employee",
            "departmentId": "eng",
            "managerId": "m1",
        },
    ],
    "departments": ["eng"],
}


@pytest.fixture(autouse=True)
def _fresh_container(monkeypatch):
    monkeypatch.delenv("ORGDIR_SEED_FILE", raising=False)
    container.reset_container()
    yield
    container.reset_container()


@pytest.fixture
def seeded(tmp_path, monkeypatch):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(SEED), encoding="utf-8")
    monkeypatch.setenv("ORGDIR_SEED_FILE", str(path))
    container.reset_container()
    return path


def test_empty_directory_without_seed():
    assert container.get_user_repository().list_users() == []
    assert container.get_placement_catalog() is None


def test_repository_is_a_singleton():
    assert container.get_user_repository() is container.get_user_repository()


def test_seed_file_populates_repository(seeded):
    repo = container.get_user_repository()

    assert [u.id for u in repo.list_users()] == ["e1", "m1"]
    catalog = container.get_placement_catalog()
    assert catalog.department_exists("eng")
    assert not catalog.team_exists("platform")


def test_use_cases_share_the_repository(seeded):
    created = container.get_create_user_use_case().execute(
        CreateUserInput(
            name="Noa",
            email="noa@acme.io",
            role="employee",
            department_id="eng",
            manager_id="m1",
            user_id="n1",
        )
    )

    assert created.error is None
    chain = container.get_reporting_chain_use_case().execute("n1")
    assert [u.id for u in chain.users] == ["m1"]
    assert container.get_audit_directory_use_case().execute().ok


def test_seeded_catalog_rejects_unknown_department(seeded):
    result = container.get_update_user_use_case().execute("e1", department_id="ops")
    assert result.error.code == DirectoryErrorCode.NOT_FOUND


def test_configure_logging_uses_settings(monkeypatch):
    monkeypatch.setenv("ORGDIR_LOG_LEVEL", "WARNING")
    container.reset_container()

    log = container.configure_logging()

    assert log.name == "orgdir"
    assert log.level == logging.WARNING


def test_composing_a_use_case_configures_logging(monkeypatch):
    """R: Use case log lines have a handler without any extra setup call."""
    monkeypatch.setenv("ORGDIR_LOG_LEVEL", "ERROR")
    container.reset_container()

    container.get_get_user_use_case()

    log = logging.getLogger("orgdir")
    assert log.level == logging.ERROR
    assert any(getattr(h, "_orgdir_handler", False) for h in log.handlers)
