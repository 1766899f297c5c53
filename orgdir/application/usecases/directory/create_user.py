"""
===============================================================================
USE CASE: Create User (Onboarding)
===============================================================================

Name:
    Create User Use Case

Business Goal:
    Add a new person to the directory and, when a manager is given, link the
    person under that manager so managerId and directReports stay in step.

Why (Context):
    - Onboarding is the main producer of new hierarchy edges; doing it through
      set_manager keeps one code path for every managerId change.
    - Invariants:
        * name, email and role must be valid
        * id and email must be unique (email compared case-insensitively)
        * manager, department and team must reference existing records
        * the resulting hierarchy must still be acyclic and symmetric

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateUserUseCase

Responsibilities:
    - Normalize name/email and assign an id when none is supplied.
    - Validate the candidate record against the current population.
    - Link the candidate under its manager (domain.hierarchy.set_manager).
    - Commit the new population inside one unit of work.

Collaborators:
    - UserDirectoryRepository.unit_of_work() -> DirectoryUnitOfWork
    - PlacementCatalog (optional): department/team existence
    - domain.directory_rules.validate_user, validate_hierarchy
    - domain.hierarchy.set_manager
    - directory_results: UserResult / error_from_violations

-------------------------------------------------------------------------------
INPUTS / OUTPUTS
-------------------------------------------------------------------------------
Inputs:
    - CreateUserInput (name, email, role, optional placement fields,
      manager_id, user_id)

Outputs:
    - UserResult:
        - user: the stored User (directReports empty, managerId linked)
        - error: DirectoryError | None

Error Mapping:
    - VALIDATION_ERROR: invalid field values
    - CONFLICT: id or email already taken
    - NOT_FOUND: manager / department / team does not exist
    - HIERARCHY_VIOLATION: linking would break the hierarchy
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable
from uuid import uuid4

from ....context import operation_scope
from ....domain.directory_rules import validate_hierarchy, validate_user
from ....domain.entities import User, UserRole
from ....domain.hierarchy import set_manager
from ....domain.repositories import PlacementCatalog, UserDirectoryRepository
from ....domain.value_objects import DEFAULT_POLICY, ValidationPolicy
from .directory_results import UserResult, error_from_violations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateUserInput:
    """
    Input DTO.

    Notes:
      - user_id: lets an importer keep ids from an upstream system; a new
        uuid4 hex is assigned otherwise.
      - role accepts the enum or its string value.
    """

    name: str
    email: str
    role: UserRole | str
    department_id: str | None = None
    team_id: str | None = None
    position: str | None = None
    hire_date: date | str | None = None
    profile_image: str | None = None
    manager_id: str | None = None
    user_id: str | None = None


class CreateUserUseCase:
    """
    Use Case (Application Service / Command):
        Onboards a user and links it into the reporting hierarchy.
    """

    def __init__(
        self,
        repository: UserDirectoryRepository,
        placements: PlacementCatalog | None = None,
        *,
        policy: ValidationPolicy = DEFAULT_POLICY,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._users = repository
        self._placements = placements
        self._policy = policy
        self._new_id = id_factory or (lambda: uuid4().hex)

    def execute(self, input_data: CreateUserInput) -> UserResult:
        with operation_scope("create_user"):
            # -----------------------------------------------------------------
            # 1) Build the candidate record.
            # -----------------------------------------------------------------
            user_id = (input_data.user_id or "").strip() or self._new_id()
            candidate = User(
                id=user_id,
                name=self._normalize(input_data.name),
                email=self._normalize(input_data.email),
                role=input_data.role,
                department_id=input_data.department_id,
                team_id=input_data.team_id,
                position=input_data.position,
                hire_date=input_data.hire_date,
                profile_image=input_data.profile_image,
                manager_id=input_data.manager_id,
                direct_reports=frozenset(),
            )

            with self._users.unit_of_work() as uow:
                population = uow.snapshot()

                # -------------------------------------------------------------
                # 2) Validate the record against the population.
                # -------------------------------------------------------------
                checked = validate_user(
                    candidate,
                    population,
                    placements=self._placements,
                    policy=self._policy,
                )
                if not checked.ok:
                    logger.info(
                        "Create user rejected",
                        extra={
                            "user_id": user_id,
                            "violations": sorted(k.value for k in checked.kinds()),
                        },
                    )
                    return UserResult(error=error_from_violations(checked))

                # -------------------------------------------------------------
                # 3) Insert as a root, then link under the manager.
                # -------------------------------------------------------------
                staged = candidate.with_manager(None)
                population = [*population, staged]
                created = staged
                if input_data.manager_id is not None:
                    change = set_manager(staged, input_data.manager_id, population)
                    if not change.ok:
                        logger.info(
                            "Create user rejected by hierarchy",
                            extra={
                                "user_id": user_id,
                                "violations": sorted(
                                    k.value for k in change.result.kinds()
                                ),
                            },
                        )
                        return UserResult(error=error_from_violations(change.result))
                    population = list(change.population)
                    created = change.user or staged

                # -------------------------------------------------------------
                # 4) Existing records may already name the new id as manager.
                # -------------------------------------------------------------
                linked = validate_hierarchy(population, scope={created.id})
                if not linked.ok:
                    logger.info(
                        "Create user rejected by hierarchy",
                        extra={
                            "user_id": user_id,
                            "violations": sorted(k.value for k in linked.kinds()),
                        },
                    )
                    return UserResult(error=error_from_violations(linked))

                # -------------------------------------------------------------
                # 5) Commit.
                # -------------------------------------------------------------
                uow.commit(population)

            logger.info(
                "User created. user_id=%s manager_id=%s",
                created.id,
                created.manager_id,
            )
            return UserResult(user=created)

    @staticmethod
    def _normalize(raw: object) -> object:
        return raw.strip() if isinstance(raw, str) else raw

